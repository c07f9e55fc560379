"""
License request handler: filtered listing and per-license status actions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lcpconsole.common.exceptions import ValidationError

if TYPE_CHECKING:
    from lcpconsole.client.licenses import DashboardService, LicenseService
    from lcpconsole.common.interfaces import ILicenseStatusService
    from lcpconsole.common.models import (
        DeviceRequest,
        LicenseStatus,
        LicenseSummary,
        RegisteredDevices,
    )


class LicenseHandler:
    """Handles the license screens."""

    def __init__(
        self,
        licenses: LicenseService,
        license_status: ILicenseStatusService,
        dashboard: DashboardService,
    ):
        self.licenses = licenses
        self.license_status = license_status
        self.dashboard = dashboard

    def filtered(self, devices: int) -> list[LicenseSummary]:
        return self.licenses.filtered(devices)

    def status(self, license_id: str) -> LicenseStatus:
        return self.license_status.get(license_id)

    def registered(self, license_id: str) -> RegisteredDevices:
        return self.license_status.registered_devices(license_id)

    def register(self, license_id: str, req: DeviceRequest) -> LicenseStatus:
        if not req.device_id or not req.device_name:
            msg = "device_id and device_name are required"
            raise ValidationError(msg)
        self.license_status.register(license_id, req.device_id, req.device_name)
        return self.license_status.get(license_id)

    def dashboard_view(self) -> dict:
        return {
            "info": self.dashboard.info().model_dump(by_alias=True),
            "best_sellers": [b.model_dump() for b in self.dashboard.best_sellers()],
        }
