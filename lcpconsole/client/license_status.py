"""
License status service client: fetch, renew, return, register and revoke.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from lcpconsole.client.http import ApiClient
from lcpconsole.common.exceptions import LicenseStatusError, ValidationError
from lcpconsole.common.models import (
    STATUS_REVOKED,
    LicenseStatus,
    RegisteredDevices,
    as_utc,
)

if TYPE_CHECKING:
    from lcpconsole.common.interfaces import IHttpSession

MAX_DEVICE_FIELD_LEN = 255

REVOKE_OK = "The license has been revoked"
REVOKE_INCOMPATIBLE = "The license status is not compatible with a revocation"
REVOKE_NOT_FOUND = "The license was not found"
REVOKE_INTERNAL_ERROR = "An internal error occurred on the license status server"
REVOKE_UNEXPECTED = "Unexpected answer from the license status server (HTTP {})"


def revoke_message(status_code: int) -> str:
    """User-facing message for the outcome of a revoke request."""
    if 200 <= status_code < 300:  # noqa: PLR2004
        return REVOKE_OK
    if status_code == 400:  # noqa: PLR2004
        return REVOKE_INCOMPATIBLE
    if status_code in (401, 404):
        return REVOKE_NOT_FOUND
    if status_code >= 500:  # noqa: PLR2004
        return REVOKE_INTERNAL_ERROR
    return REVOKE_UNEXPECTED.format(status_code)


def _device_params(
    device_id: str | None, device_name: str | None
) -> dict[str, str]:
    params = {}
    for key, value in (("id", device_id), ("name", device_name)):
        if value:
            if len(value) > MAX_DEVICE_FIELD_LEN:
                msg = f"device {key} is limited to {MAX_DEVICE_FIELD_LEN} characters"
                raise ValidationError(msg)
            params[key] = value
    return params


class LicenseStatusService(ApiClient):
    """Client for the license status document endpoints.

    Each action is one request; callers re-fetch the status to refresh
    whatever they display.
    """

    error_class = LicenseStatusError

    def __init__(
        self,
        lsd_url: str,
        session: IHttpSession | None = None,
        auth: tuple[str, str] | None = None,
    ) -> None:
        super().__init__(lsd_url, session, auth)
        self.base_url = f"{self.api_url}/licenses"

    def _url(self, license_id: str, action: str) -> str:
        if not license_id:
            msg = "A license id is required"
            raise ValidationError(msg)
        return f"{self.base_url}/{license_id}/{action}"

    def get(self, license_id: str) -> LicenseStatus:
        response = self.request("get", self._url(license_id, "status"))
        return LicenseStatus.model_validate(response.json())

    def renew(
        self,
        license_id: str,
        end: datetime | None = None,
        device_id: str | None = None,
        device_name: str | None = None,
    ) -> LicenseStatus:
        """Extend a loan; without an end date the server applies its default."""
        params = _device_params(device_id, device_name)
        if end is not None:
            end = as_utc(end)
            if end <= datetime.now(timezone.utc):
                msg = "The new end date must be in the future"
                raise ValidationError(msg)
            params["end"] = end.isoformat(timespec="seconds").replace("+00:00", "Z")
        response = self.request(
            "put", self._url(license_id, "renew"), params=params or None
        )
        self.logger.info("Renewed license %s", license_id)
        return LicenseStatus.model_validate(response.json())

    def return_license(
        self,
        license_id: str,
        device_id: str | None = None,
        device_name: str | None = None,
    ) -> LicenseStatus:
        params = _device_params(device_id, device_name)
        response = self.request(
            "put", self._url(license_id, "return"), params=params or None
        )
        self.logger.info("Returned license %s", license_id)
        return LicenseStatus.model_validate(response.json())

    def register(
        self, license_id: str, device_id: str, device_name: str
    ) -> LicenseStatus:
        if not device_id or not device_name:
            msg = "device id and device name are mandatory"
            raise ValidationError(msg)
        response = self.request(
            "post",
            self._url(license_id, "register"),
            params=_device_params(device_id, device_name),
        )
        self.logger.info("Registered device %s for license %s", device_id, license_id)
        return LicenseStatus.model_validate(response.json())

    def revoke(self, license_id: str) -> str:
        """Revoke a license and return the message to show the operator."""
        try:
            self.request(
                "patch", self._url(license_id, "status"), json={"status": STATUS_REVOKED}
            )
        except LicenseStatusError as e:
            raise LicenseStatusError(
                revoke_message(e.status_code), e.status_code, e.body
            ) from e
        self.logger.info("Revoked license %s", license_id)
        return REVOKE_OK

    def registered_devices(self, license_id: str) -> RegisteredDevices:
        response = self.request("get", self._url(license_id, "registered"))
        return RegisteredDevices.model_validate(response.json())
