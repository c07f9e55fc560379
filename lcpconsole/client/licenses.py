"""
Dashboard and license listing clients of the resource API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lcpconsole.client.crud import API_PREFIX
from lcpconsole.client.http import ApiClient
from lcpconsole.common.exceptions import ValidationError
from lcpconsole.common.models import BestSeller, DashboardInfo, LicenseSummary

if TYPE_CHECKING:
    from lcpconsole.common.interfaces import IHttpSession


class LicenseService(ApiClient):
    """Read-only view over the licenses known to the resource API."""

    def __init__(
        self,
        api_url: str,
        session: IHttpSession | None = None,
        auth: tuple[str, str] | None = None,
        api_prefix: str = API_PREFIX,
    ) -> None:
        super().__init__(api_url, session, auth)
        self.base_url = f"{self.api_url}{api_prefix}/licenses"

    def filtered(self, devices: int = 1) -> list[LicenseSummary]:
        """Licenses used by at least ``devices`` devices."""
        if devices < 1:
            msg = "devices must be a positive number"
            raise ValidationError(msg)
        response = self.request("get", self.base_url, params={"devices": devices})
        return [
            LicenseSummary.model_validate(item)
            for item in self.json_or_none(response) or []
        ]


class DashboardService(ApiClient):
    """Figures shown on the dashboard screen."""

    def info(self) -> DashboardInfo:
        response = self.request("get", f"{self.api_url}/dashboardInfos")
        return DashboardInfo.model_validate(response.json())

    def best_sellers(self) -> list[BestSeller]:
        response = self.request("get", f"{self.api_url}/dashboardBestSellers")
        return [
            BestSeller.model_validate(item)
            for item in self.json_or_none(response) or []
        ]
