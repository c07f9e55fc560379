"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from lcpconsole.common.models import LicenseStatus, RegisteredDevices


class IHttpResponse(Protocol):
    """The parts of a response the clients rely on."""

    status_code: int
    text: str

    def json(self) -> Any: ...


class IHttpSession(Protocol):
    """Protocol for the HTTP session used by every client.

    ``requests.Session`` satisfies it, and so does the FastAPI test client.
    """

    def get(self, url: str, **kwargs: Any) -> IHttpResponse: ...

    def post(self, url: str, **kwargs: Any) -> IHttpResponse: ...

    def put(self, url: str, **kwargs: Any) -> IHttpResponse: ...

    def patch(self, url: str, **kwargs: Any) -> IHttpResponse: ...

    def delete(self, url: str, **kwargs: Any) -> IHttpResponse: ...


class ILicenseStatusService(Protocol):
    """Protocol for license status actions."""

    def get(self, license_id: str) -> LicenseStatus: ...

    def renew(
        self,
        license_id: str,
        end: datetime | None = None,
        device_id: str | None = None,
        device_name: str | None = None,
    ) -> LicenseStatus: ...

    def return_license(
        self,
        license_id: str,
        device_id: str | None = None,
        device_name: str | None = None,
    ) -> LicenseStatus: ...

    def register(
        self, license_id: str, device_id: str, device_name: str
    ) -> LicenseStatus: ...

    def revoke(self, license_id: str) -> str: ...

    def registered_devices(self, license_id: str) -> RegisteredDevices: ...
