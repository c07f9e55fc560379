"""
Shared request plumbing for the resource API and license status clients.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests

from lcpconsole.common.exceptions import ResourceError

if TYPE_CHECKING:
    from lcpconsole.common.interfaces import IHttpResponse, IHttpSession


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300  # noqa: PLR2004


class ApiClient:
    """Base class issuing single requests and rejecting non-2xx answers.

    There is no retry: a transport failure raised by the session reaches the
    caller unchanged, and a non-success status raises ``error_class``.
    """

    error_class: type[ResourceError] = ResourceError

    def __init__(
        self,
        api_url: str,
        session: IHttpSession | None = None,
        auth: tuple[str, str] | None = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.session: IHttpSession = session or requests.Session()
        self.auth = auth
        self.logger = logging.getLogger(self.__class__.__module__)

    def request(self, method: str, url: str, **kwargs: Any) -> IHttpResponse:
        """Send one request and return the response if it succeeded."""
        if self.auth is not None:
            kwargs["auth"] = self.auth
        response = getattr(self.session, method)(url, **kwargs)
        if not is_success(response.status_code):
            self.logger.error(
                "%s %s failed: HTTP %s %s",
                method.upper(),
                url,
                response.status_code,
                response.text,
            )
            msg = f"{method.upper()} {url} returned HTTP {response.status_code}"
            raise self.error_class(msg, response.status_code, response.text)
        return response

    @staticmethod
    def json_or_none(response: IHttpResponse) -> Any:
        """Decode a JSON body, tolerating the empty bodies some endpoints send."""
        if not response.text.strip():
            return None
        return response.json()
