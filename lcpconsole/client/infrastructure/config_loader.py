"""Infrastructure layer: configuration loading and client wiring.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import requests

from lcpconsole.client.domain.partial_license import PartialLicenseBuilder
from lcpconsole.client.license_status import LicenseStatusService
from lcpconsole.client.licenses import DashboardService, LicenseService
from lcpconsole.client.publications import PublicationService
from lcpconsole.client.purchases import PurchaseService
from lcpconsole.client.users import UserService
from lcpconsole.common import Configurable, setup_logger
from lcpconsole.common.config import Config
from lcpconsole.common.models import ConsoleConfig

if TYPE_CHECKING:
    from lcpconsole.common.interfaces import IHttpSession

CONFIG_ATTRS = [
    "api_url",
    "lsd_url",
    "lsd_user",
    "lsd_password",
    "provider",
    "right_print",
    "right_copy",
    "page_size",
    "log_level",
    "console_host",
    "console_port",
]


class ConfigLoader(Configurable):
    """Resolves settings and builds every client over one shared session."""

    def __init__(
        self,
        console_config: ConsoleConfig | None = None,
        session: IHttpSession | None = None,
        lsd_session: IHttpSession | None = None,
    ):
        self.config: Config = Config()
        console_config = console_config or ConsoleConfig()
        self.apply_overrides(console_config.overrides(), self.config, CONFIG_ATTRS)

        # Setup logging
        self.logger = logging.getLogger("lcpconsole")
        setup_logger(self.logger, self.log_level)

        self.session: IHttpSession = session or requests.Session()
        self.lsd_session: IHttpSession = lsd_session or self.session
        self.lsd_auth = self.config.lsd_auth()

        self.license_builder = PartialLicenseBuilder(
            provider=self.provider,
            right_print=self.right_print,
            right_copy=self.right_copy,
            default_hint=self.config.DEFAULT_HINT,
        )
        prefix = self.config.API_PREFIX
        self.users = UserService(self.api_url, self.session, api_prefix=prefix)
        self.publications = PublicationService(
            self.api_url, self.session, api_prefix=prefix
        )
        self.purchases = PurchaseService(
            self.api_url, self.license_builder, self.session, api_prefix=prefix
        )
        self.licenses = LicenseService(self.api_url, self.session, api_prefix=prefix)
        self.dashboard = DashboardService(self.api_url, self.session)
        self.license_status = LicenseStatusService(
            self.lsd_url, self.lsd_session, auth=self.lsd_auth
        )
        self.logger.debug(
            "Resource API at %s, license status server at %s",
            self.api_url,
            self.lsd_url,
        )
