"""
Console server using FastAPI.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI

from lcpconsole import __version__
from lcpconsole.client.infrastructure.config_loader import ConfigLoader

from .routes import ConsoleRoutes
from .services import ConsoleService

if TYPE_CHECKING:
    from lcpconsole.common.interfaces import IHttpSession
    from lcpconsole.common.models import ConsoleConfig


class ConsoleServer:
    """Back-office console exposing one JSON view per screen."""

    def __init__(
        self,
        console_config: ConsoleConfig | None = None,
        session: IHttpSession | None = None,
        lsd_session: IHttpSession | None = None,
    ):
        self.loader = ConfigLoader(console_config, session, lsd_session)
        self.logger = self.loader.logger
        self.server_host: str = self.loader.console_host
        self.server_port: int = self.loader.console_port

        self.app = FastAPI(title="LCP back-office console", version=__version__)
        self.service = ConsoleService(self.loader, self.logger)
        self.routes = ConsoleRoutes(self.service)
        self.routes.setup_routes(self.app)

        self.logger.info(
            "Console ready for http://%s:%s", self.server_host, self.server_port
        )
