"""Business logic services for the console.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from lcpconsole.server.domain.license_handler import LicenseHandler
from lcpconsole.server.domain.purchase_handler import PurchaseHandler
from lcpconsole.server.domain.user_handler import PublicationHandler, UserHandler

if TYPE_CHECKING:
    import logging

    from lcpconsole.client.infrastructure.config_loader import ConfigLoader


class ConsoleService:
    """Groups the screen handlers over the clients of one ConfigLoader."""

    def __init__(self, loader: ConfigLoader, logger: logging.Logger):
        self.loader = loader
        self.logger = logger

        # Initialize handlers
        self.user_handler = UserHandler(
            users=loader.users,
            purchases=loader.purchases,
            page_size=loader.page_size,
        )
        self.publication_handler = PublicationHandler(
            publications=loader.publications,
            page_size=loader.page_size,
        )
        self.purchase_handler = PurchaseHandler(
            users=loader.users,
            publications=loader.publications,
            purchases=loader.purchases,
            license_status=loader.license_status,
            page_size=loader.page_size,
        )
        self.license_handler = LicenseHandler(
            licenses=loader.licenses,
            license_status=loader.license_status,
            dashboard=loader.dashboard,
        )

    def health(self) -> dict[str, Any]:
        """Health check endpoint."""
        return {
            "status": "ok",
            "timestamp": int(time.time()),
            "api_url": self.loader.api_url,
            "lsd_url": self.loader.lsd_url,
        }
