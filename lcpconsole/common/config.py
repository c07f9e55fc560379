"""
Configuration settings for the licensing back-office console.
"""

from __future__ import annotations

import logging
import os


class Config:
    """Central configuration class for all console settings."""

    def __init__(self) -> None:
        # Resource API (users, publications, purchases)
        self.API_URL: str = os.getenv("LCPCONSOLE_API_URL", "http://127.0.0.1:8991")
        self.API_PREFIX: str = "/api/v1"

        # License status service
        self.LSD_URL: str = os.getenv("LCPCONSOLE_LSD_URL", "http://127.0.0.1:8990")
        self.LSD_USER: str | None = os.getenv("LCPCONSOLE_LSD_USER")
        self.LSD_PASSWORD: str | None = os.getenv("LCPCONSOLE_LSD_PASSWORD")

        # Partial license defaults
        self.PROVIDER: str = os.getenv("LCPCONSOLE_PROVIDER", "http://edrlab.org")
        self.RIGHT_PRINT: int = 10
        self.RIGHT_COPY: int = 10
        self.DEFAULT_HINT: str = "Enter passphrase"

        # Listing
        self.PAGE_SIZE: int = 30

        # Console server settings
        self.CONSOLE_HOST: str = os.getenv("LCPCONSOLE_HOST", "127.0.0.1")
        self.CONSOLE_PORT: int = int(os.getenv("LCPCONSOLE_PORT", "8080"))

        # Logging
        self.LOG_LEVEL: int = logging.getLevelName(
            os.getenv("LCPCONSOLE_LOG_LEVEL", "INFO").upper()
        )

    def lsd_auth(self) -> tuple[str, str] | None:
        """Basic auth credentials for private license-status routes."""
        if self.LSD_USER and self.LSD_PASSWORD:
            return self.LSD_USER, self.LSD_PASSWORD
        return None
