"""
Entry point for the console server.
"""

from __future__ import annotations

import uvicorn

from lcpconsole.common.models import ConsoleConfig

from .core import ConsoleServer


def start_server(console_config: ConsoleConfig | None = None) -> None:
    """Start the console server."""
    server = ConsoleServer(console_config)
    uvicorn.run(
        server.app,
        host=server.server_host,
        port=server.server_port,
        log_level=server.loader.log_level,
    )
