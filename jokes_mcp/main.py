from __future__ import annotations

import logging

import anyio
import httpx

from .config import Settings, get_settings
from .tools import ToolRegistry
from .tools import dictionary_tools, geo_tools, joke_tools


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Shared client for every outbound tool call."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


def create_registry(client: httpx.AsyncClient) -> ToolRegistry:
    """
    Build the registry holding every tool the server exposes.
    """
    registry = ToolRegistry()

    # Register tool groups
    joke_tools.register_tools(registry, client)
    geo_tools.register_tools(registry, client)
    dictionary_tools.register_tools(registry, client)

    return registry


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """
    Entrypoint for running the MCP server over HTTP/SSE.
    """
    settings = get_settings()
    configure_logging(settings)

    from .http_server import run_http_server

    anyio.run(run_http_server, settings)


if __name__ == "__main__":
    main()
