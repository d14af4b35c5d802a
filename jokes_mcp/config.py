from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the Jokes MCP server.

    Values are loaded from environment variables with `JOKES_MCP_` prefix.
    The listening port also honours the conventional `PORT` variable.
    A `.env` file in the working directory is read during development.
    """

    model_config = SettingsConfigDict(
        env_prefix="JOKES_MCP_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    # General
    env: str = "dev"
    host: str = "0.0.0.0"
    port: int = Field(
        default=3001,
        validation_alias=AliasChoices("PORT", "JOKES_MCP_PORT", "port"),
    )
    log_level: str = "info"
    # Seconds an idle SSE stream waits before sending a keep-alive comment
    sse_ping_interval: float = 15.0
    # Seconds uvicorn waits for open connections after a shutdown request
    shutdown_timeout: float = 5.0

    # Outbound HTTP
    user_agent: str = "jokes-mcp/1.0.0"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings from environment."""
    return Settings()
