from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict

from imagegen_mcp.logging_config import get_logger

log = get_logger(__name__)


class ConfigurationError(RuntimeError):
    pass


class Settings(BaseSettings):
    # Loads keys from process env, and also from a local .env file for convenience.
    model_config = SettingsConfigDict(env_prefix="", extra="ignore", env_file=".env", env_file_encoding="utf-8")

    # Keys
    openai_api_key: str | None = None
    # Alternate endpoint, e.g. a mock server for integration runs.
    openai_api_url: str | None = None

    log_level: str = "INFO"
    # Unset means the SDK defaults apply.
    request_timeout: float | None = None


def load_settings(**overrides: Any) -> Settings:
    """
    Build the settings once at startup and check the API key.

    The key is only shape-checked: a missing key is fatal, an unusual prefix is
    reported and tolerated (mock servers accept anything).
    """
    settings = Settings(**overrides)

    key = (settings.openai_api_key or "").strip()
    if not key:
        raise ConfigurationError(
            "OPENAI_API_KEY environment variable is required. "
            "Provide it in the .env file or in the MCP settings configuration."
        )
    if not key.startswith("sk-"):
        log.warning("OPENAI_API_KEY does not look like an OpenAI key (expected an 'sk-' prefix)")

    return settings
