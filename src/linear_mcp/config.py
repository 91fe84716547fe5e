"""Environment-driven settings for the Linear MCP server."""
import logging
import sys
from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("linear-mcp.config")

# Personal API keys are issued with this prefix; OAuth tokens are not.
API_KEY_PREFIX = "lin_api_"


class Settings(BaseSettings):
    """Server settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    linear_api_key: str = Field(min_length=1)
    linear_api_url: str = "https://api.linear.app/graphql"

    # Linear allows 5000 req/hr (~83/min); stay just under it.
    linear_rate_limit_per_minute: int = Field(default=80, ge=1)

    linear_cache_ttl_seconds: float = Field(default=300.0, gt=0)
    linear_request_timeout: float = Field(default=30.0, gt=0)


@lru_cache
def get_settings() -> Settings:
    return Settings()


def load_settings() -> Settings:
    """Load settings, exiting the process when the API key is missing."""
    try:
        settings = get_settings()
    except ValidationError:
        logger.error(
            "LINEAR_API_KEY environment variable is required.\n"
            "Generate a personal API key at: Linear Settings > Account > API > Personal API Keys\n"
            f"The key should start with '{API_KEY_PREFIX}'"
        )
        sys.exit(1)

    if not settings.linear_api_key.startswith(API_KEY_PREFIX):
        logger.warning(
            f"LINEAR_API_KEY does not start with '{API_KEY_PREFIX}'. "
            "Verify you're using a Personal API Key, not an OAuth token."
        )

    return settings
