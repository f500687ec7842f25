"""Library configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ResolverSettings(BaseSettings):
    """Resolver defaults from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="JSONAPI_RESOLVERS_",
    )

    # Links
    base_url: str | None = Field(
        default=None,
        description="Prefix applied to every link starting with '/'",
    )

    # App settings
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )


@lru_cache
def get_settings() -> ResolverSettings:
    """Get cached settings instance."""
    return ResolverSettings()
