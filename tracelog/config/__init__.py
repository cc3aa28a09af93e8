"""Configuration loading for tracelog.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from tracelog.config import get_settings

    settings = get_settings()
    url = settings.exporter.logs_url
"""

from functools import lru_cache

from tracelog.config.loader import config_files
from tracelog.config.settings import Settings, use_config_files


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.
    """
    use_config_files(config_files())

    # pydantic-settings gives env vars priority over the TOML sources
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
