"""Root settings model for tracelog configuration."""

from collections.abc import Sequence
from pathlib import Path

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from tracelog.config.models.api import APIConfig
from tracelog.config.models.exporter import ExporterConfig, ServiceConfig
from tracelog.config.models.observability import ObservabilityConfig

# TOML files read by Settings(), most specific first
_config_files: tuple[Path, ...] = ()


def use_config_files(files: Sequence[Path]) -> None:
    """Select the TOML files that later Settings instances read."""
    global _config_files
    _config_files = tuple(files)


class Settings(BaseSettings):
    """Root configuration object.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{TRACELOG_ENV}.toml (environment overrides)
    4. TRACELOG_* environment variables (runtime overrides)

    The object is frozen: the transport reads it once at startup.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRACELOG_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    service: ServiceConfig = Field(
        default_factory=ServiceConfig,
        description="Service identity",
    )
    exporter: ExporterConfig = Field(
        default_factory=ExporterConfig,
        description="Collector configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )
    api: APIConfig = Field(default_factory=APIConfig, description="API server configuration")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority: constructor args, TRACELOG_* env, then each TOML file."""
        return (
            init_settings,
            env_settings,
            *(TomlConfigSettingsSource(settings_cls, toml_file=path) for path in _config_files),
        )
