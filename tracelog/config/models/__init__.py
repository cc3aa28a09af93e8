"""Configuration model exports.

    from tracelog.config.models import ExporterConfig, ServiceConfig
"""

from tracelog.config.models.api import APIConfig
from tracelog.config.models.exporter import ExporterConfig, ServiceConfig
from tracelog.config.models.observability import (
    LoggingConfig,
    ObservabilityConfig,
    TracingConfig,
)

__all__ = [
    "APIConfig",
    "ExporterConfig",
    "LoggingConfig",
    "ObservabilityConfig",
    "ServiceConfig",
    "TracingConfig",
]
