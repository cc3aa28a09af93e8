"""Collector and service identity configuration models."""

from pydantic import BaseModel, Field, SecretStr


class ServiceConfig(BaseModel):
    """Identity attached to every exported log record and span."""

    name: str = Field(
        default="nodejs-log-correlation-demo",
        description="service.name resource attribute",
    )
    version: str = Field(default="1.0.0", description="service.version resource attribute")
    environment: str = Field(
        default="development",
        description="deployment.environment resource attribute",
    )


class ExporterConfig(BaseModel):
    """OTLP/HTTP collector configuration.

    Logs are posted to ``endpoint + logs_path`` one event per request,
    spans to ``endpoint + traces_path`` through the OpenTelemetry SDK.
    """

    enabled: bool = Field(default=True, description="Export logs to the collector")
    endpoint: str = Field(
        default="https://ingest.in.signoz.cloud:443",
        description="Collector base URL",
    )
    logs_path: str = Field(default="/v1/logs", description="OTLP logs path")
    traces_path: str = Field(default="/v1/traces", description="OTLP traces path")
    access_token: SecretStr = Field(
        default=SecretStr(""),
        description="Collector ingestion key",
    )
    access_token_header: str = Field(
        default="signoz-access-token",
        description="Header carrying the ingestion key",
    )
    min_level: str = Field(
        default="info",
        description="Lowest log level forwarded to the collector",
    )
    timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Per-request timeout handed to the HTTP client",
    )
    shutdown_grace_seconds: float = Field(
        default=2.0,
        ge=0,
        description="How long shutdown waits for in-flight deliveries",
    )

    @property
    def logs_url(self) -> str:
        return self.endpoint.rstrip("/") + self.logs_path

    @property
    def traces_url(self) -> str:
        return self.endpoint.rstrip("/") + self.traces_path

    def auth_headers(self) -> dict[str, str]:
        """Headers authenticating against the collector."""
        return {self.access_token_header: self.access_token.get_secret_value()}
