"""tracelog: trace-correlated structured logs exported to an OTLP collector."""

__version__ = "1.0.0"
