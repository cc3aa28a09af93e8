"""Observability: structured logging and distributed tracing.

Uses structlog for logging and OpenTelemetry for tracing.
"""
