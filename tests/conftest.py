"""Shared test fixtures for the tracelog test suite."""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from tracelog.export.models import TraceContext
from tracelog.export.sink import OTLPLogSink


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": 'service = { name = "base" }',
                "development.toml": 'service = { name = "dev" }',
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache and TOML files before and after each test."""
    from tracelog.config import get_settings
    from tracelog.config.settings import use_config_files

    get_settings.cache_clear()
    use_config_files(())
    yield
    get_settings.cache_clear()
    use_config_files(())


@pytest.fixture
def trace_context() -> TraceContext:
    """An active trace context with sampled flag."""
    return TraceContext(trace_id="a" * 32, span_id="b" * 16, trace_flags=1)


@pytest.fixture
def diagnostics() -> MagicMock:
    """Stand-in for the diagnostic channel."""
    return MagicMock()


class CollectorStub:
    """Records requests made to a mock OTLP collector."""

    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text="ok" if self.status_code == 200 else "nope")


@pytest.fixture
def collector() -> CollectorStub:
    return CollectorStub()


@pytest.fixture
def make_sink(
    diagnostics: MagicMock,
) -> Generator[Callable[..., OTLPLogSink], None, None]:
    """Factory for sinks backed by httpx.MockTransport; closed on teardown."""
    sinks: list[OTLPLogSink] = []

    def _make(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> OTLPLogSink:
        sink = OTLPLogSink(
            url="https://collector.test/v1/logs",
            headers={"signoz-access-token": "test-token"},
            transport=httpx.MockTransport(handler),
            diagnostics=diagnostics,
            **kwargs,
        )
        sinks.append(sink)
        return sink

    yield _make

    for sink in sinks:
        sink.close(grace_seconds=1.0)
