"""Fire-and-forget delivery of OTLP log envelopes over HTTP.

Each envelope becomes exactly one POST. Requests run on a private asyncio
loop in a daemon thread, so ``deliver`` returns as soon as the request has
been scheduled. There is no retry, batching or backpressure: a failed
delivery is reported on the diagnostic channel and dropped.
"""

import asyncio
import threading
from collections.abc import Mapping
from concurrent.futures import Future, wait
from typing import Any

import httpx

from tracelog.export.models import LogsEnvelope
from tracelog.observability.logging import get_diagnostics_logger


class OTLPLogSink:
    """Posts one OTLP/JSON logs request per envelope.

    Args:
        url: Collector logs endpoint
        headers: Extra request headers, typically the access token header
        timeout_seconds: Per-request timeout passed to httpx
        transport: Optional httpx transport (tests use httpx.MockTransport)
        diagnostics: Logger for delivery failures
    """

    def __init__(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
        diagnostics: Any = None,
    ) -> None:
        self.url = url
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._timeout = timeout_seconds
        self._transport = transport
        self._diagnostics = diagnostics or get_diagnostics_logger()

        self._lock = threading.Lock()
        self._pending: set[Future[None]] = set()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._client: httpx.AsyncClient | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def start(self) -> None:
        """Start the delivery loop thread. Idempotent; called lazily."""
        with self._lock:
            if self._loop is not None or self._closed:
                return
            loop = asyncio.new_event_loop()
            thread = threading.Thread(
                target=self._run_loop,
                args=(loop,),
                name="tracelog-otlp-sink",
                daemon=True,
            )
            self._loop = loop
            self._thread = thread
        thread.start()

    @staticmethod
    def _run_loop(loop: asyncio.AbstractEventLoop) -> None:
        asyncio.set_event_loop(loop)
        try:
            loop.run_forever()
        finally:
            leftover = asyncio.all_tasks(loop)
            for task in leftover:
                task.cancel()
            if leftover:
                loop.run_until_complete(
                    asyncio.gather(*leftover, return_exceptions=True)
                )
            loop.close()

    def deliver(self, envelope: LogsEnvelope) -> None:
        """Schedule delivery of one envelope and return immediately."""
        body = envelope.to_json().encode("utf-8")

        self.start()
        coro = self._send(body)

        # Scheduled only under the lock close() snapshots _pending with
        future: Future[None] | None = None
        with self._lock:
            if not self._closed and self._loop is not None:
                try:
                    future = asyncio.run_coroutine_threadsafe(coro, self._loop)
                except RuntimeError:
                    pass
                else:
                    self._pending.add(future)

        if future is None:
            coro.close()
            self._diagnostics.warning("otlp_delivery_dropped", reason="sink closed")
            return
        future.add_done_callback(self._forget)

    def _forget(self, future: Future[None]) -> None:
        with self._lock:
            self._pending.discard(future)

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _send(self, body: bytes) -> None:
        headers = {**self._headers, "Content-Length": str(len(body))}

        try:
            client = self._ensure_client()
            response = await client.post(self.url, content=body, headers=headers)
        except httpx.HTTPError as e:
            self._diagnostics.error(
                "otlp_delivery_error",
                url=self.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return
        except Exception as e:
            self._diagnostics.error(
                "otlp_delivery_failed",
                url=self.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        if response.status_code != 200:
            self._diagnostics.error(
                "otlp_delivery_rejected",
                url=self.url,
                status_code=response.status_code,
                response_preview=response.text[:200],
            )

    async def _close_client(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def close(self, grace_seconds: float = 2.0) -> None:
        """Stop accepting envelopes and shut the loop down.

        In-flight deliveries get ``grace_seconds`` to finish; whatever is
        still running afterwards is cancelled and abandoned.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = set(self._pending)
            loop, thread = self._loop, self._thread

        if loop is None or thread is None:
            return

        if pending:
            _, not_done = wait(pending, timeout=grace_seconds)
            if not_done:
                self._diagnostics.warning(
                    "otlp_deliveries_abandoned",
                    count=len(not_done),
                    grace_seconds=grace_seconds,
                )
                for future in not_done:
                    future.cancel()

        try:
            asyncio.run_coroutine_threadsafe(self._close_client(), loop).result(timeout=1.0)
        except Exception as e:
            self._diagnostics.warning(
                "otlp_client_close_failed",
                error=str(e),
                error_type=type(e).__name__,
            )

        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=1.0)
