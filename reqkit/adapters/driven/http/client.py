"""aiohttp transport adapter with retry and metrics integration."""

import asyncio
import logging
from types import TracebackType

import aiohttp
from aiohttp import ClientTimeout

from reqkit.adapters.driven.http.retry import retry
from reqkit.ports.http import PreparedRequest, ResponseEnvelope
from reqkit.ports.metrics import HttpAttemptDto, MetricsPort
from reqkit.ports.session import SessionSettings

__all__ = ["HttpClient", "SESSION_TIMEOUT", "to_client_timeout"]

logger = logging.getLogger(__name__)

# Configurable retry settings
REQUEST_RETRIES = 3
FIRST_FAILING_HTTP_CODE = 400

# Session-wide limits; a run's own timeouts override single fields
SESSION_TIMEOUT = ClientTimeout(total=300, sock_connect=30)


def to_client_timeout(session: SessionSettings, base: ClientTimeout = SESSION_TIMEOUT) -> ClientTimeout | None:
    """Map session settings onto the session-wide aiohttp timeout.

    The resource timeout replaces ``total``; the request timeout replaces
    ``sock_read``. Every field the run leaves unset keeps its value from
    ``base``, so a run never loses the session's connect limits.

    Returns:
        The merged timeout, or None when the run sets neither timeout.
    """
    if session.request_timeout_sec is None and session.resource_timeout_sec is None:
        return None
    return ClientTimeout(
        total=base.total if session.resource_timeout_sec is None else session.resource_timeout_sec,
        connect=base.connect,
        sock_read=base.sock_read if session.request_timeout_sec is None else session.request_timeout_sec,
        sock_connect=base.sock_connect,
    )


class HttpClient:
    """Transport that sends prepared requests over aiohttp.

    Features:
    - Retry with exponential backoff on transient errors.
    - Metrics collection (latency, failure rate).
    - Context manager for proper resource cleanup.
    """

    def __init__(self, metrics: MetricsPort | None = None) -> None:
        """Initialize HTTP client.

        Args:
            metrics: Optional metrics collector to track attempts.
        """
        self.metrics = metrics
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession(timeout=SESSION_TIMEOUT)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session).

        Args:
            exc_type: Exception type if raised in context.
            exc: Exception instance if raised in context.
            tb: Traceback if raised in context.
        """
        if self.session:
            await self.session.close()

    @retry(times=REQUEST_RETRIES)
    async def _send_once(self, req: PreparedRequest, session: SessionSettings) -> ResponseEnvelope:
        """Single HTTP exchange (with retry via decorator).

        Args:
            req: Prepared request.
            session: Session settings for this run.

        Returns:
            Response envelope with the fully read body.

        Raises:
            RuntimeError: If session not initialized.
            aiohttp exceptions: Network/timeout errors (retried by decorator).
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        options: dict[str, object] = {"headers": req.headers, "data": req.body}
        client_timeout = to_client_timeout(session)
        if client_timeout is not None:
            options["timeout"] = client_timeout

        resp = await self.session.request(req.method, req.url, **options)
        async with resp:
            data = await resp.read()
        return ResponseEnvelope(data=data, status_code=resp.status, headers=tuple(resp.headers.items()))

    async def send(self, req: PreparedRequest, session: SessionSettings) -> ResponseEnvelope:
        """Send request and record metrics.

        Args:
            req: Prepared request.
            session: Session settings for this run.

        Returns:
            Response envelope.

        Raises:
            Exception: Whatever the last attempt raised, after retries.
        """
        loop = asyncio.get_running_loop()
        started = loop.time()

        try:
            envelope = await self._send_once(req, session)
        except Exception:
            self._record(started, loop.time(), is_failed=True, status_code=None)
            raise

        self._record(
            started,
            loop.time(),
            is_failed=envelope.status_code >= FIRST_FAILING_HTTP_CODE,
            status_code=envelope.status_code,
        )
        return envelope

    def _record(self, started: float, finished: float, is_failed: bool, status_code: int | None) -> None:
        if self.metrics:
            self.metrics.update(
                HttpAttemptDto(
                    started_at_sec=started,
                    finished_at_sec=finished,
                    is_failed=is_failed,
                    status_code=status_code,
                )
            )
            logger.info(f"HTTP metrics: {self.metrics}")
