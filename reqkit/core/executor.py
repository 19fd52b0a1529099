"""Request executor: builds, sends and dispatches a request definition."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import AsyncIterable, Callable
from types import TracebackType
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter

from reqkit.core.builder import build_request
from reqkit.core.compose import compose
from reqkit.core.dispatch import dispatch
from reqkit.core.errors import RequestError, TransportFailure
from reqkit.core.trigger import EventTrigger, IntervalTrigger, Trigger
from reqkit.ports.callbacks import CallbackSet
from reqkit.ports.http import RequestDefinition, ResponseEnvelope, TransportPort
from reqkit.ports.params import ParamNode
from reqkit.ports.session import SessionSettings

__all__ = ["Request", "RunState"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RunState(enum.Enum):
    """Lifecycle of a request.

    ``COMPLETED`` and ``FAILED`` are resting states: ``call()`` may start a
    new run from any state.
    """

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    COMPLETED = "completed"
    FAILED = "failed"


class Request(Generic[T]):
    """Declarative HTTP request.

    The definition (method, url, parameters) is fixed at construction.
    Observers are registered with the ``on_*`` methods, and a run is
    started with :meth:`call`. A trigger attached with :meth:`update`
    re-runs the request on a timer or on upstream events after
    :meth:`start`.

    Runs are not queued or coalesced: a trigger may start a run while a
    previous one is still in flight, and both notify the same observers.
    Observers should be registered before the first run.

    Example:
        request = Request(
            "GET",
            "https://api.example.com/items",
            Header.accept("application/json"),
            Timeout(5),
            transport=http,
        ).on_json(print).on_error(log_error)
        await request.call()
    """

    def __init__(
        self,
        method: str,
        url: str,
        *params: ParamNode,
        transport: TransportPort,
        session: SessionSettings | None = None,
    ) -> None:
        """Initialize request.

        Args:
            method: HTTP method.
            url: Target URL.
            *params: Parameter nodes, composed in the given order.
            transport: Transport used to send each run.
            session: Session defaults; parameter nodes override a per-run copy.
        """
        self._definition = RequestDefinition(method=method.upper(), url=url, param=compose(*params))
        self.transport = transport
        self.session = session
        self.callbacks = CallbackSet()
        self._trigger: Trigger | None = None
        self._state = RunState.IDLE
        self._in_flight = 0

    @property
    def definition(self) -> RequestDefinition:
        return self._definition

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def trigger(self) -> Trigger | None:
        return self._trigger

    def on_status_code(self, fn: Callable[[int], None]) -> Request[T]:
        self.callbacks.on_status_code = fn
        return self

    def on_error(self, fn: Callable[[RequestError], None]) -> Request[T]:
        self.callbacks.on_error = fn
        return self

    def on_data(self, fn: Callable[[bytes], None]) -> Request[T]:
        self.callbacks.on_data = fn
        return self

    def on_string(self, fn: Callable[[str], None]) -> Request[T]:
        self.callbacks.on_string = fn
        return self

    def on_json(self, fn: Callable[[Any], None]) -> Request[T]:
        self.callbacks.on_json = fn
        return self

    def on_object(self, object_type: type[T], fn: Callable[[T], None]) -> Request[T]:
        """Decode successful bodies into ``object_type`` with pydantic.

        Args:
            object_type: Any type pydantic can validate JSON into (models,
                dataclasses, TypedDicts, builtins).
            fn: Receives the decoded object.
        """
        self.callbacks.object_adapter = TypeAdapter(object_type)
        self.callbacks.on_object = fn
        return self

    async def call(self) -> ResponseEnvelope | None:
        """Run the request once.

        Transport failures are reported to ``on_error`` as
        :class:`TransportFailure`; completed responses go through the
        dispatcher.

        Returns:
            The response envelope, or None if the transport failed.
        """
        request, session = build_request(self._definition, self.session)
        self._in_flight += 1
        self._state = RunState.IN_FLIGHT
        logger.debug(f"{request.method} {request.url} started")

        try:
            envelope = await self.transport.send(request, session)
        except asyncio.CancelledError:
            self._settle(RunState.FAILED)
            raise
        except Exception as e:
            self._settle(RunState.FAILED)
            logger.warning(f"{request.method} {request.url} failed: {e}")
            if self.callbacks.on_error is not None:
                self.callbacks.on_error(TransportFailure(e))
            return None

        self._settle(RunState.COMPLETED)
        logger.debug(f"{request.method} {request.url} returned status {envelope.status_code}")
        dispatch(envelope, self.callbacks)
        return envelope

    def _settle(self, outcome: RunState) -> None:
        self._in_flight -= 1
        self._state = RunState.IN_FLIGHT if self._in_flight else outcome

    def update(
        self,
        *,
        every: float | None = None,
        source: AsyncIterable[Any] | None = None,
    ) -> Request[T]:
        """Attach a trigger that re-runs this request.

        Exactly one of ``every`` or ``source`` must be given. The trigger
        starts with :meth:`start`.

        Args:
            every: Period in seconds for a timer trigger.
            source: Upstream async iterable; each item triggers one run.

        Raises:
            ValueError: If neither or both arguments are given.
            RuntimeError: If the current trigger is running.
        """
        if (every is None) == (source is None):
            raise ValueError("Pass exactly one of 'every' or 'source'")
        if self._trigger is not None and self._trigger.running:
            raise RuntimeError("Stop the running trigger before replacing it")

        self._trigger = IntervalTrigger(every) if every is not None else EventTrigger(source)
        return self

    def start(self) -> None:
        """Start the attached trigger, if any."""
        if self._trigger is None:
            logger.debug("No trigger attached; nothing to start")
            return
        self._trigger.start(self.call)

    async def close(self) -> None:
        """Stop the attached trigger and cancel its in-flight runs."""
        if self._trigger is not None:
            await self._trigger.stop()

    async def __aenter__(self) -> Request[T]:
        """Enter async context manager (start trigger).

        Returns:
            Self for use in async with statement.
        """
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (tear down trigger)."""
        await self.close()
