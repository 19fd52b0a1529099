"""Triggers that re-run a request on a timer or on upstream events."""

import abc
import asyncio
import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable
from typing import Any

__all__ = ["EventTrigger", "IntervalTrigger", "Trigger", "get_now_time"]

logger = logging.getLogger(__name__)

FireFn = Callable[[], Awaitable[Any]]


def get_now_time() -> float:
    """Get current monotonic time in seconds.

    Uses event loop's monotonic clock for accurate scheduling
    without wall-clock drift.

    Returns:
        Current time in seconds (monotonic).
    """
    return asyncio.get_running_loop().time()


class Trigger(abc.ABC):
    """Base class for re-run sources.

    Each tick spawns ``fire()`` as its own task and never awaits it, so the
    cadence stays independent of how long a run takes. Runs may overlap.
    The trigger has no completion of its own; it runs until :meth:`stop`
    (or until an event source is exhausted).
    """

    def __init__(self) -> None:
        self._task: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @abc.abstractmethod
    def _ticks(self) -> AsyncIterator[None]:
        """Yield once per tick until the source ends."""

    def start(self, fire: FireFn) -> None:
        """Start listening for ticks and invoke ``fire`` on each one.

        Must be called from within a running event loop.

        Raises:
            RuntimeError: If the trigger is already running.
        """
        if self.running:
            raise RuntimeError("Trigger already running")
        self._task = asyncio.get_running_loop().create_task(self._listen(fire))

    async def stop(self) -> None:
        """Stop ticking and cancel every run still in flight."""
        tasks: set[asyncio.Task[None]] = set(self._pending)
        if self._task is not None:
            tasks.add(self._task)
            self._task = None
        if tasks:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        self._pending.clear()

    async def _listen(self, fire: FireFn) -> None:
        loop = asyncio.get_running_loop()
        try:
            async for _ in self._ticks():
                # Fire and forget
                task: asyncio.Task[None] = loop.create_task(self._run_once(fire))
                self._pending.add(task)
        except Exception as e:  # noqa: BLE001
            logger.error(f"Trigger source failed, no further runs: {e}", exc_info=True)

    async def _run_once(self, fire: FireFn) -> None:
        """Run one triggered call and log errors."""
        try:
            await fire()
        except asyncio.CancelledError:
            logger.info("Triggered run cancelled.")
        except Exception as e:  # noqa: BLE001
            logger.error(f"Unexpected error in triggered run: {e}", exc_info=True)
        finally:
            task = asyncio.current_task()
            if task is not None:
                self._pending.discard(task)


class IntervalTrigger(Trigger):
    """Tick once per period, starting one period after :meth:`start`.

    Ticks are scheduled on the loop's monotonic clock (``next_tick +=
    period``) so slow event-loop iterations do not accumulate drift.
    """

    def __init__(self, period_sec: float) -> None:
        if period_sec <= 0:
            raise ValueError(f"period_sec must be positive (got: {period_sec})")
        super().__init__()
        self.period_sec = period_sec

    async def _ticks(self) -> AsyncIterator[None]:
        next_tick = get_now_time()
        while True:
            next_tick += self.period_sec
            sleep_duration = max(0, next_tick - get_now_time())
            await asyncio.sleep(sleep_duration)
            yield None


class EventTrigger(Trigger):
    """Tick once per item of an upstream async iterable; items are discarded."""

    def __init__(self, source: AsyncIterable[Any]) -> None:
        super().__init__()
        self.source = source

    async def _ticks(self) -> AsyncIterator[None]:
        async for _ in self.source:
            yield None
