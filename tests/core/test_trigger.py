"""Tests for triggers."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from reqkit.core.trigger import EventTrigger, IntervalTrigger, Trigger

__all__ = []

PERIOD = 0.05


@pytest.mark.asyncio
async def test_interval_trigger_fires_once_per_period() -> None:
    """Interval trigger should fire once per elapsed period."""
    fire = AsyncMock()
    trigger = IntervalTrigger(PERIOD)

    trigger.start(fire)
    await asyncio.sleep(PERIOD * 3.5)
    await trigger.stop()

    assert 3 <= fire.await_count <= 4


@pytest.mark.asyncio
async def test_interval_trigger_does_not_wait_for_runs() -> None:
    """Cadence should be independent of whether previous runs completed."""
    never = asyncio.Event()
    started = 0

    async def fire() -> None:
        nonlocal started
        started += 1
        await never.wait()

    trigger = IntervalTrigger(PERIOD)
    trigger.start(fire)
    await asyncio.sleep(PERIOD * 3.5)
    await trigger.stop()

    assert 3 <= started <= 4


@pytest.mark.asyncio
async def test_interval_trigger_first_tick_after_one_period() -> None:
    """The first tick should happen one period after start."""
    fire = AsyncMock()
    trigger = IntervalTrigger(PERIOD)

    trigger.start(fire)
    await asyncio.sleep(PERIOD / 2)
    assert fire.await_count == 0

    await trigger.stop()


@pytest.mark.asyncio
async def test_interval_trigger_sleeps_for_period() -> None:
    """Interval trigger should sleep for the period between ticks."""
    mock_sleep = AsyncMock()
    trigger = IntervalTrigger(5.0)

    with patch("reqkit.core.trigger.asyncio.sleep", mock_sleep):
        ticks = trigger._ticks()
        await ticks.__anext__()
        await ticks.__anext__()
        await ticks.aclose()

    assert mock_sleep.await_count == 2
    for call in mock_sleep.await_args_list:
        assert call.args[0] <= 5.0


def test_interval_trigger_rejects_non_positive_period() -> None:
    """A period must be positive."""
    with pytest.raises(ValueError, match="must be positive"):
        IntervalTrigger(0)


@pytest.mark.asyncio
async def test_event_trigger_fires_per_item() -> None:
    """Event trigger should fire once per upstream item and stop when exhausted."""
    fire = AsyncMock()

    async def source():
        for item in ("x", "y", "z"):
            yield item

    trigger = EventTrigger(source())
    trigger.start(fire)
    await asyncio.sleep(0.05)

    assert fire.await_count == 3
    assert not trigger.running
    await trigger.stop()


@pytest.mark.asyncio
async def test_trigger_logs_and_survives_run_errors() -> None:
    """A failing run should not stop later ticks."""
    fire = AsyncMock(side_effect=RuntimeError("boom"))
    trigger = IntervalTrigger(PERIOD)

    trigger.start(fire)
    await asyncio.sleep(PERIOD * 2.5)
    await trigger.stop()

    assert fire.await_count >= 2


@pytest.mark.asyncio
async def test_stop_cancels_pending_runs() -> None:
    """Stopping should cancel in-flight runs and end the tick loop."""
    cancelled = 0

    async def fire() -> None:
        nonlocal cancelled
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            cancelled += 1
            raise

    trigger = IntervalTrigger(PERIOD / 5)
    trigger.start(fire)
    await asyncio.sleep(PERIOD)
    await trigger.stop()

    assert cancelled >= 1
    assert not trigger.running
    assert trigger._pending == set()


@pytest.mark.asyncio
async def test_start_twice_raises() -> None:
    """A running trigger cannot be started again."""
    trigger = IntervalTrigger(10)
    trigger.start(AsyncMock())

    with pytest.raises(RuntimeError, match="already running"):
        trigger.start(AsyncMock())

    await trigger.stop()


def test_trigger_base_class_is_abstract() -> None:
    """Only triggers that define their ticks can be created."""
    with pytest.raises(TypeError):
        Trigger()


@pytest.mark.asyncio
async def test_event_trigger_logs_failing_source() -> None:
    """A source that raises should end the trigger with a logged error."""
    fire = AsyncMock()

    async def source():
        yield "x"
        raise ConnectionError("upstream closed")

    trigger = EventTrigger(source())
    with patch("reqkit.core.trigger.logger") as mock_logger:
        trigger.start(fire)
        await asyncio.sleep(0.05)

    assert fire.await_count == 1
    assert not trigger.running
    assert trigger._task is not None
    assert trigger._task.exception() is None
    mock_logger.error.assert_called_once()
    assert "upstream closed" in mock_logger.error.call_args[0][0]
    await trigger.stop()
