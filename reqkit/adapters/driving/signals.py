"""Signal handling for graceful shutdown."""

import asyncio
import logging
import signal

__all__ = ["make_stop_event"]

logger = logging.getLogger(__name__)


def make_stop_event() -> asyncio.Event:
    """Create SIGTERM/SIGINT-based stop event.

    Registers signal handlers on the running loop that set the returned
    event, so the service can ``await stop.wait()`` and then tear down
    its triggers.

    On Docker/Kubernetes, SIGTERM is sent 30s before SIGKILL,
    allowing graceful shutdown.

    Returns:
        Event set once SIGTERM or SIGINT has been received.
    """
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()

    def handle_signal() -> None:
        """Signal handler that sets the stop event on SIGTERM/SIGINT."""
        logger.info("Termination signal received, initiating graceful shutdown...")
        stop.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, handle_signal)

    return stop
