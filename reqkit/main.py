"""Watch entrypoint: poll one endpoint on a fixed interval."""

import asyncio
import logging

from reqkit.adapters.driven.config.settings import Settings, load_settings, request_params
from reqkit.adapters.driven.http.client import HttpClient
from reqkit.adapters.driven.logging.logging_config import configure_logs
from reqkit.adapters.driven.metrics.http_metrics import Metrics
from reqkit.adapters.driving.signals import make_stop_event
from reqkit.core.errors import RequestError
from reqkit.core.executor import Request
from reqkit.ports.http import TransportPort

__all__ = ["main", "run", "build_watch_request"]

logger = logging.getLogger(__name__)

# Longest body excerpt written to the log
BODY_PREVIEW_CHARS = 200


def build_watch_request(settings: Settings, transport: TransportPort) -> Request[object]:
    """Build the polled request and its log observers from settings.

    Args:
        settings: Loaded configuration.
        transport: Transport used for every run.

    Returns:
        Request with observers registered and an interval trigger attached.
    """

    def log_error(error: RequestError) -> None:
        logger.warning(f"{settings.method} {settings.url}: {error}")

    def log_body(text: str) -> None:
        logger.info(f"Body: {text[:BODY_PREVIEW_CHARS]}")

    return (
        Request(settings.method, settings.url, request_params(settings), transport=transport)
        .on_status_code(lambda status: logger.info(f"{settings.method} {settings.url} -> {status}"))
        .on_error(log_error)
        .on_string(log_body)
        .update(every=settings.period_in_sec)
    )


async def main() -> None:
    """Start the watch service.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Run the request once immediately.
    4. Re-run it every period until SIGTERM/SIGINT.
    5. Tear down the trigger and close the HTTP session.
    """
    configure_logs()
    logger.info("Starting watch service...")

    try:
        settings = load_settings()
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check REQUEST_URL, PERIOD_IN_SECONDS, REQUEST_METHOD, "
            "REQUEST_TIMEOUT_SECONDS and HEADERS_FILE_PATH.",
            exc,
        )
        return

    metrics = Metrics()
    http_client = HttpClient(metrics=metrics)

    async with http_client as http:
        request = build_watch_request(settings, http)
        stop = make_stop_event()

        try:
            await request.call()
            async with request:
                await stop.wait()
        except Exception as e:
            logger.error(f"Unhandled exception in watch loop: {e}", exc_info=True)

        logger.info("Watch service stopped.")


def run() -> None:
    """Console script entrypoint."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user (Ctrl+C).")


if __name__ == "__main__":
    run()
