"""Healthcheck for container orchestration: one request to the watched endpoint."""

import asyncio
import logging

from reqkit.adapters.driven.config.settings import Settings, load_settings, request_params
from reqkit.adapters.driven.http.client import HttpClient
from reqkit.adapters.driven.logging.logging_config import configure_logs
from reqkit.core.errors import RequestError
from reqkit.core.executor import Request
from reqkit.ports.http import TransportPort

__all__ = ["main", "check_endpoint", "endpoint_is_healthy"]

logger = logging.getLogger(__name__)


async def endpoint_is_healthy(settings: Settings, transport: TransportPort) -> bool:
    """Run the configured request once and report whether it succeeded.

    Args:
        settings: Loaded configuration.
        transport: Transport used for the single run.

    Returns:
        True if a 2xx status arrived, False on an error status or transport failure.
    """
    statuses: list[int] = []
    errors: list[RequestError] = []

    request = (
        Request(settings.method, settings.url, request_params(settings), transport=transport)
        .on_status_code(statuses.append)
        .on_error(errors.append)
    )
    await request.call()

    for error in errors:
        logger.warning(f"{settings.method} {settings.url}: {error}")
    return bool(statuses) and not errors


async def check_endpoint(settings: Settings) -> bool:
    """Open a transport and check the configured endpoint."""
    async with HttpClient() as http:
        return await endpoint_is_healthy(settings, http)


def main() -> int:
    """Run health check for container orchestration.

    Validates:
    - Required environment variables are set.
    - Headers file (if configured) exists and is a JSON object.
    - The configured request answers with a 2xx status.

    Returns:
        0 if healthy, 1 if unhealthy.
    """
    configure_logs()

    try:
        settings = load_settings()
    except Exception as exc:
        logger.error(f"Watch healthcheck FAILED: {exc}")
        return 1

    if not asyncio.run(check_endpoint(settings)):
        logger.error(f"Watch healthcheck FAILED: {settings.method} {settings.url} is not healthy")
        return 1

    logger.info("Watch healthcheck OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
