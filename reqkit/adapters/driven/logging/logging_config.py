"""Console logging setup for reqkit services."""

import logging

__all__ = ["configure_logs"]


def configure_logs(level: int = logging.INFO) -> None:
    """Configure console logging.

    Sets up:
    - Root logger at ``level`` (INFO by default).
    - Framework loggers (aiohttp, asyncio) at WARNING level.
    - Library loggers (reqkit) at DEBUG level.
    - Structured format with timestamp, level, module, and line number.

    Calling it again replaces the handler installed by a previous call.

    Args:
        level: Root logger level.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
    date_format = "%d/%m/%y %H:%M:%S"

    formatter = logging.Formatter(log_format, date_format)
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler.set_name("reqkit")

    # Root logger
    root = logging.getLogger()
    root.setLevel(level)
    for existing in [h for h in root.handlers if h.get_name() == "reqkit"]:
        root.removeHandler(existing)
    root.addHandler(handler)

    # Suppress verbose framework loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    # Library loggers
    logging.getLogger("reqkit").setLevel(logging.DEBUG)
