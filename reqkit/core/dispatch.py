"""Response dispatching to registered observers."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import TypeAdapter

from reqkit.core.errors import StatusError
from reqkit.ports.callbacks import CallbackSet
from reqkit.ports.http import ResponseEnvelope

__all__ = ["dispatch", "is_success"]

logger = logging.getLogger(__name__)

# Marks a representation that could not be decoded
_SKIP: Any = object()


def is_success(status_code: int) -> bool:
    """Return True for 2xx statuses."""
    return 200 <= status_code < 300


def _as_text(data: bytes) -> str | None:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.debug(f"Skipping string representation: {e}")
        return None


def _as_json(data: bytes) -> Any:
    text = _as_text(data)
    if text is None:
        return _SKIP
    try:
        return json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        # RecursionError: nesting deeper than the interpreter stack
        logger.debug(f"Skipping JSON representation: {e}")
        return _SKIP


def _as_object(data: bytes, adapter: TypeAdapter[Any]) -> Any:
    try:
        return adapter.validate_json(data)
    except ValueError as e:
        # ValidationError, or a decode error raised before validation
        logger.debug(f"Skipping object representation: {e}")
        return _SKIP


def dispatch(envelope: ResponseEnvelope, callbacks: CallbackSet) -> None:
    """Deliver one completed response to the registered observers.

    Order:
    1. ``on_status_code`` with the status, always.
    2. Non-2xx: ``on_error`` with a :class:`StatusError`, then stop.
    3. 2xx: each registered representation on its own. A representation
       that fails to decode is skipped without affecting the others.

    Args:
        envelope: Response returned by the transport.
        callbacks: Observers to notify.
    """
    status = envelope.status_code
    if callbacks.on_status_code is not None:
        callbacks.on_status_code(status)

    if not is_success(status):
        logger.debug(f"Response status {status} classified as error")
        if callbacks.on_error is not None:
            callbacks.on_error(StatusError(status, envelope.data))
        return

    data = envelope.data
    if callbacks.on_data is not None:
        callbacks.on_data(data)

    if callbacks.on_string is not None:
        text = _as_text(data)
        if text is not None:
            callbacks.on_string(text)

    if callbacks.on_json is not None:
        value = _as_json(data)
        if value is not _SKIP:
            callbacks.on_json(value)

    if callbacks.on_object is not None and callbacks.object_adapter is not None:
        obj = _as_object(data, callbacks.object_adapter)
        if obj is not _SKIP:
            callbacks.on_object(obj)
