"""Callback registration port definition (DTO)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter

if TYPE_CHECKING:
    from reqkit.core.errors import RequestError

__all__ = ["CallbackSet"]


@dataclass
class CallbackSet:
    """Result observers of one request.

    Every slot is optional and independent of the others.

    Attributes:
        on_status_code: Receives the status code of every completed response.
        on_error: Receives status and transport errors.
        on_data: Receives the raw body of a successful response.
        on_string: Receives the body decoded as UTF-8.
        on_json: Receives the body parsed as JSON.
        on_object: Receives the body validated into ``object_adapter``'s type.
        object_adapter: Decoder used for ``on_object``.
    """

    on_status_code: Callable[[int], None] | None = None
    on_error: Callable[[RequestError], None] | None = None
    on_data: Callable[[bytes], None] | None = None
    on_string: Callable[[str], None] | None = None
    on_json: Callable[[Any], None] | None = None
    on_object: Callable[[Any], None] | None = None
    object_adapter: TypeAdapter[Any] | None = None
