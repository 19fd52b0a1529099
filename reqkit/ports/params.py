"""Request parameter nodes (DTOs).

A request is described by a tree of parameter nodes. Leaves either change the
outgoing request (headers, body, multipart form) or the session configuration
(timeouts). Application lives in ``reqkit.core.builder``; these classes only
carry data.
"""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from typing import Any, Union

__all__ = [
    "Body",
    "Combined",
    "Empty",
    "Form",
    "FormField",
    "Header",
    "ParamNode",
    "Timeout",
    "TimeoutSource",
]


@dataclass(slots=True, frozen=True)
class Header:
    """Set one header on the outgoing request.

    Attributes:
        key: Header name. Compared exactly; a later node with the same key wins.
        value: Header value.
    """

    key: str
    value: str

    @classmethod
    def accept(cls, media_type: str) -> Header:
        """Media type the client is able to handle, e.g. ``application/json``."""
        return cls("Accept", media_type)

    @classmethod
    def authorization(cls, credentials: str) -> Header:
        """Pre-formatted credentials, e.g. ``Bearer <token>``."""
        return cls("Authorization", credentials)

    @classmethod
    def cache_control(cls, directive: str) -> Header:
        return cls("Cache-Control", directive)

    @classmethod
    def content_length(cls, octets: int) -> Header:
        return cls("Content-Length", str(octets))

    @classmethod
    def content_type(cls, media_type: str) -> Header:
        return cls("Content-Type", media_type)

    @classmethod
    def host(cls, host: str, port: str = "") -> Header:
        """Server domain name and, optionally, the port (appended verbatim)."""
        return cls("Host", host + port)

    @classmethod
    def origin(cls, origin: str) -> Header:
        return cls("Origin", origin)

    @classmethod
    def referer(cls, url: str) -> Header:
        return cls("Referer", url)

    @classmethod
    def user_agent(cls, user_agent: str) -> Header:
        return cls("User-Agent", user_agent)


@dataclass(slots=True, frozen=True)
class Body:
    """Replace the outgoing request body with raw bytes."""

    data: bytes

    @classmethod
    def text(cls, text: str, encoding: str = "utf-8") -> Body:
        return cls(text.encode(encoding))

    @classmethod
    def json(cls, value: Any) -> Body:
        """Serialize ``value`` with :func:`json.dumps` as UTF-8.

        Raises:
            TypeError: If ``value`` is not JSON serializable.
        """
        return cls(json.dumps(value).encode("utf-8"))


class TimeoutSource(enum.Flag):
    """Which session timeout a :class:`Timeout` node sets."""

    REQUEST = enum.auto()
    RESOURCE = enum.auto()
    ALL = REQUEST | RESOURCE


@dataclass(slots=True, frozen=True)
class Timeout:
    """Session-level timeout override.

    Attributes:
        seconds: Timeout duration.
        source: ``REQUEST`` sets the idle read timeout, ``RESOURCE`` the
            timeout of the whole exchange, ``ALL`` both.
    """

    seconds: float
    source: TimeoutSource = TimeoutSource.ALL


@dataclass(slots=True, frozen=True)
class FormField:
    """One part of a multipart/form-data body.

    The form field name is derived from ``filename`` by dropping its last
    extension (``avatar.png`` -> ``avatar``).
    """

    filename: str
    data: bytes
    mime_type: str = "application/octet-stream"

    @classmethod
    def text(cls, filename: str, value: str, mime_type: str = "text/plain") -> FormField:
        return cls(filename, value.encode("utf-8"), mime_type)


@dataclass(slots=True, frozen=True)
class Form:
    """Ordered form fields encoded together under a single boundary."""

    fields: tuple[FormField, ...] = ()


@dataclass(slots=True, frozen=True)
class Combined:
    """Ordered children, applied depth-first, left to right."""

    children: tuple[ParamNode, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class Empty:
    """Node with no effect."""


ParamNode = Union[Header, Body, Timeout, FormField, Form, Combined, Empty]
