"""HTTP port definitions (DTOs and transport interface)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from reqkit.ports.params import ParamNode
from reqkit.ports.session import SessionSettings

__all__ = ["PreparedRequest", "RequestDefinition", "ResponseEnvelope", "TransportPort"]


@dataclass(slots=True, frozen=True)
class RequestDefinition:
    """Immutable description of a request.

    Attributes:
        method: HTTP method, e.g. ``GET``.
        url: Target URL.
        param: Composed parameter tree applied on every run.
    """

    method: str
    url: str
    param: ParamNode


@dataclass
class PreparedRequest:
    """Outgoing request built for one run.

    Decouples the parameter tree from HTTP implementation details.

    Attributes:
        method: HTTP method.
        url: Target URL.
        headers: Header map in first-write order; later writes replace values.
        body: Raw body, or None when no body node was applied.
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(slots=True, frozen=True)
class ResponseEnvelope:
    """Raw result of one transport call.

    Attributes:
        data: Response body.
        status_code: HTTP status code.
        headers: Response header pairs in arrival order; repeated names
            such as ``Set-Cookie`` keep one pair per occurrence.
    """

    data: bytes
    status_code: int
    headers: tuple[tuple[str, str], ...] = ()


class TransportPort(Protocol):
    """Interface for sending a prepared request.

    Implementations may be called concurrently and raise on failures that
    prevent a response from being received.
    """

    async def send(self, request: PreparedRequest, session: SessionSettings, /) -> ResponseEnvelope:
        """Send ``request`` using ``session`` settings.

        Args:
            request: The outgoing request.
            session: Session-level configuration (timeouts).

        Returns:
            The response envelope.
        """
        ...
