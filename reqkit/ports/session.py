"""Session settings port definition (DTO)."""

from dataclasses import dataclass

__all__ = ["SessionSettings"]


@dataclass
class SessionSettings:
    """Session-level configuration handed to the transport.

    Session parameter nodes mutate a per-run copy of this object, so
    overrides never leak from one run into the next.

    Attributes:
        request_timeout_sec: Max idle time while waiting for data; None means
            transport default.
        resource_timeout_sec: Max time for the whole exchange; None means
            transport default.
    """

    request_timeout_sec: float | None = None
    resource_timeout_sec: float | None = None
