"""Request error taxonomy."""

from __future__ import annotations

__all__ = ["RequestError", "StatusError", "TransportFailure", "TRANSPORT_FAILURE_STATUS"]

# Status reported when no response was received at all
TRANSPORT_FAILURE_STATUS = -1


class RequestError(Exception):
    """Base class for errors delivered to ``on_error`` observers."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class StatusError(RequestError):
    """A response arrived with a non-2xx status.

    Attributes:
        status_code: The HTTP status.
        body: Raw response body, undecoded.
    """

    def __init__(self, status_code: int, body: bytes) -> None:
        super().__init__(f"HTTP {status_code}", status_code)
        self.body = body


class TransportFailure(RequestError):
    """The transport could not complete the call (network, DNS, timeout).

    Attributes:
        cause: The underlying exception, also chained as ``__cause__``.
    """

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Transport failure: {cause!r}", TRANSPORT_FAILURE_STATUS)
        self.cause = cause
        self.__cause__ = cause
