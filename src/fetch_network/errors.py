"""
Error types raised by fetch_network.

Every failure that escapes ``Network.perform`` is a ``NetworkError``; the
underlying cause is kept on ``__cause__``.
"""
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .request import Request
    from .types import TransportResponse


class NetworkError(Exception):
    """Base class for fetch_network errors."""

    code = "NETWORK_ERROR"


class TransportError(NetworkError):
    """The transport could not complete the request (connectivity, timeout...).

    Never retried by the pipeline.
    """

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, request: Optional["Request"] = None) -> None:
        super().__init__(message)
        self.request = request


class RestoreFailedError(NetworkError):
    """The request restorer failed, so the request was not retried."""

    code = "RESTORE_FAILED"


class DecodeError(NetworkError):
    """The response body did not match the declared response type."""

    code = "DECODE_ERROR"

    def __init__(self, message: str, response: Optional["TransportResponse"] = None) -> None:
        super().__init__(message)
        self.response = response


class EncodeError(NetworkError):
    """A payload could not be serialized before dispatch."""

    code = "ENCODE_ERROR"
