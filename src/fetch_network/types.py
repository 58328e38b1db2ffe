"""
Type definitions for fetch_network.
"""
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Literal,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    runtime_checkable,
)

if TYPE_CHECKING:
    from .request import Request


T = TypeVar("T")

# HTTP methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE", "CONNECT"]

# Ordered (name, value) pairs; a name may repeat
HeaderItems = Tuple[Tuple[str, str], ...]

# Ordered (key, value) parameter pairs, keys unique
ParameterItems = Tuple[Tuple[str, Any], ...]


@dataclass(frozen=True)
class TransportResponse:
    """Response produced by a transport: body bytes plus response metadata."""

    status_code: int
    content: bytes = b""
    headers: HeaderItems = ()
    url: str = ""
    reason_phrase: str = ""

    @property
    def ok(self) -> bool:
        """True for 2xx responses."""
        return 200 <= self.status_code < 300

    def header(self, name: str) -> Optional[str]:
        """Return the first value of a header (case-insensitive)."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


@runtime_checkable
class Transport(Protocol):
    """Issues a finalized request and produces a response asynchronously.

    Must support being invoked repeatedly with the same request value.
    Failures (connectivity, timeouts) are raised.
    """

    def send(self, request: "Request") -> Awaitable[TransportResponse]:
        ...


class BodyEncoder(Protocol):
    """Serializes a structured payload into raw request bytes."""

    def encode(self, value: Any) -> bytes:
        ...


class ResponseDecoder(Protocol):
    """Parses raw response bytes into the declared response type."""

    def decode(self, data: bytes, response_type: Type[T]) -> T:
        ...


class ResponseValidator(Protocol):
    """Decides whether a response is acceptable."""

    def is_valid(self, response: TransportResponse) -> bool:
        ...


class RequestRestorer(Protocol):
    """Recovery action run once before a single retry (e.g. token refresh).

    Completes normally on success, raises on failure.
    """

    def restore(self) -> Awaitable[None]:
        ...


class ParameterEncoding(Protocol):
    """Materializes pending parameters into a request."""

    def encode(self, request: "Request", parameters: Sequence[Tuple[str, Any]]) -> "Request":
        ...
