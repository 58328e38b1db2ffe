"""
Typed request wrapper bound to a network.
"""
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable, Generic, Mapping, Optional, Type, TypeVar

from ..config import JSON_CONTENT_TYPE
from ..request import Request, RequestDraft
from ..types import HttpMethod
from .request_builder import RequestBuilder

if TYPE_CHECKING:
    from .network import Network

R = TypeVar("R")


@dataclass(frozen=True)
class IncompleteRequest(Generic[R]):
    """A request builder paired with the network that will perform it.

    Forwards every builder mutator and adds ``perform()``.
    """

    network: "Network"
    builder: RequestBuilder
    response_type: Type[R] = Any  # type: ignore[assignment]

    def _with_builder(self, builder: RequestBuilder) -> "IncompleteRequest[R]":
        return replace(self, builder=builder)

    def method(self, http_method: HttpMethod) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.method(http_method))

    def headers(self, headers: Mapping[str, str]) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.headers(headers))

    def header(self, key: str, value: str) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.header(key, value))

    def set_header(self, key: str, value: str) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.set_header(key, value))

    def set(self, field_name: str, value: Any) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.set(field_name, value))

    def timeout(self, seconds: Optional[float]) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.timeout(seconds))

    def follow_redirects(self, follow: bool = True) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.follow_redirects(follow))

    def configure(self, configure: Callable[[RequestDraft], None]) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.configure(configure))

    def param(self, key: str, value: Any) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.param(key, value))

    def params(self, params: Mapping[str, Any]) -> "IncompleteRequest[R]":
        return self._with_builder(self.builder.params(params))

    def body(self, value: Any) -> "IncompleteRequest[R]":
        """Set the request body.

        Raw ``bytes`` are used as-is; anything else is serialized with the
        environment's body encoder. Raises ``EncodeError`` before any network
        activity if serialization fails.
        """
        if isinstance(value, (bytes, bytearray, memoryview)):
            return self._with_builder(self.builder.body(bytes(value)))
        data = self.network.env.body_encoder.encode(value)
        return self._with_builder(self.builder.body(data))

    def json(self, value: Any) -> "IncompleteRequest[R]":
        """Encode ``value`` as the body and set the encoder's content type."""
        content_type = getattr(self.network.env.body_encoder, "content_type", JSON_CONTENT_TYPE)
        return self.body(value).set_header("Content-Type", content_type)

    def expecting(self, response_type: Type[Any]) -> "IncompleteRequest[Any]":
        """Return a copy that decodes the response as ``response_type``."""
        return replace(self, response_type=response_type)

    def build(self) -> Request:
        return self.builder.build()

    async def perform(self) -> Optional[R]:
        return await self.network.perform(self.builder.build(), self.response_type)
