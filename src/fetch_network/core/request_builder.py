"""
Immutable, chainable request builder.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Optional

from ..encoding import URLEncoding
from ..request import SETTABLE_FIELDS, Request, RequestDraft, build_url
from ..types import HttpMethod, ParameterEncoding, ParameterItems

logger = logging.getLogger("fetch_network.request_builder")


def merge_parameters(existing: ParameterItems, incoming: Mapping[str, Any]) -> ParameterItems:
    """Append ``incoming`` to ``existing``; a key already present keeps its first value."""
    seen = {key for key, _ in existing}
    merged = list(existing)
    for key, value in incoming.items():
        if key in seen:
            logger.debug(f"merge_parameters: ignoring duplicate parameter {key!r}")
            continue
        seen.add(key)
        merged.append((key, value))
    return tuple(merged)


@dataclass(frozen=True)
class RequestBuilder:
    """Accumulates request-shaping operations without performing I/O.

    Every mutator returns a new builder. Parameters are only materialized by
    ``build()``, which applies the configured encoding.

    Example:
        builder = (
            RequestBuilder.create("https://api.example.com", "/users")
            .method("POST")
            .header("Accept", "application/json")
            .param("page", 2)
        )
        request = builder.build()
    """

    request: Request
    encoding: ParameterEncoding = URLEncoding()
    parameters: ParameterItems = ()

    @classmethod
    def create(
        cls,
        base_url: str,
        path: str = "",
        encoding: Optional[ParameterEncoding] = None,
    ) -> "RequestBuilder":
        return cls(
            request=Request(url=build_url(base_url, path)),
            encoding=encoding if encoding is not None else URLEncoding(),
        )

    def _with_request(self, request: Request) -> "RequestBuilder":
        return replace(self, request=request)

    def method(self, http_method: HttpMethod) -> "RequestBuilder":
        return self._with_request(replace(self.request, method=http_method.upper()))

    def headers(self, headers: Mapping[str, str]) -> "RequestBuilder":
        """Add every header, keeping existing values of the same names."""
        request = self.request
        for key, value in headers.items():
            request = request.add_header(key, value)
        return self._with_request(request)

    def header(self, key: str, value: str) -> "RequestBuilder":
        return self._with_request(self.request.add_header(key, value))

    def set_header(self, key: str, value: str) -> "RequestBuilder":
        """Set a header, replacing any existing values."""
        return self._with_request(self.request.with_header(key, value))

    def set(self, field_name: str, value: Any) -> "RequestBuilder":
        """Replace one of the ``SETTABLE_FIELDS`` of the request."""
        if field_name not in SETTABLE_FIELDS:
            raise ValueError(
                f"Cannot set request field {field_name!r}. "
                f"Must be one of: {sorted(SETTABLE_FIELDS)}"
            )
        if field_name == "extensions" and isinstance(value, Mapping):
            value = tuple(value.items())
        return self._with_request(replace(self.request, **{field_name: value}))

    def timeout(self, seconds: Optional[float]) -> "RequestBuilder":
        return self.set("timeout", seconds)

    def follow_redirects(self, follow: bool = True) -> "RequestBuilder":
        return self.set("follow_redirects", follow)

    def configure(self, configure: Callable[[RequestDraft], None]) -> "RequestBuilder":
        """Edit a mutable draft of the request; the draft is frozen into a new builder."""
        draft = RequestDraft.from_request(self.request)
        configure(draft)
        return self._with_request(draft.freeze())

    def params(self, params: Mapping[str, Any]) -> "RequestBuilder":
        return replace(self, parameters=merge_parameters(self.parameters, params))

    def param(self, key: str, value: Any) -> "RequestBuilder":
        return replace(self, parameters=merge_parameters(self.parameters, {key: value}))

    def body(self, data: bytes) -> "RequestBuilder":
        """Set a raw payload, bypassing the parameter encoding."""
        return self._with_request(replace(self.request, body=bytes(data)))

    def build(self) -> Request:
        return self.encoding.encode(self.request, self.parameters)
