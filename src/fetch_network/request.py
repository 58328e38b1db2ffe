"""
Finalized request descriptor.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Type
from urllib.parse import parse_qsl, urljoin, urlsplit

from .types import HeaderItems

# Fields that may be replaced through ``RequestBuilder.set``
SETTABLE_FIELDS: FrozenSet[str] = frozenset({"timeout", "follow_redirects", "extensions"})


def build_url(base_url: str, path: str) -> str:
    """Build full URL from base and path."""
    # Handle absolute paths - preserve base_url path and append the new path
    if path.startswith("/"):
        parsed = urlsplit(base_url)
        base_path = parsed.path.rstrip("/")
        return f"{parsed.scheme}://{parsed.netloc}{base_path}{path}"
    if path:
        # urljoin replaces the last segment if base doesn't end with /
        if not base_url.endswith("/"):
            base_url = base_url + "/"
        return urljoin(base_url, path)
    return base_url


@dataclass(frozen=True)
class Request:
    """Concrete request handed to a transport.

    Equality is structural, so two requests built the same way compare equal.
    """

    url: str
    method: str = "GET"
    headers: HeaderItems = ()
    body: Optional[bytes] = None
    timeout: Optional[float] = None
    follow_redirects: Optional[bool] = None
    extensions: Tuple[Tuple[str, Any], ...] = ()

    def header(self, name: str) -> Optional[str]:
        """Return the first value of a header (case-insensitive)."""
        values = self.header_values(name)
        return values[0] if values else None

    def header_values(self, name: str) -> List[str]:
        lowered = name.lower()
        return [value for key, value in self.headers if key.lower() == lowered]

    def headers_dict(self) -> Dict[str, str]:
        """Headers as a dict, repeated names joined with ', '."""
        result: Dict[str, str] = {}
        for key, value in self.headers:
            if key in result:
                result[key] = f"{result[key]}, {value}"
            else:
                result[key] = value
        return result

    def query_items(self) -> List[Tuple[str, str]]:
        return parse_qsl(urlsplit(self.url).query, keep_blank_values=True)

    def add_header(self, name: str, value: str) -> "Request":
        """Add a header value, keeping existing values of the same name."""
        return replace(self, headers=self.headers + ((name, value),))

    def with_header(self, name: str, value: str) -> "Request":
        """Set a header, replacing every existing value of the same name."""
        lowered = name.lower()
        kept = tuple((k, v) for k, v in self.headers if k.lower() != lowered)
        return replace(self, headers=kept + ((name, value),))

    def perform(self, network: Any, response_type: Type[Any] = Any) -> Any:
        """Run this request through ``network``'s execution pipeline."""
        return network.perform(self, response_type)


@dataclass
class RequestDraft:
    """Mutable copy of a ``Request`` handed to ``RequestBuilder.configure``."""

    url: str
    method: str = "GET"
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: Optional[bytes] = None
    timeout: Optional[float] = None
    follow_redirects: Optional[bool] = None
    extensions: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request: Request) -> "RequestDraft":
        return cls(
            url=request.url,
            method=request.method,
            headers=list(request.headers),
            body=request.body,
            timeout=request.timeout,
            follow_redirects=request.follow_redirects,
            extensions=dict(request.extensions),
        )

    def freeze(self) -> Request:
        return Request(
            url=self.url,
            method=self.method,
            headers=tuple((str(k), str(v)) for k, v in self.headers),
            body=self.body,
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            extensions=tuple(self.extensions.items()),
        )
