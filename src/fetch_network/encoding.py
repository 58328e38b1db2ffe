"""
Parameter encoding: materializes pending parameters into a request.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Sequence, Tuple
from urllib.parse import urlencode, urlsplit, urlunsplit

from .request import Request

logger = logging.getLogger("fetch_network.encoding")

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"

# Methods whose parameters go to the query string under METHOD_DEPENDENT
QUERY_STRING_METHODS = ("GET", "HEAD", "DELETE")


class Destination(str, Enum):
    """Where encoded parameters are written."""
    QUERY_STRING = "query_string"
    HTTP_BODY = "http_body"
    METHOD_DEPENDENT = "method_dependent"


def encode_parameters(parameters: Sequence[Tuple[str, Any]]) -> str:
    """Form-encode parameters in the given order, stringifying each value."""
    return urlencode([(str(key), str(value)) for key, value in parameters])


def append_query(url: str, query: str) -> str:
    """Append an encoded query to a URL, keeping existing query items."""
    parts = urlsplit(url)
    merged = f"{parts.query}&{query}" if parts.query else query
    return urlunsplit((parts.scheme, parts.netloc, parts.path, merged, parts.fragment))


@dataclass(frozen=True)
class URLEncoding:
    """URL-style parameter encoding.

    Query-string destination appends parameters after any existing query
    items. Body destination writes ``k=v&...`` as the body and sets the form
    content type, replacing any prior ``Content-Type``.
    """

    destination: Destination = Destination.QUERY_STRING

    @classmethod
    def query_string(cls) -> "URLEncoding":
        return cls(Destination.QUERY_STRING)

    @classmethod
    def http_body(cls) -> "URLEncoding":
        return cls(Destination.HTTP_BODY)

    @classmethod
    def method_dependent(cls) -> "URLEncoding":
        return cls(Destination.METHOD_DEPENDENT)

    def encodes_in_query(self, method: str) -> bool:
        if self.destination == Destination.METHOD_DEPENDENT:
            return method.upper() in QUERY_STRING_METHODS
        return self.destination == Destination.QUERY_STRING

    def encode(self, request: Request, parameters: Sequence[Tuple[str, Any]]) -> Request:
        if not parameters:
            return request

        encoded = encode_parameters(parameters)

        if self.encodes_in_query(request.method):
            logger.debug(f"URLEncoding.encode: {len(parameters)} parameter(s) -> query string")
            return replace(request, url=append_query(request.url, encoded))

        logger.debug(f"URLEncoding.encode: {len(parameters)} parameter(s) -> body")
        return replace(
            request.with_header("Content-Type", FORM_CONTENT_TYPE),
            body=encoded.encode("utf-8"),
        )
