"""
Declarative request building and execution for HTTP APIs.

Build requests with an immutable, chainable builder, send them over a
pluggable transport, validate responses and retry once after a restore
action (such as refreshing an expired token).
"""
from .types import (
    HttpMethod,
    TransportResponse,
    Transport,
    BodyEncoder,
    ResponseDecoder,
    ResponseValidator,
    RequestRestorer,
    ParameterEncoding,
)
from .errors import (
    NetworkError,
    TransportError,
    RestoreFailedError,
    DecodeError,
    EncodeError,
)
from .request import Request, RequestDraft, SETTABLE_FIELDS, build_url
from .encoding import Destination, URLEncoding, FORM_CONTENT_TYPE
from .config import (
    Environment,
    Retriers,
    TimeoutConfig,
    JsonBodyEncoder,
    JsonResponseDecoder,
    validate_environment,
)
from .core.request_builder import RequestBuilder
from .core.incomplete_request import IncompleteRequest
from .core.network import Network, PipelineState
from .transport import HttpxTransport
from .retriers import StatusCodeValidator, CallableRestorer, CoalescingRestorer
from .factory import create_environment, create_network

__all__ = [
    # Types
    "HttpMethod",
    "TransportResponse",
    "Transport",
    "BodyEncoder",
    "ResponseDecoder",
    "ResponseValidator",
    "RequestRestorer",
    "ParameterEncoding",
    # Errors
    "NetworkError",
    "TransportError",
    "RestoreFailedError",
    "DecodeError",
    "EncodeError",
    # Requests
    "Request",
    "RequestDraft",
    "SETTABLE_FIELDS",
    "build_url",
    # Encoding
    "Destination",
    "URLEncoding",
    "FORM_CONTENT_TYPE",
    # Config
    "Environment",
    "Retriers",
    "TimeoutConfig",
    "JsonBodyEncoder",
    "JsonResponseDecoder",
    "validate_environment",
    # Core
    "RequestBuilder",
    "IncompleteRequest",
    "Network",
    "PipelineState",
    # Transport
    "HttpxTransport",
    # Retriers
    "StatusCodeValidator",
    "CallableRestorer",
    "CoalescingRestorer",
    # Factory
    "create_environment",
    "create_network",
]

__version__ = "0.1.0"
