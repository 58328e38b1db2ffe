"""
Configuration for fetch_network.
"""
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional, Type, TypeVar, Union
from urllib.parse import urlparse

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from .errors import DecodeError, EncodeError
from .types import (
    BodyEncoder,
    RequestRestorer,
    ResponseDecoder,
    ResponseValidator,
    Transport,
)

logger = logging.getLogger("fetch_network.config")

T = TypeVar("T")


@dataclass(frozen=True)
class TimeoutConfig:
    """Timeout configuration in seconds."""

    connect: float = 5.0
    read: float = 30.0
    write: float = 10.0


# Default values
DEFAULT_TIMEOUT = TimeoutConfig()
JSON_CONTENT_TYPE = "application/json"


def normalize_timeout(timeout: Union[TimeoutConfig, float, None]) -> TimeoutConfig:
    """Normalize timeout config."""
    if timeout is None:
        return DEFAULT_TIMEOUT
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=timeout, read=timeout, write=timeout)
    return timeout


@lru_cache(maxsize=256)
def _type_adapter(response_type: Any) -> TypeAdapter:
    return TypeAdapter(response_type)


class JsonBodyEncoder:
    """JSON body encoder backed by pydantic.

    Handles plain JSON values as well as dataclasses and pydantic models.
    """

    content_type = JSON_CONTENT_TYPE

    def encode(self, value: Any) -> bytes:
        try:
            return to_json(value)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise EncodeError(f"Cannot encode {type(value).__name__} as JSON: {e}") from e


class JsonResponseDecoder:
    """JSON response decoder that validates into the declared type.

    ``bytes`` returns the raw body and ``str`` the UTF-8 text; every other type
    goes through ``pydantic.TypeAdapter``.
    """

    def decode(self, data: bytes, response_type: Type[T]) -> T:
        if response_type is bytes:
            return data  # type: ignore[return-value]
        if response_type is str:
            try:
                return data.decode("utf-8")  # type: ignore[return-value]
            except UnicodeDecodeError as e:
                raise DecodeError(f"Response body is not valid UTF-8: {e}") from e
        if response_type is type(None) and not data:
            return None  # type: ignore[return-value]

        try:
            return _type_adapter(response_type).validate_json(data)
        except ValidationError as e:
            raise DecodeError(
                f"Cannot decode response as {getattr(response_type, '__name__', response_type)}: {e}"
            ) from e


default_body_encoder = JsonBodyEncoder()
default_response_decoder = JsonResponseDecoder()


@dataclass(frozen=True)
class Retriers:
    """Validator plus optional restorer used by the execution pipeline.

    With ``request_restorer=None`` a rejected response ends the pipeline with
    no result instead of a retry.
    """

    response_validator: ResponseValidator
    request_restorer: Optional[RequestRestorer] = None


@dataclass(frozen=True)
class Environment:
    """Immutable configuration owned by a ``Network``."""

    base_url: str
    transport: Transport
    body_encoder: BodyEncoder = default_body_encoder
    response_decoder: ResponseDecoder = default_response_decoder
    retriers: Optional[Retriers] = None
    trace: bool = False


def validate_environment(env: Environment) -> None:
    """Validate environment configuration."""
    if not env.base_url:
        raise ValueError("base_url is required")

    try:
        parsed = urlparse(env.base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"Invalid base_url: {env.base_url}")
    except Exception as e:
        raise ValueError(f"Invalid base_url: {env.base_url}") from e

    if env.transport is None:
        raise ValueError("transport is required")
    if not isinstance(env.transport, Transport):
        raise ValueError(f"transport must provide send(), got {type(env.transport).__name__}")

    if env.retriers is not None and env.retriers.response_validator is None:
        raise ValueError("retriers.response_validator is required")

    logger.debug(
        f"validate_environment: base_url={env.base_url}, "
        f"validator={env.retriers is not None}, "
        f"restorer={env.retriers is not None and env.retriers.request_restorer is not None}"
    )
