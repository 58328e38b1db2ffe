"""
Factory functions for creating networks.
"""
from typing import Optional, Union

import httpx

from .config import (
    Environment,
    Retriers,
    TimeoutConfig,
    default_body_encoder,
    default_response_decoder,
)
from .core.network import Network
from .transport import HttpxTransport
from .types import (
    BodyEncoder,
    RequestRestorer,
    ResponseDecoder,
    ResponseValidator,
    Transport,
)


def create_environment(
    base_url: str,
    *,
    transport: Optional[Transport] = None,
    httpx_client: Optional[httpx.AsyncClient] = None,
    timeout: Union[TimeoutConfig, float, None] = None,
    verify: Optional[bool] = None,
    validator: Optional[ResponseValidator] = None,
    restorer: Optional[RequestRestorer] = None,
    body_encoder: Optional[BodyEncoder] = None,
    response_decoder: Optional[ResponseDecoder] = None,
    trace: bool = False,
) -> Environment:
    """
    Create an environment with defaults filled in.

    Without ``transport`` an ``HttpxTransport`` is created (around
    ``httpx_client`` when given). A ``restorer`` without a ``validator`` is
    rejected, since nothing would ever trigger it.

    Example:
        env = create_environment(
            "https://api.example.com",
            timeout=10.0,
            validator=StatusCodeValidator(),
            restorer=CallableRestorer(tokens.refresh),
        )
    """
    if restorer is not None and validator is None:
        raise ValueError("restorer requires a validator")

    if transport is None:
        transport = HttpxTransport(httpx_client, timeout=timeout, verify=verify)

    return Environment(
        base_url=base_url,
        transport=transport,
        body_encoder=body_encoder or default_body_encoder,
        response_decoder=response_decoder or default_response_decoder,
        retriers=Retriers(validator, restorer) if validator is not None else None,
        trace=trace,
    )


def create_network(base_url: str, **kwargs) -> Network:
    """Create a ``Network`` around ``create_environment(base_url, **kwargs)``."""
    return Network(create_environment(base_url, **kwargs))
