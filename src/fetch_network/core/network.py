"""
Network client and its execution pipeline.

``perform`` runs one request through a small state machine::

    DISPATCH -> VALIDATE -> DECODE -> DONE
                   |
                   +-> RESTORE -> RETRY -> DECODE -> DONE
                          |
                          +-> EMPTY (validator set, no restorer)

Any failure raises and ends the pipeline (FAILED). The retried response is
decoded without being validated again, so a request is retried at most once.
"""
import logging
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from .. import display
from ..config import Environment, validate_environment
from ..errors import DecodeError, RestoreFailedError, TransportError
from ..request import Request
from ..types import HttpMethod, ParameterEncoding, RequestRestorer, TransportResponse
from .incomplete_request import IncompleteRequest
from .request_builder import RequestBuilder

logger = logging.getLogger("fetch_network.network")

R = TypeVar("R")


class PipelineState(str, Enum):
    """States of a single ``perform`` call."""
    DISPATCH = "dispatch"
    VALIDATE = "validate"
    RESTORE = "restore"
    RETRY = "retry"
    DECODE = "decode"
    DONE = "done"
    EMPTY = "empty"
    FAILED = "failed"


TERMINAL_STATES = (PipelineState.DONE, PipelineState.EMPTY, PipelineState.FAILED)


class Network:
    """Builds requests against a base URL and executes them.

    Subclasses may override ``modify`` to shape every new request, e.g. to
    add default headers.

    Example:
        network = Network(Environment(
            base_url="https://api.example.com",
            transport=HttpxTransport(),
            retriers=Retriers(StatusCodeValidator(), token_restorer),
        ))
        user = await network.request("/users/1", response_type=User).perform()
    """

    def __init__(self, env: Environment):
        validate_environment(env)
        self.env = env

    def request(
        self,
        path: str = "",
        encoding: Optional[ParameterEncoding] = None,
        response_type: Type[R] = Any,  # type: ignore[assignment]
    ) -> IncompleteRequest[R]:
        builder = RequestBuilder.create(self.env.base_url, path, encoding)
        return IncompleteRequest(network=self, builder=self.modify(builder), response_type=response_type)

    def modify(self, builder: RequestBuilder) -> RequestBuilder:
        """Hook applied to every builder created by ``request``."""
        return builder

    def _request_with_method(self, method: HttpMethod, path: str, **kwargs: Any) -> IncompleteRequest[Any]:
        return self.request(path, **kwargs).method(method)

    def get(self, path: str = "", **kwargs: Any) -> IncompleteRequest[Any]:
        """GET request."""
        return self._request_with_method("GET", path, **kwargs)

    def post(self, path: str = "", **kwargs: Any) -> IncompleteRequest[Any]:
        """POST request."""
        return self._request_with_method("POST", path, **kwargs)

    def put(self, path: str = "", **kwargs: Any) -> IncompleteRequest[Any]:
        """PUT request."""
        return self._request_with_method("PUT", path, **kwargs)

    def patch(self, path: str = "", **kwargs: Any) -> IncompleteRequest[Any]:
        """PATCH request."""
        return self._request_with_method("PATCH", path, **kwargs)

    def delete(self, path: str = "", **kwargs: Any) -> IncompleteRequest[Any]:
        """DELETE request."""
        return self._request_with_method("DELETE", path, **kwargs)

    async def perform(self, request: Request, response_type: Type[R] = Any) -> Optional[R]:  # type: ignore[assignment]
        """Execute ``request`` and decode the body as ``response_type``.

        Returns None when the validator rejects the response and no restorer
        is configured.

        Raises:
            TransportError: the transport failed (never retried).
            RestoreFailedError: the restorer failed; the request was sent once.
            DecodeError: the body does not match ``response_type``.

        Exceptions raised by the response validator propagate unwrapped.
        """
        state = PipelineState.DISPATCH
        response: Optional[TransportResponse] = None
        result: Optional[R] = None

        try:
            while state not in TERMINAL_STATES:
                logger.debug(f"Network.perform: {request.method} {request.url} state={state.value}")

                if state is PipelineState.DISPATCH:
                    response = await self._send(request, attempt=0)
                    state = PipelineState.VALIDATE

                elif state is PipelineState.VALIDATE:
                    state = PipelineState.DECODE if self._is_valid(response) else PipelineState.RESTORE

                elif state is PipelineState.RESTORE:
                    restorer = self._restorer()
                    if restorer is None:
                        logger.warning(
                            f"Network.perform: response to {request.method} {request.url} "
                            f"rejected (HTTP {response.status_code}) and no restorer is configured"
                        )
                        state = PipelineState.EMPTY
                    else:
                        await self._restore(restorer)
                        state = PipelineState.RETRY

                elif state is PipelineState.RETRY:
                    response = await self._send(request, attempt=1)
                    state = PipelineState.DECODE

                elif state is PipelineState.DECODE:
                    result = self._decode(response, response_type)
                    state = PipelineState.DONE

        except Exception as e:
            logger.debug(f"Network.perform: {request.method} {request.url} state={PipelineState.FAILED.value} ({e!r})")
            raise

        logger.debug(f"Network.perform: {request.method} {request.url} state={state.value}")
        return result

    async def _send(self, request: Request, attempt: int) -> TransportResponse:
        if self.env.trace:
            display.print_request(request, attempt)

        try:
            response = await self.env.transport.send(request)
        except TransportError:
            raise
        except Exception as e:
            logger.debug(f"Network._send: transport failed for {request.method} {request.url}: {e!r}")
            raise TransportError(f"{request.method} {request.url} failed: {e}", request) from e

        logger.debug(f"Network._send: attempt={attempt} status={response.status_code} bytes={len(response.content)}")
        if self.env.trace:
            display.print_response(response)
        return response

    def _is_valid(self, response: TransportResponse) -> bool:
        retriers = self.env.retriers
        if retriers is None:
            return True
        valid = retriers.response_validator.is_valid(response)
        logger.debug(f"Network._is_valid: status={response.status_code} valid={valid}")
        return valid

    def _restorer(self) -> Optional[RequestRestorer]:
        retriers = self.env.retriers
        return retriers.request_restorer if retriers is not None else None

    async def _restore(self, restorer: RequestRestorer) -> None:
        try:
            await restorer.restore()
        except Exception as e:
            logger.error(f"Network._restore: restorer failed: {e!r}")
            raise RestoreFailedError(f"Request restore failed: {e}") from e
        logger.debug("Network._restore: restored, retrying once")

    def _decode(self, response: TransportResponse, response_type: Type[R]) -> R:
        try:
            return self.env.response_decoder.decode(response.content, response_type)
        except DecodeError as e:
            if e.response is None:
                e.response = response
            raise
        except Exception as e:
            raise DecodeError(f"Cannot decode response: {e}", response) from e

    async def close(self) -> None:
        """Close the transport if it owns resources."""
        aclose = getattr(self.env.transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "Network":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
