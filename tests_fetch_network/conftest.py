"""
Shared fixtures for fetch_network tests.
"""
from typing import List, Optional

import pytest

from fetch_network.config import Environment, Retriers
from fetch_network.core.network import Network
from fetch_network.request import Request
from fetch_network.types import TransportResponse

BASE_URL = "https://github.com/"


class MockTransport:
    """Transport returning queued responses (the last one repeats) and recording requests."""

    def __init__(self, *responses: TransportResponse, error: Optional[Exception] = None):
        self.responses: List[TransportResponse] = list(responses) or [
            TransportResponse(status_code=200, content=b"1")
        ]
        self.error = error
        self.requests: List[Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def send(self, request: Request) -> TransportResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class MockValidator:
    def __init__(self, value: bool = True):
        self.value = value
        self.calls: List[TransportResponse] = []

    def is_valid(self, response: TransportResponse) -> bool:
        self.calls.append(response)
        return self.value


class MockRestorer:
    def __init__(self, error: Optional[Exception] = None):
        self.error = error
        self.calls = 0

    async def restore(self) -> None:
        self.calls += 1
        if self.error is not None:
            raise self.error


@pytest.fixture
def mock_transport():
    return MockTransport()


@pytest.fixture
def mock_validator():
    return MockValidator()


@pytest.fixture
def mock_restorer():
    return MockRestorer()


@pytest.fixture
def network(mock_transport, mock_validator, mock_restorer):
    """Network with validator and restorer configured."""
    return Network(Environment(
        base_url=BASE_URL,
        transport=mock_transport,
        retriers=Retriers(
            response_validator=mock_validator,
            request_restorer=mock_restorer,
        ),
    ))


@pytest.fixture
def plain_network(mock_transport):
    """Network without retriers."""
    return Network(Environment(base_url=BASE_URL, transport=mock_transport))
