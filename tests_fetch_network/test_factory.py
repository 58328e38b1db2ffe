"""
Tests for factory.py
Logic testing: Decision/Branch coverage
"""
import httpx
import pytest

from fetch_network.config import JsonBodyEncoder, JsonResponseDecoder
from fetch_network.core.network import Network
from fetch_network.factory import create_environment, create_network
from fetch_network.retriers import CallableRestorer, StatusCodeValidator
from fetch_network.transport import HttpxTransport

from conftest import MockRestorer, MockTransport


class TestCreateEnvironment:
    """Tests for create_environment function."""

    def test_defaults(self):
        env = create_environment("https://api.example.com", verify=False)
        assert isinstance(env.transport, HttpxTransport)
        assert isinstance(env.body_encoder, JsonBodyEncoder)
        assert isinstance(env.response_decoder, JsonResponseDecoder)
        assert env.retriers is None

    def test_custom_transport(self):
        transport = MockTransport()
        assert create_environment("https://api.example.com", transport=transport).transport is transport

    def test_wraps_httpx_client(self):
        client = httpx.AsyncClient()
        env = create_environment("https://api.example.com", httpx_client=client)
        assert env.transport._client is client

    # Decision: validator only
    def test_validator_only(self):
        validator = StatusCodeValidator()
        env = create_environment("https://api.example.com", transport=MockTransport(), validator=validator)
        assert env.retriers.response_validator is validator
        assert env.retriers.request_restorer is None

    def test_validator_and_restorer(self):
        validator = StatusCodeValidator()
        restorer = MockRestorer()
        env = create_environment(
            "https://api.example.com",
            transport=MockTransport(),
            validator=validator,
            restorer=restorer,
        )
        assert env.retriers.request_restorer is restorer

    # Error Path: restorer without validator
    def test_restorer_requires_validator(self):
        with pytest.raises(ValueError, match="restorer requires a validator"):
            create_environment("https://api.example.com", transport=MockTransport(), restorer=MockRestorer())


class TestCreateNetwork:
    """Tests for create_network function."""

    def test_creates_network(self):
        network = create_network("https://api.example.com", transport=MockTransport(), trace=True)
        assert isinstance(network, Network)
        assert network.env.trace is True

    def test_invalid_base_url(self):
        with pytest.raises(ValueError, match="Invalid base_url"):
            create_network("example", transport=MockTransport())

    # Path: 401 -> token refresh -> retry with the new token
    @pytest.mark.asyncio
    async def test_refresh_and_retry_over_httpx(self):
        token = {"value": "stale"}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.headers.get("authorization") == "Bearer fresh":
                return httpx.Response(200, json={"login": "octocat"})
            return httpx.Response(401)

        class BearerTransport:
            """Adds the current token at send time so the retry sees the refreshed one."""

            def __init__(self, inner: HttpxTransport):
                self.inner = inner

            async def send(self, request):
                return await self.inner.send(request.with_header("Authorization", f"Bearer {token['value']}"))

        async def refresh() -> None:
            token["value"] = "fresh"

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        network = create_network(
            "https://api.example.com",
            transport=BearerTransport(HttpxTransport(client)),
            validator=StatusCodeValidator(),
            restorer=CallableRestorer(refresh),
        )

        user = await network.get("/user").perform()

        assert user == {"login": "octocat"}
        assert token["value"] == "fresh"
        await client.aclose()

    # Path: injected client redirect policy reaches the decoded result
    @pytest.mark.asyncio
    async def test_injected_client_follows_redirects(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(302, headers={"Location": "https://api.example.com/new"})
            return httpx.Response(200, content=b'"new"')

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), follow_redirects=True)
        network = create_network("https://api.example.com", httpx_client=client)

        assert await network.request("/old", response_type=bytes).perform() == b'"new"'
        await client.aclose()
