from __future__ import annotations

import json

import httpx
import pytest
from pydantic import BaseModel

from adapters.http_client import HttpxTransport, build_async_client
from core.config import AppSettings
from core.domain.errors import TransportFailed, UnsuccessfulStatus
from core.domain.models import HttpMethod, RequestDescriptor, TransportRequest
from core.interfaces.transport import Transport
from core.services.json_client import JsonClient


class Post(BaseModel):
    id: int
    title: str


def _settings() -> AppSettings:
    return AppSettings(user_agent="jsonwire-test/1.0", http_timeout_seconds=5)


def _client(handler) -> httpx.AsyncClient:
    return build_async_client(_settings(), transport=httpx.MockTransport(handler))


def test_httpx_transport_satisfies_protocol():
    assert isinstance(HttpxTransport(settings=_settings()), Transport)


class TestBuildAsyncClient:
    @pytest.mark.asyncio
    async def test_default_headers(self):
        async with build_async_client(_settings(), extra_headers={"X-Extra": "1"}) as client:
            assert client.headers["User-Agent"] == "jsonwire-test/1.0"
            assert client.headers["Accept"] == "application/json"
            assert client.headers["X-Extra"] == "1"
            assert client.timeout.read == 5


class TestHttpxTransport:
    @pytest.mark.asyncio
    async def test_sends_request_fields(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"ok": True}, headers={"X-Server": "mock"})

        async with _client(handler) as client:
            transport = HttpxTransport(client)
            response = await transport.send(
                TransportRequest(
                    method=HttpMethod.POST,
                    url="https://api.test/items?q=a%20b",
                    headers={"Content-Type": "application/json", "X-Req": "1"},
                    body=b'{"name": "x"}',
                )
            )

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://api.test/items?q=a%20b"
        assert request.headers["X-Req"] == "1"
        assert request.headers["User-Agent"] == "jsonwire-test/1.0"
        assert request.content == b'{"name": "x"}'
        assert response.status_code == 201
        assert response.headers["x-server"] == "mock"
        assert json.loads(response.body) == {"ok": True}

    @pytest.mark.asyncio
    async def test_error_status_is_a_response(self):
        async with _client(lambda request: httpx.Response(404, text="missing")) as client:
            response = await HttpxTransport(client).send(
                TransportRequest(method=HttpMethod.GET, url="https://api.test/x")
            )
        assert response.status_code == 404
        assert response.body == b"missing"

    @pytest.mark.asyncio
    async def test_timeout_maps_to_timeout_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        async with _client(handler) as client:
            with pytest.raises(TimeoutError):
                await HttpxTransport(client).send(TransportRequest(method=HttpMethod.GET, url="https://api.test/"))

    @pytest.mark.asyncio
    async def test_connect_error_maps_to_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(ConnectionError):
                await HttpxTransport(client).send(TransportRequest(method=HttpMethod.GET, url="https://api.test/"))

    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self):
        client = _client(lambda request: httpx.Response(200, json={}))
        async with HttpxTransport(client):
            pass
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        transport = HttpxTransport(settings=_settings())
        async with transport:
            owned = transport._client
        assert owned is not None
        assert owned.is_closed


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_json_client_over_httpx(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["userId"] == "1"
            return httpx.Response(200, json=[{"id": 1, "title": "first"}])

        async with _client(handler) as client:
            result = await JsonClient(HttpxTransport(client)).perform(
                RequestDescriptor(base_url="https://api.test", path="/posts", query_items=[("userId", "1")]),
                list[Post],
            )
        assert result.value == [Post(id=1, title="first")]

    @pytest.mark.asyncio
    async def test_post_payload_over_httpx(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["Content-Type"] == "application/json"
            return httpx.Response(201, content=request.content)

        async with _client(handler) as client:
            value = await JsonClient(HttpxTransport(client)).fetch(
                RequestDescriptor(
                    base_url="https://api.test",
                    path="/posts",
                    method="POST",
                    payload={"id": 5, "title": "new"},
                ),
                Post,
            )
        assert value == Post(id=5, title="new")

    @pytest.mark.asyncio
    async def test_httpx_timeout_becomes_transport_failed(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("connect timed out", request=request)

        async with _client(handler) as client:
            result = await JsonClient(HttpxTransport(client)).perform(
                RequestDescriptor(base_url="https://api.test", retries=1), dict
            )
        assert isinstance(result.error, TransportFailed)
        assert result.error.reason == "timeout"
        assert result.attempts == 2

    @pytest.mark.asyncio
    async def test_server_error_status(self):
        async with _client(lambda request: httpx.Response(500, json={"error": "boom"})) as client:
            result = await JsonClient(HttpxTransport(client)).perform(
                RequestDescriptor(base_url="https://api.test"), dict
            )
        assert isinstance(result.error, UnsuccessfulStatus)
        assert result.error.status_code == 500
