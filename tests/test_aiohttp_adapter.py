"""
Tests for the aiohttp adapter against a local aiohttp server.
"""

import asyncio
import socket

import aiohttp
import pytest
from aiohttp import test_utils, web

from restpipe import AsyncRequestPipeline
from restpipe.exceptions import RequestTimeoutError, TransportError
from restpipe.http.aiohttp_adapter import AiohttpAdapter
from restpipe.http.messages import HTTPRequest


async def create_widget(request):
    payload = await request.json()
    return web.json_response(
        {"id": 1, **payload},
        status=201,
        headers={"X-Request-Id": "req_1", "X-Seen-Content-Type": request.content_type},
    )


async def slow(request):
    await asyncio.sleep(0.5)
    return web.json_response({})


async def missing(request):
    return web.json_response({"error": "not found"}, status=404)


def make_app():
    app = web.Application()
    app.router.add_post("/widgets", create_widget)
    app.router.add_get("/slow", slow)
    app.router.add_get("/widgets/404", missing)
    return app


def with_server(scenario):
    """Run ``scenario(server)`` against a freshly started server."""

    async def run():
        server = test_utils.TestServer(make_app())
        await server.start_server()
        try:
            return await scenario(server)
        finally:
            await server.close()

    return asyncio.run(run())


def unused_port():
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_adapter_maps_response():
    """Test adapter maps an aiohttp response."""

    async def scenario(server):
        adapter = AiohttpAdapter()
        try:
            return await adapter.send(
                HTTPRequest(
                    "post",
                    str(server.make_url("/widgets")),
                    {"Content-Type": "application/json"},
                    b'{"color":"blue"}',
                ),
                timeout=5,
            )
        finally:
            await adapter.close()

    response = with_server(scenario)

    assert response.status_code == 201
    assert response.ok
    assert response.headers["x-request-id"] == "req_1"
    assert response.headers["x-seen-content-type"] == "application/json"
    assert response.body == b'{"id": 1, "color": "blue"}'
    assert response.elapsed is not None


def test_adapter_maps_timeout():
    """Test slow responses become RequestTimeoutError."""

    async def scenario(server):
        adapter = AiohttpAdapter()
        try:
            await adapter.send(HTTPRequest("GET", str(server.make_url("/slow"))), timeout=0.05)
        finally:
            await adapter.close()

    with pytest.raises(RequestTimeoutError):
        with_server(scenario)


def test_adapter_maps_connection_error():
    """Test a refused connection becomes TransportError."""
    url = f"http://127.0.0.1:{unused_port()}/widgets"

    async def run():
        adapter = AiohttpAdapter()
        try:
            await adapter.send(HTTPRequest("GET", url), timeout=5)
        finally:
            await adapter.close()

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(run())

    assert not isinstance(exc_info.value, RequestTimeoutError)
    assert isinstance(exc_info.value.__cause__, aiohttp.ClientError)


def test_only_owned_session_closed():
    """Test close only closes a session the adapter created."""

    async def run():
        external = aiohttp.ClientSession()
        try:
            await AiohttpAdapter(external).close()
            owned_adapter = AiohttpAdapter()
            async with owned_adapter:
                owned_session = owned_adapter.session
            return external.closed, owned_session.closed, owned_adapter.session
        finally:
            await external.close()

    external_closed, owned_closed, session_after = asyncio.run(run())

    assert external_closed is False
    assert owned_closed is True
    assert session_after is None


def test_pipeline_over_aiohttp():
    """Test the async pipeline over a real aiohttp transport."""

    async def scenario(server):
        base_url = str(server.make_url("/"))
        async with AsyncRequestPipeline(base_url=base_url) as pipeline:
            created = await pipeline.post("/widgets", {"color": "blue"})
            missing_widget = await pipeline.get("/widgets/404")
        return created, missing_widget

    created, missing_widget = with_server(scenario)

    assert created == {"id": 1, "color": "blue"}
    assert missing_widget is None
