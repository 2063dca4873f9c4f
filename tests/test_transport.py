"""Tests for the executor and the aiohttp transport."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as AiohttpTestServer
from reqtree import (
    Body,
    CachePolicy,
    CachePolicyType,
    ClientSettings,
    Header,
    Method,
    Query,
    Request,
    SessionHeader,
    TransportError,
    Url,
    fold,
)
from reqtree.core.executor import Executor
from reqtree.http.client import AiohttpTransport
from reqtree.params import CombinedParams


async def echo(request: web.Request) -> web.Response:
    body = await request.read()
    return web.json_response(
        {
            "method": request.method,
            "query": dict(request.query),
            "headers": dict(request.headers),
            "body": body.decode(),
        },
        status=201 if request.method == "POST" else 200,
    )


async def large(request: web.Request) -> web.Response:
    return web.Response(body=b"x" * 1024)


async def start_server() -> AiohttpTestServer:
    app = web.Application()
    app.router.add_route("*", "/echo", echo)
    app.router.add_get("/large", large)
    server = AiohttpTestServer(app)
    await server.start_server()
    return server


class TestExecutor:
    """Tests for Executor."""

    @pytest.mark.asyncio
    async def test_single_send_per_execute(self):
        """Test that execute calls the transport exactly once."""
        transport = AsyncMock()
        transport.send.return_value = MagicMock(status_code=200)
        descriptor, config = fold(Url("https://example.com"))

        response = await Executor(transport).execute(descriptor, config)

        assert response.status_code == 200
        transport.send.assert_awaited_once_with(descriptor, config)

    @pytest.mark.asyncio
    async def test_failure_wrapped_without_retry(self):
        """Test that the first failure is final and wrapped."""
        transport = AsyncMock()
        transport.send.side_effect = asyncio.TimeoutError()
        descriptor, config = fold(Url("https://example.com"))

        with pytest.raises(TransportError) as exc_info:
            await Executor(transport).execute(descriptor, config)

        assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)
        transport.send.assert_awaited_once()


class TestHeaderMerging:
    """Tests for AiohttpTransport header precedence."""

    def test_request_headers_override_session_headers(self):
        """Test precedence between defaults, session and request headers."""
        transport = AiohttpTransport(ClientSettings(user_agent="default-agent"))
        descriptor, config = fold(
            CombinedParams(
                Url("https://example.com"),
                SessionHeader("X-Session", "s"),
                SessionHeader("Accept", "text/plain"),
                Header("accept", "application/json"),
                Header("X-Dup", "1"),
                Header("X-Dup", "2"),
            )
        )

        headers = transport._build_headers(descriptor, config)

        assert headers["User-Agent"] == "default-agent"
        assert headers["X-Session"] == "s"
        assert headers["accept"] == "application/json"
        assert "Accept" not in headers
        assert headers["X-Dup"] == "2"

    def test_cache_policy_sets_cache_control(self):
        """Test the cache policy directive."""
        transport = AiohttpTransport()
        descriptor, config = fold(CombinedParams(Url("https://example.com"), CachePolicy(CachePolicyType.RELOAD)))
        assert transport._build_headers(descriptor, config)["Cache-Control"] == "no-cache"

    def test_default_timeout_used_when_session_sets_none(self):
        """Test timeout fallback to client settings."""
        transport = AiohttpTransport(ClientSettings(default_timeout=7))
        _, config = fold(Url("https://example.com"))
        timeout = transport._build_timeout(config)
        assert timeout.sock_read == 7
        assert timeout.total is None


class TestAiohttpTransport:
    """End-to-end tests against a local aiohttp server."""

    @pytest.mark.asyncio
    async def test_post_round_trip(self):
        """Test that method, query, headers and body reach the server."""
        server = await start_server()
        try:
            url = str(server.make_url("/echo"))
            documents: list[dict] = []
            statuses: list[int] = []

            await (
                Request(
                    Url(url),
                    Method("POST"),
                    Query("page", 2),
                    Header("X-Token", "first"),
                    Header("X-Token", "second"),
                    Body({"title": "x"}),
                    transport=AiohttpTransport(ClientSettings(user_agent="reqtree-tests")),
                )
                .on_json(documents.append)
                .on_status_code(statuses.append)
                .perform()
            )

            assert statuses == [201]
            echoed = documents[0]
            assert echoed["method"] == "POST"
            assert echoed["query"] == {"page": "2"}
            assert echoed["headers"]["X-Token"] == "second"
            assert echoed["headers"]["User-Agent"] == "reqtree-tests"
            assert echoed["headers"]["Content-Type"] == "application/json"
            assert echoed["body"] == '{"title": "x"}'
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_content_size_limit(self):
        """Test that oversized bodies become transport errors."""
        server = await start_server()
        try:
            errors: list[Exception] = []
            on_data = MagicMock()

            await (
                Request(
                    Url(str(server.make_url("/large"))),
                    transport=AiohttpTransport(ClientSettings(max_content_size=100)),
                )
                .on_data(on_data)
                .on_error(errors.append)
                .perform()
            )

            assert isinstance(errors[0], TransportError)
            on_data.assert_not_called()
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        """Test that network failures reach the error consumer."""
        server = await start_server()
        url = str(server.make_url("/echo"))
        await server.close()

        errors: list[Exception] = []
        await Request(Url(url)).on_error(errors.append).perform()

        assert len(errors) == 1
        assert isinstance(errors[0], TransportError)
