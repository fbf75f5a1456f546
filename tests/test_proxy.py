"""Tests for reverse-proxy passthrough using httpx.MockTransport."""

import httpx
import pytest

from wren.app import build_apps
from wren.config import VirtualServerConfig
from wren.http.headers import Headers
from wren.http.request import Request
from wren.server.proxy import forward, forwarded_headers, has_body, upstream_url
from wren.testing import TestClient


async def _no_body() -> dict:
    return {"type": "http.request", "body": b"", "more_body": False}


def make_request(
    path: str = "/", query: bytes = b"", headers=(), raw_path: bytes | None = None
) -> Request:
    return Request(
        method="GET",
        path=path,
        headers=Headers(tuple(headers)),
        query_string=query,
        scheme="http",
        http_version="1.1",
        server=("testserver", 80),
        client=("10.0.0.5", 4321),
        _receive=_no_body,
        raw_path=raw_path,
    )


class Upstream:
    """Records what the proxy sent and answers with a fixed response."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []
        self.response = response or httpx.Response(
            200,
            headers={"content-type": "application/json", "connection": "close"},
            stream=httpx.ByteStream(b'{"ok": true}'),
        )

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.bodies.append(await request.aread())
        return self.response


def proxy_app(upstream, **overrides):
    config = VirtualServerConfig(proxy_target="localhost:3000", **overrides)
    (app,) = build_apps([config], transport=httpx.MockTransport(upstream)).values()
    return app


class TestUpstreamUrl:
    def test_bare_host_gets_http(self) -> None:
        assert upstream_url("localhost:3000", make_request("/a")) == "http://localhost:3000/a"

    def test_scheme_and_trailing_slash(self) -> None:
        url = upstream_url("https://api.example.com/", make_request("/v1", b"q=1"))
        assert url == "https://api.example.com/v1?q=1"

    def test_escaped_path_stays_escaped(self) -> None:
        request = make_request("/files/a?b#c", b"x=1", raw_path=b"/files/a%3Fb%23c")
        assert upstream_url("up", request) == "http://up/files/a%3Fb%23c?x=1"

    def test_decoded_path_without_raw_path(self) -> None:
        assert upstream_url("up", make_request("/a b")) == "http://up/a b"


class TestForwardedHeaders:
    def test_hop_by_hop_and_host_dropped(self) -> None:
        request = make_request(
            headers=[(b"host", b"example.com"), (b"connection", b"keep-alive"), (b"accept", b"*/*")]
        )
        names = [name for name, _ in forwarded_headers(request)]
        assert "connection" not in names
        assert "host" not in names
        assert "accept" in names

    def test_forwarded_for_appends_client(self) -> None:
        request = make_request(headers=[(b"x-forwarded-for", b"1.2.3.4")])
        headers = dict(forwarded_headers(request))
        assert headers["x-forwarded-for"] == "1.2.3.4, 10.0.0.5"
        assert headers["x-forwarded-proto"] == "http"

    def test_forwarded_host(self) -> None:
        request = make_request(headers=[(b"host", b"example.com")])
        assert dict(forwarded_headers(request))["x-forwarded-host"] == "example.com"

    def test_has_body(self) -> None:
        assert not has_body(make_request())
        assert not has_body(make_request(headers=[(b"content-length", b"0")]))
        assert has_body(make_request(headers=[(b"content-length", b"5")]))
        assert has_body(make_request(headers=[(b"transfer-encoding", b"chunked")]))


class TestProxyPassthrough:
    async def test_relays_response(self) -> None:
        upstream = Upstream()
        async with TestClient(proxy_app(upstream)) as client:
            response = await client.get("/users/1?full=1")

        assert response.status == 200
        assert response.body == b'{"ok": true}'
        assert response.content_type == "application/json"
        assert response.header("connection") is None

        (sent,) = upstream.requests
        assert str(sent.url) == "http://localhost:3000/users/1?full=1"
        assert sent.headers["x-forwarded-host"] == "testserver"

    async def test_location_prefix_is_forwarded(self) -> None:
        upstream = Upstream()
        async with TestClient(proxy_app(upstream, location="api")) as client:
            await client.get("/api/items")

        assert upstream.requests[0].url.path == "/api/items"

    async def test_forwards_method_and_body(self) -> None:
        upstream = Upstream(httpx.Response(201, stream=httpx.ByteStream(b"created")))
        async with TestClient(proxy_app(upstream)) as client:
            response = await client.post("/items", body=b"payload")

        assert response.status == 201
        assert upstream.requests[0].method == "POST"
        assert upstream.bodies == [b"payload"]

    async def test_upstream_status_passes_through(self) -> None:
        upstream = Upstream(httpx.Response(404, stream=httpx.ByteStream(b"upstream missing")))
        async with TestClient(proxy_app(upstream, not_found_path="404")) as client:
            response = await client.get("/nope")

        assert response.status == 404
        assert response.body == b"upstream missing"

    async def test_connection_failure_is_bad_gateway(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with TestClient(proxy_app(refuse)) as client:
            response = await client.get("/")

        assert response.status == 502
        assert response.text == "<h1>502 Bad Gateway</h1>"

    async def test_proxy_ignores_file_type_policy(self) -> None:
        upstream = Upstream()
        app = proxy_app(upstream, forbidden_file_types=frozenset({"env"}))
        async with TestClient(app) as client:
            response = await client.get("/config.env")
        assert response.status == 200


class TestWorkerClient:
    async def test_worker_startup_opens_and_shutdown_closes(self) -> None:
        upstream = Upstream()
        app = proxy_app(upstream)

        async def receive() -> dict:
            return {}

        async def send(message) -> None:
            pytest.fail("worker lifecycle scopes send nothing")

        await app({"type": "pounce.worker.startup"}, receive, send)
        client = app._client_var.get()
        assert isinstance(client, httpx.AsyncClient)

        await app({"type": "pounce.worker.shutdown"}, receive, send)
        assert client.is_closed
        assert app._client_var.get() is None


class TestForward:
    async def test_escaped_characters_reach_upstream(self) -> None:
        upstream = Upstream()
        request = make_request("/files/a?b#c", b"x=1", raw_path=b"/files/a%3Fb%23c")

        async def send(message) -> None:
            pass

        async with httpx.AsyncClient(transport=httpx.MockTransport(upstream)) as client:
            status = await forward(request, "up", send, client=client)

        assert status == 200
        (sent,) = upstream.requests
        assert sent.url.raw_path == b"/files/a%3Fb%23c?x=1"
        assert sent.url.query == b"x=1"
