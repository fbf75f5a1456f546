"""Reverse proxy — forwards a whole request to an upstream with httpx.

The request path is forwarded untouched (location prefix included).
Hop-by-hop headers are dropped in both directions and the usual
``X-Forwarded-*`` headers are added. The upstream body is streamed
back without buffering.
"""

import logging

import httpx

from wren._internal.asgi import Send
from wren.error_pages import default_body
from wren.http.request import Request
from wren.http.response import Response
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")

# RFC 9110 §7.6.1 connection-specific headers, plus host (httpx sets its own)
HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)


def upstream_url(upstream: str, request: Request) -> str:
    """Absolute upstream URL for *request*.

    A bare ``host:port`` target is treated as plain HTTP.
    """
    base = upstream if "://" in upstream else f"http://{upstream}"
    return base.rstrip("/") + request.url


def has_body(request: Request) -> bool:
    """True when the client announced a request body."""
    length = request.headers.get("content-length")
    if length is not None:
        return length.strip() not in ("", "0")
    return "transfer-encoding" in request.headers


def forwarded_headers(request: Request) -> list[tuple[str, str]]:
    """Request headers to send upstream."""
    headers = request.headers.without((*HOP_BY_HOP, "host", "x-forwarded-for"))
    prior = request.headers.get("x-forwarded-for")
    if request.client is not None:
        client_ip = request.client[0]
        headers.append(("x-forwarded-for", f"{prior}, {client_ip}" if prior else client_ip))
    elif prior is not None:
        headers.append(("x-forwarded-for", prior))
    host = request.headers.get("host")
    if host is not None:
        headers.append(("x-forwarded-host", host))
    headers.append(("x-forwarded-proto", request.scheme))
    return headers


async def forward(
    request: Request,
    upstream: str,
    send: Send,
    *,
    client: httpx.AsyncClient,
) -> int:
    """Proxy *request* to *upstream* and relay the answer through *send*.

    Returns the status sent to the client. Transport failures before
    the upstream answers become ``502 Bad Gateway``.
    """
    url = upstream_url(upstream, request)
    outgoing = client.build_request(
        request.method,
        url,
        headers=forwarded_headers(request),
        content=request.stream() if has_body(request) else None,
    )
    try:
        upstream_response = await client.send(outgoing, stream=True)
    except httpx.HTTPError as exc:
        logger.warning("502 %s %s: upstream %s failed: %s", request.method, request.path, url, exc)
        await send_response(Response(body=default_body(502), status=502), send)
        return 502

    try:
        raw_headers = [
            (name.lower(), value)
            for name, value in upstream_response.headers.raw
            if name.decode("latin-1").lower() not in HOP_BY_HOP
        ]
        await send(
            {
                "type": "http.response.start",
                "status": upstream_response.status_code,
                "headers": raw_headers,
            }
        )
        try:
            async for chunk in upstream_response.aiter_raw():
                if chunk:
                    await send({"type": "http.response.body", "body": chunk, "more_body": True})
        except httpx.HTTPError as exc:
            logger.warning("Upstream %s broke mid-stream: %s", url, exc)
        await send({"type": "http.response.body", "body": b"", "more_body": False})
    finally:
        await upstream_response.aclose()

    return upstream_response.status_code


