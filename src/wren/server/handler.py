"""ASGI handler — translates one HTTP scope into a decision and sends it.

The only component that touches raw ASGI for requests. Picks the
virtual server whose location matches, runs its resolver, then turns
the decision into ASGI messages (file stream, redirect, status page,
or proxy relay).
"""

from __future__ import annotations

import logging
import mimetypes
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import anyio
import httpx

from wren._internal.asgi import Receive, Scope, Send
from wren.config import VirtualServerConfig
from wren.decisions import Decision, ProxyDelegate, Redirect, Serve, Status
from wren.error_pages import default_body, error_response
from wren.errors import NotFound
from wren.formatting import apply_header_rules
from wren.http.request import Request
from wren.http.response import FileResponse, Response, redirect
from wren.server.proxy import forward
from wren.server.sender import send_file_response, send_response

if TYPE_CHECKING:
    from wren.app import VirtualServer

logger = logging.getLogger("wren.server")

type ClientFactory = Callable[[], Awaitable[httpx.AsyncClient]]


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    servers: Sequence[VirtualServer],
    get_client: ClientFactory,
    chunk_size: int,
) -> None:
    """Process a single HTTP request through match → resolve → send."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    for server in servers:
        local_path = server.resolver.match(request.path)
        if local_path is not None:
            break
    else:
        # No virtual server on this port claims the path
        await send_response(Response(body=default_body(404), status=404), send)
        logger.debug("404 %s %s (no location matched)", request.method, request.path)
        return

    context = await server.resolver.resolve(request.path, local_path)
    status = await send_decision(
        context.decision,
        request,
        send,
        config=server.config,
        get_client=get_client,
        chunk_size=chunk_size,
    )
    logger.debug("%d %s %s", status, request.method, request.path)


async def send_decision(
    decision: Decision,
    request: Request,
    send: Send,
    *,
    config: VirtualServerConfig,
    get_client: ClientFactory,
    chunk_size: int,
) -> int:
    """Send *decision* and return the status code put on the wire."""
    match decision:
        case Serve(path=path):
            try:
                response = await build_file_response(path, config)
                await send_file_response(response, send, chunk_size=chunk_size)
            except OSError as exc:
                # Vanished between probe and open, or unreadable: treat as missing
                logger.debug("Could not send %s: %s", path, exc)
                fallback = error_response(NotFound(), config, request.path)
                return await send_decision(
                    fallback,
                    request,
                    send,
                    config=config,
                    get_client=get_client,
                    chunk_size=chunk_size,
                )
            return response.status
        case Redirect(target=target, status=status):
            await send_response(redirect(target, status), send)
            return status
        case Status(code=code, body=body):
            await send_response(Response(body=body, status=code), send)
            return code
        case ProxyDelegate(upstream=upstream):
            client = await get_client()
            return await forward(request, upstream, send, client=client)
    msg = f"Unknown decision: {decision!r}"
    raise TypeError(msg)


def content_type_for(path: Path) -> str:
    """Guess the Content-Type from the file name; text types get a charset."""
    content_type, _ = mimetypes.guess_type(path.name)
    if content_type is None:
        return "application/octet-stream"
    if content_type.startswith("text/") or content_type == "application/javascript":
        return f"{content_type}; charset=utf-8"
    return content_type


async def build_file_response(path: Path, config: VirtualServerConfig) -> FileResponse:
    """FileResponse for *path* with content headers and the server's header rules.

    Raises:
        OSError: If the file cannot be stat'ed.
    """
    stat = await anyio.Path(path).stat()
    response = (
        FileResponse(path=path)
        .with_header("Content-Type", content_type_for(path))
        .with_header("Content-Length", str(stat.st_size))
    )
    return apply_header_rules(response, config.headers)
