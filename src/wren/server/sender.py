"""ASGI response sending — translates wren response types to ASGI messages.

Handles in-memory responses and files streamed from disk in chunks.
"""

import logging

import anyio

from wren._internal.asgi import Send
from wren.errors import ResponseAbortedError
from wren.http.response import FileResponse, Response

logger = logging.getLogger("wren.server")

DEFAULT_CHUNK_SIZE = 64 * 1024


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _encode_headers(headers: tuple[tuple[str, str], ...]) -> list[tuple[bytes, bytes]]:
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in headers]


async def send_response(response: Response, send: Send) -> None:
    """Translate a wren Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    raw_headers.extend(_encode_headers(response.headers))

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


async def send_file_response(
    response: FileResponse,
    send: Send,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Stream a file as the response body.

    The file is opened before anything is sent, so an ``OSError`` from
    a vanished or unreadable file propagates while the caller can still
    answer with a different response. Headers are sent exactly as given;
    ``Content-Type`` and ``Content-Length`` are the caller's job.

    Raises:
        OSError: If the file cannot be opened. Nothing has been sent.
        ResponseAbortedError: If reading fails after the headers went out.
    """
    async with await anyio.open_file(response.path, "rb") as file:
        await send(
            {
                "type": "http.response.start",
                "status": response.status,
                "headers": _encode_headers(response.headers),
            }
        )
        try:
            while chunk := await file.read(chunk_size):
                await send(
                    {
                        "type": "http.response.body",
                        "body": chunk,
                        "more_body": True,
                    }
                )
        except OSError as exc:
            logger.warning("Read failed mid-stream for %s: %s", response.path, exc)
            msg = f"{response.path} could not be read to the end"
            raise ResponseAbortedError(msg) from exc

    # Close the stream
    await send(
        {
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        }
    )
