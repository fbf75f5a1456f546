"""HTTP responses with chainable .with_*() transformation API.

Each transformation returns a new response; nothing is mutated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path


def _drop(headers: tuple[tuple[str, str], ...], name: str) -> tuple[tuple[str, str], ...]:
    lowered = name.lower()
    return tuple((key, value) for key, value in headers if key.lower() != lowered)


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response with an in-memory body.

    Construct with a body and status, then chain ``.with_header()``
    calls. Each call returns a new ``Response``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), or ``None``."""
        lowered = name.lower()
        for key, value in self.headers:
            if key.lower() == lowered:
                return value
        return None


@dataclass(frozen=True, slots=True)
class FileResponse:
    """A response whose body is streamed from a file on disk.

    ``Content-Type`` and ``Content-Length`` travel in ``headers`` so the
    header rules can override or remove them like any other header.
    """

    path: Path
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()

    def with_header(self, name: str, value: str) -> FileResponse:
        """Return a new FileResponse with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def without_header(self, name: str) -> FileResponse:
        """Return a new FileResponse with every *name* header removed."""
        return replace(self, headers=_drop(self.headers, name))


def redirect(url: str, status: int = 302) -> Response:
    """A redirect response pointing at *url*."""
    return Response(body="", status=status).with_header("Location", url)
