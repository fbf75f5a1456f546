"""Wren exception hierarchy.

Shared across the loader, resolver, and server so every module raises
and catches the same types.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when a virtual server definition is invalid.

    Fatal: the CLI reports it and exits before any server starts.
    ``index`` is the 1-based position of the offending server in the
    config file, or ``None`` for file-level problems.
    """

    def __init__(self, message: str, *, index: int | None = None) -> None:
        self.index = index
        self.message = message
        super().__init__(f"Server {index}: {message}" if index is not None else message)


class ResponseAbortedError(WrenError):
    """A response body failed after its headers were sent.

    Nothing can be sent in its place. The ASGI server sees the exception
    and drops the connection, so the client never takes a short body
    for a complete one.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """A request-scoped failure that maps directly to an HTTP status code.

    Raised inside the resolver and converted to a response by the
    error responder. Never reaches the transport layer.
    """

    status: int
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no file answers the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class Forbidden(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """403 — the file type is denied or the path escapes the root."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


class InternalServerError(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """500 — resolution failed unexpectedly."""

    def __init__(self, detail: str = "Internal Server Error") -> None:
        super().__init__(status=500, detail=detail)
