"""Response decisions — what the resolver tells the transport to do.

The resolver never writes to the wire. It returns one of four frozen
decision types and the ASGI handler turns that into messages:

- ``Serve`` — stream a file from disk
- ``Redirect`` — 302 to another URL
- ``Status`` — fixed status code and HTML body
- ``ProxyDelegate`` — hand the whole request to an upstream
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class Serve:
    """Serve the file at ``path``."""

    path: Path


@dataclass(frozen=True, slots=True)
class Redirect:
    """Redirect the client to ``target``."""

    target: str
    status: int = 302


@dataclass(frozen=True, slots=True)
class Status:
    """Respond with a fixed status and body."""

    code: int
    body: str


@dataclass(frozen=True, slots=True)
class ProxyDelegate:
    """Forward the request, path untouched, to ``upstream``."""

    path: str
    upstream: str


type Decision = Serve | Redirect | Status | ProxyDelegate


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Transient record of one resolution, scoped to a single request."""

    request_path: str
    local_path: str | None
    decision: Decision
