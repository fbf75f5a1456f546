"""Resolution engine — decides how a virtual server answers a request path.

Resolution is an ordered sequence of states. Each state either returns
a terminal decision or lets the next one run; the filesystem probe is
only awaited between states::

    proxy → containment → file-type policy → exact file → .html sibling → not found

``Forbidden`` and ``NotFound`` are raised as ``HTTPError`` and turned
into decisions by the error responder at the ``resolve()`` boundary.
Anything else that escapes a state is logged and becomes a 500, so a
broken disk never takes the worker down.

The resolver holds only its frozen config and a probe. It is safe to
share across concurrent requests.
"""

import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from wren._internal.invoke import invoke
from wren.config import HtmlExtensionPolicy, VirtualServerConfig
from wren.decisions import Decision, ProxyDelegate, Redirect, RequestContext, Serve
from wren.error_pages import error_response
from wren.errors import Forbidden, HTTPError, InternalServerError, NotFound
from wren.fs import FileProbe, LocalFileSystem
from wren.paths import ROOT, file_extension, join_url, match_location, normalize_path, strip_extension

INDEX_NAME = "index"
HTML = "html"


@dataclass(slots=True)
class _Lookup:
    """Per-request working state threaded through the resolution states."""

    request_path: str
    local_path: str
    file_path: Path
    extension: str | None = None
    # True when the extension was spelled out in the URL itself
    explicit: bool = False
    sibling_exists: bool | None = None

    @property
    def sibling_path(self) -> Path:
        return self.file_path.with_name(f"{self.file_path.name}.{HTML}")


type _State = Callable[[_Lookup], Awaitable[Decision | None]]


class Resolver:
    """Resolve request paths for one virtual server.

    Usage::

        resolver = Resolver(config)
        local = resolver.match("/docs/guide")
        if local is not None:
            context = await resolver.resolve("/docs/guide", local)
    """

    __slots__ = ("_root", "config", "probe")

    def __init__(self, config: VirtualServerConfig, probe: FileProbe | None = None) -> None:
        self.config = config
        self.probe = probe or LocalFileSystem()
        self._root = Path(os.path.normpath(config.root.absolute())) if config.root else None

    def match(self, request_path: str) -> str | None:
        """Local path for *request_path*, or ``None`` if outside this server's location."""
        return match_location(request_path, self.config.location)

    async def resolve(self, request_path: str, local_path: str | None = None) -> RequestContext:
        """Run every state in order and return the terminal decision.

        *local_path* is the result of ``match()``; it is computed here
        when omitted. A path outside the location resolves to NotFound.
        """
        if local_path is None:
            local_path = self.match(request_path)

        try:
            if local_path is None:
                raise NotFound(f"{request_path} is outside /{self.config.location}")
            decision = await self._run(request_path, normalize_path(local_path))
        except HTTPError as exc:
            decision = error_response(exc, self.config, request_path)
        except Exception as exc:
            from wren.server.terminal_errors import log_error

            log_error(exc, request_path)
            decision = error_response(InternalServerError(), self.config, request_path)

        return RequestContext(request_path=request_path, local_path=local_path, decision=decision)

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    async def _run(self, request_path: str, local_path: str) -> Decision:
        if self.config.proxy_target is not None:
            return ProxyDelegate(path=request_path, upstream=self.config.proxy_target)

        lookup = _Lookup(
            request_path=request_path,
            local_path=local_path,
            file_path=self._file_path(local_path),
        )
        states: tuple[_State, ...] = (
            self._check_file_type,
            self._serve_exact,
            self._serve_sibling,
        )
        for state in states:
            decision = await state(lookup)
            if decision is not None:
                return decision
        raise NotFound(f"No file for {request_path}")

    def _file_path(self, local_path: str) -> Path:
        """Candidate file for *local_path*, confined to the root."""
        assert self._root is not None
        name = INDEX_NAME if local_path == ROOT else local_path
        candidate = Path(os.path.normpath(self._root / name))
        if not candidate.is_relative_to(self._root) or candidate == self._root:
            raise Forbidden(f"{local_path} escapes the server root")
        return candidate

    async def _exists(self, path: Path) -> bool:
        return bool(await invoke(self.probe.exists, path))

    async def _check_file_type(self, lookup: _Lookup) -> Decision | None:
        if lookup.local_path == ROOT:
            lookup.extension = HTML
        elif (extension := file_extension(lookup.local_path)) is not None:
            lookup.extension = extension
            lookup.explicit = True
        else:
            lookup.sibling_exists = await self._exists(lookup.sibling_path)
            if lookup.sibling_exists:
                lookup.extension = HTML

        extension = lookup.extension
        if extension is None:
            return None
        forbidden = self.config.forbidden_file_types
        if forbidden is not None and extension in forbidden:
            raise Forbidden(f".{extension} files are forbidden")
        allowed = self.config.allowed_file_types
        if allowed is not None and extension not in allowed:
            raise Forbidden(f".{extension} files are not allowed")
        return None

    async def _serve_exact(self, lookup: _Lookup) -> Decision | None:
        if not await self._exists(lookup.file_path):
            return None
        if (
            self.config.html_extension is HtmlExtensionPolicy.REDIRECT
            and lookup.explicit
            and lookup.extension == HTML
        ):
            return Redirect(self._canonical_url(strip_extension(lookup.local_path)))
        return Serve(lookup.file_path)

    async def _serve_sibling(self, lookup: _Lookup) -> Decision | None:
        if lookup.sibling_exists is None:
            lookup.sibling_exists = await self._exists(lookup.sibling_path)
        if not lookup.sibling_exists:
            return None
        if lookup.local_path == INDEX_NAME:
            return Redirect(self._canonical_url(INDEX_NAME))
        return Serve(lookup.sibling_path)

    def _canonical_url(self, local_path: str) -> str:
        if local_path == INDEX_NAME:
            return join_url(self.config.location)
        return join_url(self.config.location, local_path)
