"""Filesystem probe used by the resolver.

The resolver only needs to ask "is there a file here?". Anything with
an ``exists(path)`` method works — sync or async — so tests can pass a
set-backed fake and production uses ``LocalFileSystem``.
"""

from collections.abc import Awaitable
from pathlib import Path
from typing import Protocol

import anyio


class FileProbe(Protocol):
    """Answers whether a servable file exists at a path."""

    def exists(self, path: Path) -> bool | Awaitable[bool]: ...


class LocalFileSystem:
    """Probe the real disk without blocking the event loop.

    Only regular files count: a directory is not a servable artifact,
    so ``/docs`` falls through to ``docs.html`` when ``docs/`` exists.
    """

    __slots__ = ()

    async def exists(self, path: Path) -> bool:
        return await anyio.Path(path).is_file()
