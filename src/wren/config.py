"""Virtual server and run configuration.

Both are frozen dataclasses. ``VirtualServerConfig`` instances are built by
``wren.loader`` from raw JSON; construct them directly in tests.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from wren.paths import ROOT


class HtmlExtensionPolicy(Enum):
    """What to do when a request names an ``.html`` file explicitly.

    ``REDIRECT`` sends the client to the extension-stripped URL
    (``/about.html`` → ``/about``). ``KEEP`` serves the file as requested.
    """

    REDIRECT = "redirect"
    KEEP = "keep"


@dataclass(frozen=True, slots=True)
class VirtualServerConfig:
    """One configured virtual server. Immutable after creation.

    Exactly one of ``root`` and ``proxy_target`` is set. Paths
    (``location`` and the error pages) are stored normalized, with
    ``"/"`` as the root form. Header rules with a ``None`` value mark
    headers that must be absent from served responses::

        config = VirtualServerConfig(root=Path("public"), port=8080, location="docs")
    """

    root: Path | None = None
    proxy_target: str | None = None
    port: int = 80
    location: str = ROOT
    index: int = 1

    html_extension: HtmlExtensionPolicy = HtmlExtensionPolicy.REDIRECT
    allowed_file_types: frozenset[str] | None = None
    forbidden_file_types: frozenset[str] | None = None
    headers: tuple[tuple[str, str | None], ...] = ()

    # Error pages
    not_found_path: str | None = None
    internal_error_path: str | None = None
    forbidden_path: str | None = None

    @property
    def is_proxy(self) -> bool:
        return self.proxy_target is not None

    def describe(self) -> str:
        """One-line summary used in startup logs and ``wren check``."""
        target = f"proxy {self.proxy_target}" if self.is_proxy else f"root {self.root}"
        return f"Server {self.index}: {target} on port {self.port} at /{self.location.strip('/')}"


@dataclass(frozen=True, slots=True)
class ServeConfig:
    """Process-wide run settings. Immutable after creation.

    Override what you need::

        settings = ServeConfig(host="127.0.0.1", workers=4)
    """

    host: str = "0.0.0.0"
    workers: int = 1
    log_level: str = "info"

    # Reverse proxy
    proxy_timeout: float = 30.0

    # File streaming
    chunk_size: int = 64 * 1024
