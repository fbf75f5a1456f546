"""ASGI applications — one ``PortApp`` per listening port.

Several virtual servers may share a port as long as their locations
differ; requests go to the first one (in config order) whose location
matches. ``build_apps`` groups a validated config into these apps::

    servers = load_config("config.json")
    apps = build_apps(servers)
    # {8080: PortApp(...), 8081: PortApp(...)}

The httpx client used for proxying is opened per pounce worker and
closed on worker shutdown. Without worker hooks (tests, other ASGI
servers) a client is opened and closed around each proxied request.
"""

import contextlib
import contextvars
from collections.abc import Iterable
from dataclasses import dataclass

import httpx

from wren._internal.asgi import Receive, Scope, Send
from wren.config import ServeConfig, VirtualServerConfig
from wren.fs import FileProbe
from wren.resolver import Resolver
from wren.server.handler import handle_request


@dataclass(frozen=True, slots=True)
class VirtualServer:
    """A validated config paired with its resolver."""

    config: VirtualServerConfig
    resolver: Resolver

    @classmethod
    def from_config(cls, config: VirtualServerConfig, probe: FileProbe | None = None) -> "VirtualServer":
        return cls(config=config, resolver=Resolver(config, probe))


class PortApp:
    """ASGI 3.0 application serving every virtual server on one port."""

    __slots__ = ("_client_var", "_transport", "port", "servers", "settings")

    def __init__(
        self,
        servers: Iterable[VirtualServer],
        settings: ServeConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.servers = tuple(servers)
        if not self.servers:
            msg = "PortApp needs at least one virtual server"
            raise ValueError(msg)
        self.port = self.servers[0].config.port
        self.settings = settings or ServeConfig()
        self._transport = transport
        self._client_var: contextvars.ContextVar[httpx.AsyncClient | None] = contextvars.ContextVar(
            f"wren_client_{self.port}", default=None
        )

    @property
    def proxies(self) -> bool:
        """True if any virtual server on this port forwards to an upstream."""
        return any(server.config.is_proxy for server in self.servers)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan and per-worker lifecycle scopes directly,
        then delegates HTTP scopes to the request handler.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] == "pounce.worker.startup":
            if self.proxies:
                self._client_var.set(self._make_client())
            return

        if scope["type"] == "pounce.worker.shutdown":
            client = self._client_var.get()
            if client is not None:
                await client.aclose()
                self._client_var.set(None)
            return

        async with contextlib.AsyncExitStack() as stack:

            async def get_client() -> httpx.AsyncClient:
                client = self._client_var.get()
                if client is None:
                    client = await stack.enter_async_context(self._make_client())
                return client

            await handle_request(
                scope,
                receive,
                send,
                servers=self.servers,
                get_client=get_client,
                chunk_size=self.settings.chunk_size,
            )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge the ASGI lifespan protocol. Nothing to set up."""
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.proxy_timeout,
            follow_redirects=False,
            transport=self._transport,
        )


def build_apps(
    servers: Iterable[VirtualServerConfig],
    settings: ServeConfig | None = None,
    *,
    probe: FileProbe | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[int, PortApp]:
    """Group virtual servers by port, preserving config order."""
    by_port: dict[int, list[VirtualServer]] = {}
    for config in servers:
        by_port.setdefault(config.port, []).append(VirtualServer.from_config(config, probe))
    return {
        port: PortApp(group, settings, transport=transport) for port, group in by_port.items()
    }
