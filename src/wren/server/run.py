"""Server bootstrap — one pounce server per configured port.

Pounce's ``run()`` takes an import string, but wren builds its ASGI
apps from a validated config at runtime, so ``pounce.Server`` is used
directly with each live ``PortApp``.

A single port runs in the calling process. Several ports each get a
child process; the parent waits for all of them and stops the rest
when one exits.
"""

from __future__ import annotations

import logging
import multiprocessing
from collections.abc import Sequence

from wren.app import PortApp, build_apps
from wren.config import ServeConfig, VirtualServerConfig

logger = logging.getLogger("wren.server")


def serve_port(app: PortApp, settings: ServeConfig) -> None:
    """Run one pounce server for *app* until it is stopped."""
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=settings.host,
        port=app.port,
        workers=settings.workers,
        log_level=settings.log_level,
    )
    server = Server(config, app)
    server.run()


def _serve_configs(configs: Sequence[VirtualServerConfig], settings: ServeConfig) -> None:
    """Child-process entry point. Rebuilds the app from picklable configs."""
    (app,) = build_apps(configs, settings).values()
    serve_port(app, settings)


def run_servers(
    servers: Sequence[VirtualServerConfig],
    settings: ServeConfig | None = None,
) -> None:
    """Start every virtual server in *servers*.

    *servers* must already be validated; configuration errors are the
    caller's to report before anything starts listening.
    """
    settings = settings or ServeConfig()
    for config in servers:
        logger.info("%s", config.describe())

    apps = build_apps(servers, settings)
    if len(apps) == 1:
        (app,) = apps.values()
        serve_port(app, settings)
        return

    processes = [
        multiprocessing.Process(
            target=_serve_configs,
            args=(tuple(server.config for server in app.servers), settings),
            name=f"wren-{port}",
        )
        for port, app in apps.items()
    ]
    for process in processes:
        process.start()
    try:
        for process in processes:
            process.join()
            if process.exitcode:
                logger.error("%s exited with code %d", process.name, process.exitcode)
                break
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        for process in processes:
            if process.is_alive():
                process.terminate()
                process.join()
