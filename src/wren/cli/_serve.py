"""``wren serve`` — load the config and start every virtual server."""

import argparse
import logging

from wren.cli._load import load_or_exit
from wren.config import ServeConfig


def serve(args: argparse.Namespace) -> None:
    """Validate the whole config, then hand it to the pounce bootstrap.

    CLI flags override the ``ServeConfig`` defaults.
    """
    defaults = ServeConfig()
    settings = ServeConfig(
        host=args.host or defaults.host,
        workers=args.workers if args.workers is not None else defaults.workers,
        log_level=args.log_level or defaults.log_level,
    )
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    servers = load_or_exit(args.config)

    from wren.server.run import run_servers

    run_servers(servers, settings)
