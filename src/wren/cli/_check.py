"""``wren check`` — validate the config file without starting anything."""

import argparse

from wren.cli._load import load_or_exit


def run_check(args: argparse.Namespace) -> None:
    """Print one summary line per virtual server, or exit 1 on the first error."""
    servers = load_or_exit(args.config)
    for server in servers:
        print(server.describe())
    print(f"{len(servers)} server(s) OK")
