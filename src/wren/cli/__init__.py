"""Wren CLI — start the configured servers or validate the config.

Entry point registered as ``wren`` in ``pyproject.toml``::

    [project.scripts]
    wren = "wren.cli:main"
"""

import argparse
import sys

from wren.loader import DEFAULT_CONFIG_PATH


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wren`` command."""
    parser = argparse.ArgumentParser(
        prog="wren",
        description="Wren — a configuration-driven static file server and reverse proxy.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wren serve -------------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Start every configured virtual server")
    serve_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the JSON config file (default: {DEFAULT_CONFIG_PATH})",
    )
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count per port",
    )
    serve_parser.add_argument(
        "--log-level",
        default=None,
        choices=("debug", "info", "warning", "error", "critical"),
        help="Log level (default: info)",
    )

    # -- wren check -------------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate the config file")
    check_parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the JSON config file (default: {DEFAULT_CONFIG_PATH})",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from wren.cli._serve import serve

        serve(args)
    elif args.command == "check":
        from wren.cli._check import run_check

        run_check(args)
