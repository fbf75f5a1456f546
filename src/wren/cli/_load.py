"""Shared config loading for CLI commands — fatal on any config error."""

import sys

from wren.config import VirtualServerConfig
from wren.errors import ConfigurationError
from wren.loader import load_config


def load_or_exit(path: str) -> tuple[VirtualServerConfig, ...]:
    """Load *path*, or report the error and terminate the whole process.

    No virtual server starts when any definition is invalid.
    """
    try:
        return load_config(path)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print("Program has exited.", file=sys.stderr)
        raise SystemExit(1) from exc
