"""Invoke helpers — call sync or async callables uniformly.

File probes can be ``def`` or ``async def``. The resolver calls them
through this helper so the sync/async check lives in exactly one place.

Usage::

    from wren._internal.invoke import invoke

    found = await invoke(probe.exists, path)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
