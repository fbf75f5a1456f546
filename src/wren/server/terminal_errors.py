"""Terminal error formatting for unexpected resolution failures.

Replaces raw ``logger.exception()`` with clean diagnostics that keep
the useful frames. Verbosity is controlled by the ``WREN_TRACEBACK``
environment variable:

- ``compact`` (default) — error summary plus application frames
- ``full`` — the complete Python traceback
- ``minimal`` — one line with the failing location
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback

logger = logging.getLogger("wren.server")


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from wren or the host app (not stdlib/site-packages)."""
    if "site-packages" in filename:
        return False
    if filename.startswith("<"):
        return False
    stdlib_prefix = os.path.dirname(os.__file__)
    return not filename.startswith(stdlib_prefix)


def format_compact_traceback(exc: BaseException) -> str:
    """Error summary followed by at most five application frames.

    Falls back to the last three frames when none belong to the app.
    """
    parts: list[str] = [f"{type(exc).__name__}: {exc}"]

    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    app_frames = [f for f in frames if _is_app_frame(f.filename)]
    display_frames = app_frames if app_frames else frames[-3:]

    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")

    return "\n".join(parts)


def format_minimal_error(exc: BaseException) -> str:
    """One-line error summary."""
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def log_error(exc: BaseException, path: str | None = None) -> None:
    """Log an unexpected failure that was downgraded to a 500.

    Args:
        exc: The exception raised while resolving or sending.
        path: The request path being served, when known.
    """
    prefix = f"500 {path}" if path is not None else "Server error"
    traceback_style = os.environ.get("WREN_TRACEBACK", "compact").lower()

    if traceback_style == "full":
        logger.error(prefix, exc_info=exc)
    elif traceback_style == "minimal":
        logger.error("%s - %s", prefix, format_minimal_error(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
