"""URL path helpers — normalization, location matching, extensions.

Pure functions over strings. Shared by the loader (normalizing
configured paths once at startup) and the resolver (per request).

Normalized form: no leading or trailing ``/``. The root is spelled
``"/"`` rather than the empty string so that it never reads as
"missing"::

    normalize_path("/blog/post/")  # "blog/post"
    normalize_path("///")          # "/"
    normalize_path(None)           # "/"
"""

ROOT = "/"


def normalize_path(path: str | None) -> str:
    """Strip leading and trailing separators. Absent or empty → ``"/"``."""
    if path is None or path == ROOT:
        return ROOT
    stripped = path.lstrip("/").rstrip("/")
    return stripped or ROOT


def split_segments(path: str) -> tuple[str, ...]:
    """Split a path into its non-empty segments."""
    return tuple(segment for segment in path.split("/") if segment)


def match_location(request_path: str, location: str) -> str | None:
    """Return the local path for *request_path* under *location*, or ``None``.

    Matching is segment-wise: location ``"docs"`` matches ``/docs`` and
    ``/docs/guide`` but not ``/documentation``.

    For the unscoped location ``"/"`` every request matches and the
    request path is returned unchanged.
    """
    if location == ROOT:
        return request_path

    prefix = split_segments(location)
    segments = split_segments(request_path)
    if segments[: len(prefix)] != prefix:
        return None
    return normalize_path("/".join(segments[len(prefix) :]))


def file_extension(path: str) -> str | None:
    """Lowercased suffix after the last dot of the final segment.

    Dots in directory names do not count. A leading dot still marks an
    extension, so ``".env"`` reports ``"env"``.
    """
    name = path.rstrip("/").rpartition("/")[2]
    stem, dot, suffix = name.rpartition(".")
    if not dot or not suffix:
        return None
    return suffix.lower()


def strip_extension(path: str) -> str:
    """Drop the final segment's extension, keeping directories intact."""
    head, sep, name = path.rpartition("/")
    stem, dot, _ = name.rpartition(".")
    if not dot:
        return path
    return f"{head}{sep}{stem}"


def join_url(*parts: str) -> str:
    """Join normalized paths into an absolute URL path.

    Root parts are skipped, so ``join_url("/", "about")`` is ``"/about"``
    and ``join_url("/", "/")`` is ``"/"``.
    """
    segments = [part for part in (normalize_path(p) for p in parts) if part != ROOT]
    return "/" + "/".join(segments)
