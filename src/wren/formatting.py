"""Response formatting — identification header plus configured header rules.

Applied to every served file. Rules come from the virtual server's
``headers`` setting and are evaluated per response; the frozen config
is never touched, so concurrent requests all see the same rules::

    "headers": {"Cache-Control": "no-cache", "X-Powered-By": null}

A string value sets (replaces) the header. ``null`` guarantees the
header is absent, including headers added by earlier stages such as
the identification header itself.
"""

from collections.abc import Iterable

from wren.http.response import FileResponse

SERVER_HEADER = "X-Powered-By"
SERVER_NAME = "Wren"


def apply_header_rules(
    response: FileResponse,
    rules: Iterable[tuple[str, str | None]],
) -> FileResponse:
    """Stamp the identification header, then apply *rules* in order."""
    formatted = response.without_header(SERVER_HEADER).with_header(SERVER_HEADER, SERVER_NAME)
    for name, value in rules:
        formatted = formatted.without_header(name)
        if value is not None:
            formatted = formatted.with_header(name, value)
    return formatted
