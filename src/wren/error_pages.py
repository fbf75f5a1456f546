"""Error responder — maps a request failure to a redirect or a default page.

Each virtual server may name a custom page per failure class
(``notFoundPath``, ``forbiddenPath``, ``internalErrorPath``). A
configured page is reached by redirecting to it under the server's
location; otherwise a minimal HTML body is returned with the status.
"""

from wren.config import VirtualServerConfig
from wren.decisions import Decision, Redirect, Status
from wren.errors import HTTPError
from wren.paths import join_url, normalize_path

DEFAULT_BODIES: dict[int, str] = {
    403: "<h1>403 Forbidden</h1>",
    404: "<h1>404 Not Found</h1>",
    500: "<h1>500 Internal Server Error</h1>",
    502: "<h1>502 Bad Gateway</h1>",
}


def default_body(status: int) -> str:
    """Minimal HTML body for *status*."""
    return DEFAULT_BODIES.get(status, f"<h1>{status}</h1>")


def error_page(config: VirtualServerConfig, status: int) -> str | None:
    """The configured custom page for *status*, if any."""
    if status == 404:
        return config.not_found_path
    if status == 403:
        return config.forbidden_path
    if status == 500:
        return config.internal_error_path
    return None


def error_response(
    error: HTTPError,
    config: VirtualServerConfig | None,
    request_path: str = "/",
) -> Decision:
    """Turn *error* into a terminal decision.

    Redirects to the custom page when one is configured, unless the
    request already targets that page (a missing or forbidden error
    page would otherwise redirect to itself forever).

    Error page paths are relative to the virtual server's location:
    a server at ``docs`` with ``notFoundPath`` ``404`` redirects to
    ``/docs/404``, not ``/404``. Only a server at ``"/"`` redirects to
    ``/{notFoundPath}``.
    """
    if config is not None and (page := error_page(config, error.status)) is not None:
        target = join_url(config.location, page)
        if normalize_path(request_path) != normalize_path(target):
            return Redirect(target)
    return Status(error.status, default_body(error.status))
