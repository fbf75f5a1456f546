"""HTTP primitives — request, headers, and response types."""

from wren.http.headers import Headers
from wren.http.request import Request
from wren.http.response import FileResponse, Response, redirect

__all__ = ["FileResponse", "Headers", "Request", "Response", "redirect"]
