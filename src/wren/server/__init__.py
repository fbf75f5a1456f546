"""Transport layer — ASGI request handling, file sending, proxying, bootstrap."""
