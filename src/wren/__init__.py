"""Wren — a configuration-driven static file server and reverse proxy.

Each virtual server binds a port and a location prefix to either a
directory on disk or an upstream. Config lives in a JSON array::

    [
        {"root": "./public", "port": 8080, "notFoundPath": "404"},
        {"proxyTarget": "localhost:3000", "port": 8080, "location": "api"}
    ]

Run it::

    wren serve --config config.json

Or embed it::

    from wren import build_apps, load_config

    apps = build_apps(load_config("config.json"))
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "Forbidden",
    "HTTPError",
    "HtmlExtensionPolicy",
    "NotFound",
    "PortApp",
    "Resolver",
    "ServeConfig",
    "VirtualServerConfig",
    "WrenError",
    "build_apps",
    "load_config",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name in ("PortApp", "build_apps"):
        import wren.app

        return getattr(wren.app, name)

    if name in ("HtmlExtensionPolicy", "ServeConfig", "VirtualServerConfig"):
        import wren.config

        return getattr(wren.config, name)

    if name in ("ConfigurationError", "Forbidden", "HTTPError", "NotFound", "WrenError"):
        import wren.errors

        return getattr(wren.errors, name)

    if name == "Resolver":
        from wren.resolver import Resolver

        return Resolver

    if name == "load_config":
        from wren.loader import load_config

        return load_config

    msg = f"module 'wren' has no attribute {name!r}"
    raise AttributeError(msg)
