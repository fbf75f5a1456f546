"""Config loading — raw JSON definitions to validated VirtualServerConfig.

The config file is a JSON array with one object per virtual server::

    [
        {"root": "./public", "port": 8080, "notFoundPath": "404"},
        {"proxyTarget": "http://localhost:3000", "port": 8081, "location": "api"}
    ]

Validation fails fast: the first problem raises ``ConfigurationError``
carrying the 1-based index of the offending server.
"""

import json
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from wren.config import HtmlExtensionPolicy, VirtualServerConfig
from wren.errors import ConfigurationError
from wren.paths import normalize_path

logger = logging.getLogger("wren.config")

DEFAULT_CONFIG_PATH = "config.json"

_STRING_FIELDS = (
    "root",
    "proxyTarget",
    "location",
    "notFoundPath",
    "internalErrorPath",
    "forbiddenPath",
)
_BOOL_FIELDS = ("redirectHtmlExtension", "fileExtensions")
_LIST_FIELDS = ("allowedFileTypes", "forbiddenFileTypes")
_Fail = Callable[[str], ConfigurationError]

# RFC 9110 §5.6.2 token
_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

_KNOWN_FIELDS = frozenset(
    {*_STRING_FIELDS, *_BOOL_FIELDS, *_LIST_FIELDS, "port", "headers"}
)


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> tuple[VirtualServerConfig, ...]:
    """Read and validate a JSON config file.

    Raises:
        ConfigurationError: If the file is missing, is not valid JSON,
            or any server definition is invalid.
    """
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        msg = f"Config file {str(config_path)!r} not found"
        raise ConfigurationError(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f"Config file {str(config_path)!r} is not valid JSON: {exc}"
        raise ConfigurationError(msg) from exc

    return validate_servers(raw)


def validate_servers(raw: Any) -> tuple[VirtualServerConfig, ...]:
    """Validate every server definition in order. First failure wins."""
    if not isinstance(raw, list):
        msg = "Config must be a JSON array of server definitions"
        raise ConfigurationError(msg)
    if not raw:
        msg = "Config defines no servers"
        raise ConfigurationError(msg)
    return tuple(validate_server(entry, idx) for idx, entry in enumerate(raw, start=1))


def validate_server(raw: Any, index: int = 1) -> VirtualServerConfig:
    """Validate one raw server definition and normalize its paths.

    Checks run in a fixed order so the reported error is stable:
    root/proxy exclusivity, proxy/headers exclusivity, root-or-proxy
    presence, field types, then file-type list exclusivity.
    """

    def fail(message: str) -> ConfigurationError:
        return ConfigurationError(message, index=index)

    if not isinstance(raw, Mapping):
        raise fail("definition must be a JSON object")

    has_root = raw.get("root") is not None
    has_proxy = raw.get("proxyTarget") is not None

    if has_root and has_proxy:
        raise fail("'root' and 'proxyTarget' cannot both be set")
    if has_proxy and raw.get("headers") is not None:
        raise fail("'headers' cannot be used together with 'proxyTarget'")
    if not has_root and not has_proxy:
        raise fail("either 'root' or 'proxyTarget' must be set")

    for name in _STRING_FIELDS:
        _check_type(raw, name, str, "a string", fail)
    for name in _BOOL_FIELDS:
        _check_type(raw, name, bool, "a boolean", fail)
    for name in _LIST_FIELDS:
        _check_string_list(raw, name, fail)
    port = _check_port(raw, fail)
    headers = _check_headers(raw, fail)

    allowed = raw.get("allowedFileTypes")
    forbidden = raw.get("forbiddenFileTypes")
    if allowed is not None and forbidden is not None:
        raise fail("'allowedFileTypes' and 'forbiddenFileTypes' cannot both be set")

    unknown = sorted(set(raw) - _KNOWN_FIELDS)
    if unknown:
        logger.warning("Server %d: ignoring unknown keys: %s", index, ", ".join(unknown))

    root = Path(raw["root"]) if has_root else None
    if root is not None and not root.is_dir():
        logger.warning("Server %d: root %s is not an existing directory", index, root)

    return VirtualServerConfig(
        root=root,
        proxy_target=raw.get("proxyTarget"),
        port=port,
        location=normalize_path(raw.get("location")),
        index=index,
        html_extension=_html_extension_policy(raw),
        allowed_file_types=_file_types(allowed),
        forbidden_file_types=_file_types(forbidden),
        headers=headers,
        not_found_path=_optional_path(raw.get("notFoundPath")),
        internal_error_path=_optional_path(raw.get("internalErrorPath")),
        forbidden_path=_optional_path(raw.get("forbiddenPath")),
    )


# ------------------------------------------------------------------
# Field checks
# ------------------------------------------------------------------


def _check_type(
    raw: Mapping[str, Any],
    name: str,
    expected: type,
    label: str,
    fail: _Fail,
) -> None:
    value = raw.get(name)
    if value is not None and not isinstance(value, expected):
        raise fail(f"'{name}' must be {label}, got {type(value).__name__}")


def _check_string_list(raw: Mapping[str, Any], name: str, fail: _Fail) -> None:
    value = raw.get(name)
    if value is None:
        return
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise fail(f"'{name}' must be an array of strings")


def _check_port(raw: Mapping[str, Any], fail: _Fail) -> int:
    port = raw.get("port")
    if port is None:
        return 80
    # bool is an int subclass; JSON true must not become port 1
    if isinstance(port, bool) or not isinstance(port, int):
        raise fail(f"'port' must be an integer, got {type(port).__name__}")
    if not 1 <= port <= 65535:
        raise fail(f"'port' must be between 1 and 65535, got {port}")
    return port


def _check_headers(raw: Mapping[str, Any], fail: _Fail) -> tuple[tuple[str, str | None], ...]:
    headers = raw.get("headers")
    if headers is None:
        return ()
    if not isinstance(headers, Mapping):
        raise fail("'headers' must be an object")
    for name, value in headers.items():
        if not _TOKEN.fullmatch(name):
            raise fail(f"header name {name!r} is not a valid HTTP token")
        if value is None:
            continue
        if not isinstance(value, str):
            raise fail(f"header {name!r} must be a string or null")
        if "\r" in value or "\n" in value:
            raise fail(f"header {name!r} must not contain line breaks")
        try:
            value.encode("latin-1")
        except UnicodeEncodeError as exc:
            raise fail(f"header {name!r} must be latin-1 text") from exc
    return tuple(headers.items())


def _html_extension_policy(raw: Mapping[str, Any]) -> HtmlExtensionPolicy:
    """Collapse the two historical flags into one policy.

    ``redirectHtmlExtension`` wins when present. The legacy
    ``fileExtensions`` flag has the opposite polarity: true keeps
    extensions in URLs.
    """
    redirect = raw.get("redirectHtmlExtension")
    if redirect is not None:
        return HtmlExtensionPolicy.REDIRECT if redirect else HtmlExtensionPolicy.KEEP
    if raw.get("fileExtensions"):
        return HtmlExtensionPolicy.KEEP
    return HtmlExtensionPolicy.REDIRECT


def _file_types(values: Sequence[str] | None) -> frozenset[str] | None:
    if values is None:
        return None
    return frozenset(value.lstrip(".").lower() for value in values)


def _optional_path(value: str | None) -> str | None:
    return normalize_path(value) if value is not None else None
