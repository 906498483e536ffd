"""Connection option resolution.

Callers describe the search engine either with discrete fields
(``protocol``, ``host``, ``port``) or with a ``url``; both styles are
resolved here into one immutable :class:`ConnectionOptions`.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from searchsync.exceptions import ConfigurationError
from searchsync.models.connection import ConnectionOptions, Credentials

DEFAULT_OPTIONS: dict[str, Any] = {
    "protocol": "http",
    "host": "localhost",
    "port": 9200,
    "prefix": "",
}

# Lenient on purpose: only host and port are mandatory, the scheme is optional.
_URL_RE = re.compile(r"^((http|https)://)?(.+):([0-9]+)")


def merge_options(options: Mapping[str, Any] | ConnectionOptions | None = None) -> ConnectionOptions:
    """Merge user-supplied connection options with the defaults.

    Args:
        options: Sparse options.  Recognized keys: ``url``, ``protocol``,
            ``host``, ``port``, ``prefix``, ``auth``, ``type``, ``grouper``,
            ``flatten``.

    Returns:
        Fully resolved connection options.

    Raises:
        ConfigurationError: If ``options`` is not a mapping, if ``url`` lacks
            a host or port, or if ``url`` contradicts an explicit
            ``protocol``, ``host`` or ``port``.
    """
    if isinstance(options, ConnectionOptions):
        return options
    if options is None:
        return ConnectionOptions()
    if not isinstance(options, Mapping):
        raise ConfigurationError(f"Connection options were specified, but are not a mapping. Got: {options!r}")

    merged: dict[str, Any]
    if options.get("url"):
        merged = _resolve_url(options)
    else:
        merged = {key: options.get(key) or default for key, default in DEFAULT_OPTIONS.items()}

    merged["auth"] = _resolve_auth(options.get("auth"))
    merged["type"] = options.get("type")
    merged["grouper"] = options.get("grouper")
    merged["flatten"] = options.get("flatten")

    try:
        return ConnectionOptions(**merged)
    except ValueError as e:
        raise ConfigurationError(f"Invalid connection options: {e}") from e


def _resolve_url(options: Mapping[str, Any]) -> dict[str, Any]:
    url = str(options["url"])
    match = _URL_RE.match(url)
    if not match:
        raise ConfigurationError(f"url from options must contain host and port. url: {url}")

    protocol = match.group(2)
    explicit_protocol = options.get("protocol")
    if protocol and explicit_protocol and protocol != explicit_protocol:
        raise ConfigurationError(
            "url specifies different protocol than protocol specified in options. Pick one to use in options."
        )

    host = match.group(3)
    explicit_host = options.get("host")
    if explicit_host and host != explicit_host:
        raise ConfigurationError(
            "url specifies different host than host specified in options. Pick one to use in options."
        )

    port = int(match.group(4))
    explicit_port = options.get("port")
    if explicit_port and port != int(explicit_port):
        raise ConfigurationError(
            "url specifies different port than port specified in options. Pick one to use in options."
        )

    prefix = options.get("prefix")
    return {
        "protocol": protocol or explicit_protocol or DEFAULT_OPTIONS["protocol"],
        "host": host,
        "port": port,
        "prefix": prefix if isinstance(prefix, str) else "",
    }


def _resolve_auth(auth: Any) -> Credentials | None:
    if not auth:
        return None
    if isinstance(auth, Credentials):
        return auth
    if isinstance(auth, Mapping):
        return Credentials(user=auth.get("user", ""), password=auth.get("password") or "")
    raise ConfigurationError(f"auth must be a mapping with user and password. Got: {type(auth).__name__}")
