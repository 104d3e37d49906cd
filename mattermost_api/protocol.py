"""URL and frame helpers for the Mattermost REST and WebSocket APIs."""

from __future__ import annotations

from typing import Any, Final

from yarl import URL

from .errors import MattermostConfigurationError

API_PATH: Final = "/api/v4/"
LOGIN_ENDPOINT: Final = "users/login"
WEBSOCKET_ENDPOINT: Final = "websocket"
TOKEN_HEADER: Final = "Token"

AUTHENTICATION_CHALLENGE: Final = "authentication_challenge"
REPLY_MARKER: Final = "seq_reply"

_WS_SCHEMES: Final = {"http": "ws", "https": "wss"}


def normalize_instance_url(instance_url: str) -> str:
    """Validate an instance URL and append the API path to a bare host.

    A URL with a custom, non-root path is returned unmodified.

    Raises:
        MattermostConfigurationError: If the URL is not an absolute
            http(s) URL with a host.
    """
    try:
        parsed = URL(instance_url)
        host, _port = parsed.host, parsed.port
    except (TypeError, ValueError) as err:
        raise MattermostConfigurationError(
            f"Invalid instance URL: {instance_url!r}"
        ) from err

    if parsed.scheme not in _WS_SCHEMES or not host:
        raise MattermostConfigurationError(
            f"Instance URL must be an absolute http(s) URL: {instance_url!r}"
        )

    if parsed.path in ("", "/"):
        return str(parsed.with_path(API_PATH))
    return instance_url


def join_endpoint(base_url: str, endpoint: str) -> str:
    """Join an endpoint path under the base URL.

    Leading slashes are ignored, and an endpoint that already repeats the
    base path is not prefixed twice.
    """
    base = base_url if base_url.endswith("/") else f"{base_url}/"
    path = endpoint.lstrip("/")
    prefix = URL(base).path.strip("/")
    if prefix and path == prefix:
        path = ""
    elif prefix and path.startswith(f"{prefix}/"):
        path = path[len(prefix) + 1 :]
    return f"{base}{path}"


def websocket_url(base_url: str) -> str:
    """Swap an http(s) URL to its ws(s) equivalent, keeping host, port and path."""
    scheme, sep, rest = base_url.partition("://")
    ws_scheme = _WS_SCHEMES.get(scheme.lower())
    if not sep or ws_scheme is None:
        raise MattermostConfigurationError(
            f"Cannot derive a WebSocket URL from {base_url!r}"
        )
    return f"{ws_scheme}://{rest}"


def build_authentication_challenge(token: str, *, seq: int = 1) -> dict[str, Any]:
    """Build the frame that authenticates a freshly opened WebSocket."""
    return {
        "seq": seq,
        "action": AUTHENTICATION_CHALLENGE,
        "data": {"token": token},
    }


def is_reply(payload: Any) -> bool:
    """Return True when a decoded frame is a reply to a frame we sent."""
    return isinstance(payload, dict) and REPLY_MARKER in payload
