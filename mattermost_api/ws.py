"""WebSocket helpers for the Mattermost event API."""

from __future__ import annotations

import asyncio

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import (
    InvalidHandshake,
    InvalidURI,
    WebSocketException,
)

from .errors import (
    MattermostConfigurationError,
    MattermostConnectionError,
    MattermostHandshakeError,
    MattermostTimeout,
)


async def connect_websocket(
    url: str,
    *,
    timeout: float = 15.0,
) -> ClientConnection:
    """Open a WebSocket connection to ``url``.

    The library's own keep-alive is disabled; the event channel schedules
    pings itself so that ping failures stay non-fatal.

    Args:
        url: Full ws:// or wss:// URL
        timeout: Connection timeout
    """
    try:
        return await asyncio.wait_for(
            connect(
                url,
                ping_interval=None,
                close_timeout=5,
                max_size=None,
            ),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise MattermostTimeout("WebSocket connection timed out") from err
    except InvalidURI as err:
        raise MattermostConfigurationError(f"Invalid WebSocket URL: {url}") from err
    except InvalidHandshake as err:
        raise MattermostHandshakeError("WebSocket handshake failed") from err
    except (OSError, WebSocketException) as err:
        raise MattermostConnectionError("WebSocket connection failed") from err
