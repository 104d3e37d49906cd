"""WebSocket client wrapper for the Mattermost event API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from websockets.asyncio.client import ClientConnection
from websockets.exceptions import ConnectionClosed, WebSocketException

from .errors import MattermostConnectionError
from .ws import connect_websocket


class MattermostWsMessageType(Enum):
    """Normalized WebSocket message types."""

    TEXT = "text"
    BINARY = "binary"
    CLOSED = "closed"
    ERROR = "error"


@dataclass(frozen=True)
class MattermostWsMessage:
    """Normalized WebSocket message payload.

    ``CLOSED`` means the peer sent a close frame. ``ERROR`` means the
    connection was lost without one; ``error`` holds the cause.
    """

    type: MattermostWsMessageType
    data: str | bytes | None = None
    error: BaseException | None = None


class MattermostWsClient:
    """Wrapper around the websockets library for Mattermost."""

    def __init__(self) -> None:
        self._ws: ClientConnection | None = None

    async def connect(self, url: str, *, timeout: float = 15.0) -> None:
        """Connect to the instance websocket."""
        self._ws = await connect_websocket(url, timeout=timeout)

    async def close(self) -> None:
        """Close the websocket connection."""
        if self._ws is not None:
            await self._ws.close()

    async def send_json(self, payload: dict[str, Any]) -> None:
        """Send a JSON payload to the websocket."""
        if self._ws is None:
            raise MattermostConnectionError("WebSocket is not connected")
        try:
            await self._ws.send(json.dumps(payload))
        except WebSocketException as err:
            raise MattermostConnectionError("WebSocket send failed") from err

    async def ping(self) -> None:
        """Send a ping frame without waiting for the pong."""
        if self._ws is None:
            raise MattermostConnectionError("WebSocket is not connected")
        try:
            await self._ws.ping()
        except WebSocketException as err:
            raise MattermostConnectionError("WebSocket ping failed") from err

    async def receive(self) -> MattermostWsMessage:
        """Wait for the next frame."""
        if self._ws is None:
            raise MattermostConnectionError("WebSocket is not connected")

        try:
            msg = await self._ws.recv()
        except ConnectionClosed as err:
            if err.rcvd is not None:
                return MattermostWsMessage(
                    MattermostWsMessageType.CLOSED, err.rcvd.reason
                )
            return MattermostWsMessage(MattermostWsMessageType.ERROR, error=err)
        except (OSError, WebSocketException) as err:
            return MattermostWsMessage(MattermostWsMessageType.ERROR, error=err)
        return self._normalize_message(msg)

    @staticmethod
    def _normalize_message(msg: str | bytes) -> MattermostWsMessage:
        """Normalize websockets frames into MattermostWsMessage."""
        if isinstance(msg, bytes):
            return MattermostWsMessage(MattermostWsMessageType.BINARY, msg)
        return MattermostWsMessage(MattermostWsMessageType.TEXT, msg)
