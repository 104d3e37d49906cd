"""Event channel for the Mattermost WebSocket API.

One channel owns one connection for its whole life:

    DISCONNECTED -> HANDSHAKING -> AUTHENTICATING -> STREAMING -> CLOSING -> CLOSED

with FAILED reachable from any state on a transport error. A channel runs
once; after it closes or fails, build a new one to reconnect.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Callable
from enum import Enum

from .errors import (
    MattermostClientError,
    MattermostConnectionError,
    MissingAuthTokenError,
)
from .events import WebsocketEvent, WebsocketHandler
from .protocol import build_authentication_challenge, is_reply
from .ws_client import MattermostWsClient, MattermostWsMessage, MattermostWsMessageType

_LOGGER = logging.getLogger(__name__)


class ChannelState(Enum):
    """Lifecycle states of an event channel."""

    DISCONNECTED = "disconnected"
    HANDSHAKING = "handshaking"
    AUTHENTICATING = "authenticating"
    STREAMING = "streaming"
    CLOSING = "closing"
    CLOSED = "closed"
    FAILED = "failed"


class MattermostEventChannel:
    """Single WebSocket session delivering events to a handler.

    Usage:
        channel = MattermostEventChannel("wss://chat.example.com/api/v4/websocket", token)
        await channel.run(handler)
    """

    def __init__(
        self,
        url: str,
        token: str | None,
        *,
        ping_interval: float | None = 30.0,
        connect_timeout: float = 15.0,
    ) -> None:
        """Initialize channel.

        Args:
            url: Full ws:// or wss:// URL of the websocket endpoint
            token: Bearer token sent in the authentication challenge
            ping_interval: Keepalive ping interval (seconds), None disables pings
            connect_timeout: Handshake timeout (seconds)
        """
        self.url = url
        self._token = token
        self._ping_interval = ping_interval
        self._connect_timeout = connect_timeout

        self._ws: MattermostWsClient | None = None
        self._state = ChannelState.DISCONNECTED
        self._state_callback: Callable[[ChannelState], None] | None = None

    @property
    def state(self) -> ChannelState:
        """Get current channel state."""
        return self._state

    def on_state_changed(self, callback: Callable[[ChannelState], None]) -> None:
        """Register callback for channel state changes."""
        self._state_callback = callback

    async def run(self, handler: WebsocketHandler) -> None:
        """Connect, authenticate and stream events until the server closes.

        Returns normally when the server sends a close frame.

        Raises:
            MissingAuthTokenError: If no token is available.
            MattermostConnectionError: If the connection fails or is lost
                without a close frame.
            MattermostTimeout: If the handshake timed out.
            MattermostClientError: If the channel was already run.
        """
        if self._state is not ChannelState.DISCONNECTED:
            raise MattermostClientError("Event channel can only be run once")
        if not self._token:
            raise MissingAuthTokenError()

        self._set_state(ChannelState.HANDSHAKING)
        _LOGGER.info("Connecting to %s", self.url)
        ws = MattermostWsClient()
        try:
            await ws.connect(self.url, timeout=self._connect_timeout)
        except MattermostClientError:
            self._set_state(ChannelState.FAILED)
            raise
        self._ws = ws

        try:
            self._set_state(ChannelState.AUTHENTICATING)
            # The server does not acknowledge the challenge; a rejected token
            # shows up later as a close frame.
            await ws.send_json(build_authentication_challenge(self._token))
            _LOGGER.debug("Authentication challenge sent")

            self._set_state(ChannelState.STREAMING)
            await self._stream(ws, handler)
        except MattermostClientError:
            self._set_state(ChannelState.FAILED)
            raise
        finally:
            await ws.close()
            self._ws = None
            # Cancelled mid-stream: the socket is gone either way
            if self._state not in (ChannelState.CLOSED, ChannelState.FAILED):
                self._set_state(ChannelState.CLOSED)

    async def _stream(self, ws: MattermostWsClient, handler: WebsocketHandler) -> None:
        """Receive loop racing the next frame against the next ping deadline."""
        loop = asyncio.get_running_loop()
        next_ping = (
            loop.time() + self._ping_interval if self._ping_interval else None
        )
        message_count = 0
        receiver: asyncio.Task[MattermostWsMessage] = asyncio.create_task(
            ws.receive()
        )

        try:
            while True:
                timeout = (
                    None if next_ping is None else max(0.0, next_ping - loop.time())
                )
                done, _ = await asyncio.wait({receiver}, timeout=timeout)

                if not done:
                    await self._send_ping(ws)
                    next_ping = loop.time() + self._ping_interval
                    continue

                msg = receiver.result()
                message_count += 1

                if msg.type is MattermostWsMessageType.TEXT:
                    await self._dispatch(handler, msg.data)
                elif msg.type is MattermostWsMessageType.BINARY:
                    _LOGGER.debug("Websocket binary message ignored")
                elif msg.type is MattermostWsMessageType.CLOSED:
                    self._set_state(ChannelState.CLOSING)
                    _LOGGER.info(
                        "WebSocket closed by server (%d messages)", message_count
                    )
                    self._set_state(ChannelState.CLOSED)
                    return
                else:
                    _LOGGER.error("Error getting data from websocket: %s", msg.error)
                    raise MattermostConnectionError(
                        "WebSocket connection lost"
                    ) from msg.error

                receiver = asyncio.create_task(ws.receive())
        finally:
            if not receiver.done():
                receiver.cancel()
                try:
                    await receiver
                except asyncio.CancelledError:
                    pass

    async def _send_ping(self, ws: MattermostWsClient) -> None:
        try:
            await ws.ping()
        except MattermostClientError as err:
            _LOGGER.warning("Keepalive ping failed: %s", err)
        else:
            _LOGGER.debug("Keepalive ping sent")

    async def _dispatch(
        self, handler: WebsocketHandler, text: str | bytes | None
    ) -> None:
        """Decode a text frame and hand it to the handler."""
        try:
            payload = json.loads(text) if text is not None else None
        except ValueError as err:
            _LOGGER.error("Could not parse websocket event JSON: %s", err)
            return

        if is_reply(payload):
            _LOGGER.debug("Websocket reply seq=%s dropped", payload.get("seq_reply"))
            return

        try:
            event = WebsocketEvent.from_dict(payload)
        except (KeyError, TypeError, ValueError) as err:
            _LOGGER.error("Could not decode websocket event: %r", err)
            return

        try:
            result = handler.callback(event)
            if inspect.isawaitable(result):
                await result
        except Exception as err:
            _LOGGER.exception("Websocket handler error for %s: %s", event.event, err)

    def _set_state(self, state: ChannelState) -> None:
        """Update channel state and notify callback."""
        if self._state is not state:
            _LOGGER.debug("State: %s → %s", self._state.value, state.value)
            self._state = state
            if self._state_callback:
                self._state_callback(state)
