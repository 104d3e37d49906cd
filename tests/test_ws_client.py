"""Tests for MattermostWsClient WebSocket wrapper."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK
from websockets.frames import Close

from mattermost_api.errors import (
    MattermostConnectionError,
    MattermostHandshakeError,
    MattermostTimeout,
)
from mattermost_api.ws import connect_websocket
from mattermost_api.ws_client import (
    MattermostWsClient,
    MattermostWsMessage,
    MattermostWsMessageType,
)

WS_URL = "ws://host/api/v4/websocket"


async def _connected(mock_ws: AsyncMock) -> MattermostWsClient:
    with patch(
        "mattermost_api.ws_client.connect_websocket",
        return_value=mock_ws,
    ):
        client = MattermostWsClient()
        await client.connect(WS_URL)
    return client


class TestMattermostWsMessage:
    """Tests for MattermostWsMessage dataclass."""

    def test_create_closed_message(self) -> None:
        msg = MattermostWsMessage(type=MattermostWsMessageType.CLOSED)
        assert msg.data is None
        assert msg.error is None

    def test_message_is_frozen(self) -> None:
        msg = MattermostWsMessage(type=MattermostWsMessageType.TEXT, data="test")
        with pytest.raises(AttributeError):
            msg.data = "modified"  # type: ignore[misc]


class TestMattermostWsClientConnect:
    """Tests for MattermostWsClient.connect()."""

    async def test_connect_success(self) -> None:
        mock_ws = AsyncMock()

        with patch(
            "mattermost_api.ws_client.connect_websocket",
            return_value=mock_ws,
        ) as mock_connect:
            client = MattermostWsClient()
            await client.connect(WS_URL, timeout=5.0)

            mock_connect.assert_called_once_with(WS_URL, timeout=5.0)
            assert client._ws is mock_ws

    async def test_connect_propagates_errors(self) -> None:
        with patch(
            "mattermost_api.ws_client.connect_websocket",
            side_effect=MattermostConnectionError("Connection failed"),
        ):
            client = MattermostWsClient()
            with pytest.raises(MattermostConnectionError, match="Connection failed"):
                await client.connect(WS_URL)

    async def test_close_not_connected(self) -> None:
        client = MattermostWsClient()
        # Should not raise
        await client.close()


class TestMattermostWsClientSend:
    """Tests for send_json() and ping()."""

    async def test_send_json_success(self) -> None:
        mock_ws = AsyncMock()
        client = await _connected(mock_ws)

        await client.send_json({"seq": 1, "action": "authentication_challenge"})

        mock_ws.send.assert_called_once_with(
            '{"seq": 1, "action": "authentication_challenge"}'
        )

    async def test_send_json_not_connected(self) -> None:
        client = MattermostWsClient()
        with pytest.raises(MattermostConnectionError, match="not connected"):
            await client.send_json({"seq": 1})

    async def test_send_json_closed_connection(self) -> None:
        mock_ws = AsyncMock()
        mock_ws.send.side_effect = ConnectionClosedError(None, None)
        client = await _connected(mock_ws)

        with pytest.raises(MattermostConnectionError, match="send failed"):
            await client.send_json({"seq": 1})

    async def test_ping_success(self) -> None:
        mock_ws = AsyncMock()
        client = await _connected(mock_ws)

        await client.ping()

        mock_ws.ping.assert_awaited_once()

    async def test_ping_failure(self) -> None:
        mock_ws = AsyncMock()
        mock_ws.ping.side_effect = ConnectionClosedError(None, None)
        client = await _connected(mock_ws)

        with pytest.raises(MattermostConnectionError, match="ping failed"):
            await client.ping()


class TestMattermostWsClientReceive:
    """Tests for receive() and async iteration."""

    async def test_receive_not_connected(self) -> None:
        client = MattermostWsClient()
        with pytest.raises(MattermostConnectionError, match="not connected"):
            await client.receive()

    async def test_receive_text(self) -> None:
        mock_ws = AsyncMock()
        mock_ws.recv.return_value = '{"event": "hello"}'
        client = await _connected(mock_ws)

        msg = await client.receive()

        assert msg.type is MattermostWsMessageType.TEXT
        assert msg.data == '{"event": "hello"}'

    async def test_receive_binary(self) -> None:
        mock_ws = AsyncMock()
        mock_ws.recv.return_value = b"\x00\x01"
        client = await _connected(mock_ws)

        msg = await client.receive()

        assert msg.type is MattermostWsMessageType.BINARY
        assert msg.data == b"\x00\x01"

    async def test_receive_close_frame(self) -> None:
        mock_ws = AsyncMock()
        mock_ws.recv.side_effect = ConnectionClosedOK(Close(1000, "bye"), None)
        client = await _connected(mock_ws)

        msg = await client.receive()

        assert msg.type is MattermostWsMessageType.CLOSED
        assert msg.data == "bye"

    async def test_receive_close_frame_with_error_code(self) -> None:
        """Test a close frame is a close even with a non-normal code."""
        mock_ws = AsyncMock()
        mock_ws.recv.side_effect = ConnectionClosedError(
            Close(4001, "authentication failed"), None
        )
        client = await _connected(mock_ws)

        msg = await client.receive()

        assert msg.type is MattermostWsMessageType.CLOSED

    async def test_receive_connection_lost(self) -> None:
        mock_ws = AsyncMock()
        lost = ConnectionClosedError(None, None)
        mock_ws.recv.side_effect = lost
        client = await _connected(mock_ws)

        msg = await client.receive()

        assert msg.type is MattermostWsMessageType.ERROR
        assert msg.error is lost

    async def test_receive_os_error(self) -> None:
        mock_ws = AsyncMock()
        mock_ws.recv.side_effect = OSError("reset")
        client = await _connected(mock_ws)

        msg = await client.receive()

        assert msg.type is MattermostWsMessageType.ERROR

    async def test_receive_sequence_until_close(self) -> None:
        mock_ws = AsyncMock()
        mock_ws.recv.side_effect = [
            "message1",
            b"\x00",
            "message2",
            ConnectionClosedOK(Close(1000, ""), None),
        ]
        client = await _connected(mock_ws)

        messages = [await client.receive() for _ in range(4)]

        assert [m.type for m in messages] == [
            MattermostWsMessageType.TEXT,
            MattermostWsMessageType.BINARY,
            MattermostWsMessageType.TEXT,
            MattermostWsMessageType.CLOSED,
        ]


class TestConnectWebsocket:
    """Tests for connect_websocket() error classification."""

    async def test_connect_passes_options(self) -> None:
        connection = AsyncMock()
        with patch(
            "mattermost_api.ws.connect", new=AsyncMock(return_value=connection)
        ) as mock_connect:
            result = await connect_websocket(WS_URL)

        assert result is connection
        assert mock_connect.call_args.args == (WS_URL,)
        assert mock_connect.call_args.kwargs["ping_interval"] is None

    async def test_timeout(self) -> None:
        with patch(
            "mattermost_api.ws.connect", new=AsyncMock(side_effect=TimeoutError())
        ):
            with pytest.raises(MattermostTimeout):
                await connect_websocket(WS_URL)

    async def test_os_error(self) -> None:
        with patch(
            "mattermost_api.ws.connect",
            new=AsyncMock(side_effect=OSError("Connection refused")),
        ):
            with pytest.raises(MattermostConnectionError):
                await connect_websocket(WS_URL)

    async def test_handshake_error(self) -> None:
        from websockets.exceptions import InvalidHandshake

        with patch(
            "mattermost_api.ws.connect",
            new=AsyncMock(side_effect=InvalidHandshake()),
        ):
            with pytest.raises(MattermostHandshakeError):
                await connect_websocket(WS_URL)
