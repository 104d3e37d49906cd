"""Async client for the Mattermost REST and WebSocket APIs.

Build :class:`AuthenticationData` from a login_id and password or a personal
access token, pass it with the instance URL to :class:`Mattermost`, then call
endpoint methods or :meth:`Mattermost.connect_to_websocket`.
"""

__version__ = "0.1.0"

from .auth import AuthenticationData
from .channel import ChannelState, MattermostEventChannel
from .client import Mattermost
from .errors import (
    CouldNotGetTokenError,
    MattermostApiError,
    MattermostAuthenticationError,
    MattermostClientError,
    MattermostConfigurationError,
    MattermostConnectionError,
    MattermostHandshakeError,
    MattermostProtocolError,
    MattermostResponseError,
    MattermostTimeout,
    MissingAuthTokenError,
)
from .events import (
    QueueHandler,
    WebsocketEvent,
    WebsocketEventBroadcast,
    WebsocketEventType,
    WebsocketHandler,
)
from .http import MattermostHttpClient
from .models import (
    ChannelInformation,
    CreatePost,
    MattermostError,
    Post,
    TeamInformation,
    TeamsUnreadInformation,
)
from .ws_client import MattermostWsClient, MattermostWsMessage, MattermostWsMessageType

__all__ = [
    "AuthenticationData",
    "ChannelInformation",
    "ChannelState",
    "CouldNotGetTokenError",
    "CreatePost",
    "Mattermost",
    "MattermostApiError",
    "MattermostAuthenticationError",
    "MattermostClientError",
    "MattermostConfigurationError",
    "MattermostConnectionError",
    "MattermostError",
    "MattermostEventChannel",
    "MattermostHandshakeError",
    "MattermostHttpClient",
    "MattermostProtocolError",
    "MattermostResponseError",
    "MattermostTimeout",
    "MattermostWsClient",
    "MattermostWsMessage",
    "MattermostWsMessageType",
    "MissingAuthTokenError",
    "Post",
    "QueueHandler",
    "TeamInformation",
    "TeamsUnreadInformation",
    "WebsocketEvent",
    "WebsocketEventBroadcast",
    "WebsocketEventType",
    "WebsocketHandler",
    "__version__",
]
