"""Client for interacting with a Mattermost instance API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any, TypeVar

import aiohttp

from .auth import AuthenticationData
from .channel import MattermostEventChannel
from .errors import MattermostProtocolError
from .events import WebsocketHandler
from .http import MattermostHttpClient, QueryParams
from .models import (
    ChannelInformation,
    CreatePost,
    Post,
    TeamInformation,
    TeamsUnreadInformation,
)
from .protocol import (
    WEBSOCKET_ENDPOINT,
    join_endpoint,
    normalize_instance_url,
    websocket_url,
)

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")

_UNSET: Any = object()


def _decode(factory: Callable[[dict[str, Any]], _T], data: Any) -> _T:
    try:
        return factory(data)
    except (KeyError, TypeError, ValueError) as err:
        raise MattermostProtocolError(f"Unexpected response shape: {err!r}") from err


def _decode_list(factory: Callable[[dict[str, Any]], _T], data: Any) -> list[_T]:
    if not isinstance(data, list):
        raise MattermostProtocolError("Expected a JSON array in the response")
    return [_decode(factory, item) for item in data]


class Mattermost:
    """Interact with a Mattermost instance API.

    Usage:
        auth = AuthenticationData.from_password("you@example.com", "password")
        async with Mattermost("https://chat.example.com", auth) as api:
            await api.store_session_token()
            team = await api.get_team("team-id")
            await api.connect_to_websocket(handler)
    """

    def __init__(
        self,
        instance_url: str,
        authentication_data: AuthenticationData,
        *,
        session: aiohttp.ClientSession | None = None,
        request_timeout: float = 10.0,
        connect_timeout: float = 15.0,
        ping_interval: float | None = 30.0,
    ) -> None:
        """Initialize client.

        Args:
            instance_url: Root URL of the instance; a bare host gets /api/v4/
            authentication_data: Login credentials or personal access token
            session: aiohttp session to use; one is created and owned if omitted
            request_timeout: Total timeout for each REST request (seconds)
            connect_timeout: WebSocket handshake timeout (seconds)
            ping_interval: WebSocket keepalive interval (seconds), None disables

        Raises:
            MattermostConfigurationError: If the URL is malformed.
        """
        self._instance_url = normalize_instance_url(instance_url)
        self.authentication_data = authentication_data
        self._session = session
        self._owns_session = session is None
        self._request_timeout = request_timeout
        self._connect_timeout = connect_timeout
        self._ping_interval = ping_interval
        self._auth_token = authentication_data.token
        self._http: MattermostHttpClient | None = None

    async def __aenter__(self) -> Mattermost:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._http = None

    @property
    def instance_url(self) -> str:
        """Normalized instance URL, including the API path."""
        return self._instance_url

    @property
    def auth_token(self) -> str | None:
        """Bearer token, once supplied or retrieved."""
        return self._auth_token

    def ws_instance_url(self) -> str:
        """Instance URL with its scheme swapped to ws:// or wss://."""
        return websocket_url(self._instance_url)

    def endpoint_url(self, endpoint: str) -> str:
        """Full URL of an endpoint path under the instance URL."""
        return join_endpoint(self._instance_url, endpoint)

    def _client(self) -> MattermostHttpClient:
        if self._http is None:
            if self._session is None:
                self._session = aiohttp.ClientSession()
            self._http = MattermostHttpClient(
                self._session,
                self._instance_url,
                timeout=self._request_timeout,
            )
        self._http.token = self._auth_token
        return self._http

    async def store_session_token(self) -> None:
        """Get a session token from the stored login_id and password.

        Required when using login_id and password authentication, before
        making any calls to the instance API. Does nothing when the client
        was created with a personal access token.

        Raises:
            CouldNotGetTokenError: If the login response has no Token header.
            MattermostTimeout: If the request timed out.
            MattermostConnectionError: If the network request failed.
        """
        auth = self.authentication_data
        if auth.using_token:
            _LOGGER.debug(
                "Using personal access token; getting a session token is a no-op"
            )
            return
        _LOGGER.debug("Getting a session token from login_id and password")
        self._auth_token = await self._client().login(
            auth.login_id or "", auth.password or ""
        )
        _LOGGER.debug("Session token retrieved and stored")

    async def query(
        self,
        method: str,
        endpoint: str,
        query: QueryParams | None = None,
        body: str | None = None,
    ) -> Any:
        """Make a raw request to the instance API.

        Prefer a dedicated endpoint method where one exists; this is exposed
        for endpoints that have none.
        """
        return await self._client().query(method, endpoint, query, body)

    async def post(
        self, endpoint: str, payload: Any, query: QueryParams | None = None
    ) -> Any:
        """POST a dataclass or JSON-serializable payload to the instance API."""
        return await self._client().post(endpoint, payload, query)

    def event_channel(
        self, *, ping_interval: float | None = _UNSET
    ) -> MattermostEventChannel:
        """Build a new event channel using the current token."""
        return MattermostEventChannel(
            join_endpoint(self.ws_instance_url(), WEBSOCKET_ENDPOINT),
            self._auth_token,
            ping_interval=(
                self._ping_interval if ping_interval is _UNSET else ping_interval
            ),
            connect_timeout=self._connect_timeout,
        )

    async def connect_to_websocket(
        self,
        handler: WebsocketHandler,
        *,
        ping_interval: float | None = _UNSET,
    ) -> None:
        """Connect to the websocket API and stream events to ``handler``.

        Returns when the server closes the connection. Call again to
        reconnect.
        """
        await self.event_channel(ping_interval=ping_interval).run(handler)

    # -------------------------------------------------------------------------
    # API endpoints
    # -------------------------------------------------------------------------

    async def get_team(self, team_id: str) -> TeamInformation:
        """Get a team's information."""
        data = await self.query("GET", f"teams/{team_id}")
        return _decode(TeamInformation.from_dict, data)

    async def get_team_by_name(self, name: str) -> TeamInformation:
        """Get information for a team by its name."""
        data = await self.query("GET", f"teams/name/{name}")
        return _decode(TeamInformation.from_dict, data)

    async def get_teams(self) -> list[TeamInformation]:
        """List teams that are open or, with "manage_system", all teams."""
        data = await self.query("GET", "teams")
        return _decode_list(TeamInformation.from_dict, data)

    async def get_team_unreads_for(self, user_id: str) -> list[TeamsUnreadInformation]:
        """Get unread message and mention counts for all of a user's teams."""
        data = await self.query("GET", f"users/{user_id}/teams/unread")
        return _decode_list(TeamsUnreadInformation.from_dict, data)

    async def get_team_unreads_for_in(
        self, user_id: str, team_id: str
    ) -> TeamsUnreadInformation:
        """Get unread message and mention counts for one of a user's teams.

        Requires either the "read_channel" or "edit_other_users" permission.
        """
        data = await self.query("GET", f"users/{user_id}/teams/{team_id}/unread")
        return _decode(TeamsUnreadInformation.from_dict, data)

    async def get_all_channels(
        self,
        not_associated_to_group: str | None = None,
        page: int | None = None,
        per_page: int | None = None,
        exclude_default_channels: bool | None = None,
        exclude_policy_constrained: bool | None = None,
    ) -> list[ChannelInformation]:
        """Get all channels on the instance.

        Requires the "manage_system" permission.
        """
        query: list[tuple[str, str]] = []
        if not_associated_to_group is not None:
            query.append(("not_associated_to_group", not_associated_to_group))
        if page is not None:
            query.append(("page", str(page)))
        if per_page is not None:
            query.append(("per_page", str(per_page)))
        if exclude_default_channels is not None:
            query.append(
                ("exclude_default_channels", str(exclude_default_channels).lower())
            )
        if exclude_policy_constrained is not None:
            query.append(
                ("exclude_policy_constrained", str(exclude_policy_constrained).lower())
            )
        data = await self.query("GET", "channels", query)
        return _decode_list(ChannelInformation.from_dict, data)

    async def get_channel(self, channel_id: str) -> ChannelInformation:
        """Get a channel's information.

        Requires the "read_channel" permission for that channel.
        """
        data = await self.query("GET", f"channels/{channel_id}")
        return _decode(ChannelInformation.from_dict, data)

    async def get_public_channels(self, team_id: str) -> list[ChannelInformation]:
        """Get public channels' information.

        Requires the "list_team_channels" permission.
        """
        data = await self.query("GET", f"teams/{team_id}/channels")
        return _decode_list(ChannelInformation.from_dict, data)

    async def create_post(
        self, channel_id: str, message: str, root_id: str | None = None
    ) -> Post:
        """Create a post in a channel, optionally as a reply to ``root_id``."""
        data = await self.post(
            "posts",
            CreatePost(channel_id=channel_id, message=message, root_id=root_id or ""),
        )
        return _decode(Post.from_dict, data)
