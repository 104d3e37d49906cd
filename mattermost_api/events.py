"""Inbound WebSocket events and the handler interface that receives them."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class WebsocketEventType(Enum):
    """Known Mattermost WebSocket event names."""

    ADDED_TO_TEAM = "added_to_team"
    AUTHENTICATION_CHALLENGE = "authentication_challenge"
    CHANNEL_CONVERTED = "channel_converted"
    CHANNEL_CREATED = "channel_created"
    CHANNEL_DELETED = "channel_deleted"
    CHANNEL_MEMBER_UPDATED = "channel_member_updated"
    CHANNEL_UPDATED = "channel_updated"
    CHANNEL_VIEWED = "channel_viewed"
    CONFIG_CHANGED = "config_changed"
    DELETE_TEAM = "delete_team"
    DIALOG_OPENED = "dialog_opened"
    DIRECT_ADDED = "direct_added"
    EMOJI_ADDED = "emoji_added"
    EPHEMERAL_MESSAGE = "ephemeral_message"
    GROUP_ADDED = "group_added"
    HELLO = "hello"
    LEAVE_TEAM = "leave_team"
    LICENSE_CHANGED = "license_changed"
    MEMBERROLE_UPDATED = "memberrole_updated"
    NEW_USER = "new_user"
    PLUGIN_DISABLED = "plugin_disabled"
    PLUGIN_ENABLED = "plugin_enabled"
    PLUGIN_STATUSES_CHANGED = "plugin_statuses_changed"
    POST_DELETED = "post_deleted"
    POST_EDITED = "post_edited"
    POST_UNREAD = "post_unread"
    POSTED = "posted"
    PREFERENCE_CHANGED = "preference_changed"
    PREFERENCES_CHANGED = "preferences_changed"
    PREFERENCES_DELETED = "preferences_deleted"
    REACTION_ADDED = "reaction_added"
    REACTION_REMOVED = "reaction_removed"
    RESPONSE = "response"
    ROLE_UPDATED = "role_updated"
    STATUS_CHANGE = "status_change"
    THREAD_FOLLOW_CHANGED = "thread_follow_changed"
    THREAD_READ_CHANGED = "thread_read_changed"
    THREAD_UPDATED = "thread_updated"
    TYPING = "typing"
    UPDATE_TEAM = "update_team"
    USER_ADDED = "user_added"
    USER_REMOVED = "user_removed"
    USER_ROLE_UPDATED = "user_role_updated"
    USER_UPDATED = "user_updated"

    # Any name the server sends that is not listed above
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class WebsocketEventBroadcast:
    """Routing information for a broadcast event."""

    channel_id: str
    team_id: str
    user_id: str | None = None
    omit_users: dict[str, bool] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WebsocketEventBroadcast:
        channel_id = data["channel_id"]
        team_id = data["team_id"]
        if not isinstance(channel_id, str) or not isinstance(team_id, str):
            raise TypeError("Broadcast channel_id and team_id must be strings")
        omit_users = data.get("omit_users")
        return cls(
            channel_id=channel_id,
            team_id=team_id,
            user_id=data.get("user_id"),
            omit_users=dict(omit_users) if omit_users is not None else None,
        )


@dataclass(frozen=True, slots=True)
class WebsocketEvent:
    """Event delivered over the WebSocket API.

    ``event`` keeps the raw name as sent by the server; ``event_type`` maps it
    onto :class:`WebsocketEventType`, falling back to ``UNKNOWN``.
    """

    event: str
    data: Any
    broadcast: WebsocketEventBroadcast
    seq: int

    @property
    def event_type(self) -> WebsocketEventType:
        try:
            return WebsocketEventType(self.event)
        except ValueError:
            return WebsocketEventType.UNKNOWN

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WebsocketEvent:
        """Decode an event frame.

        Raises:
            KeyError: A required field is missing.
            TypeError: A field has the wrong type.
        """
        if not isinstance(data, dict):
            raise TypeError("Event frame must be a JSON object")
        event = data["event"]
        seq = data["seq"]
        if not isinstance(event, str):
            raise TypeError("Event name must be a string")
        if not isinstance(seq, int) or isinstance(seq, bool):
            raise TypeError("Event seq must be an integer")
        return cls(
            event=event,
            data=data["data"],
            broadcast=WebsocketEventBroadcast.from_dict(data["broadcast"]),
            seq=seq,
        )


@runtime_checkable
class WebsocketHandler(Protocol):
    """Receives events from a WebSocket connection.

    ``callback`` may be a plain function or a coroutine function.
    """

    def callback(self, event: WebsocketEvent) -> Awaitable[None] | None: ...


class QueueHandler:
    """Handler that publishes every event onto an asyncio queue."""

    def __init__(self, queue: asyncio.Queue[WebsocketEvent] | None = None) -> None:
        self.queue: asyncio.Queue[WebsocketEvent] = (
            queue if queue is not None else asyncio.Queue()
        )

    async def callback(self, event: WebsocketEvent) -> None:
        await self.queue.put(event)
