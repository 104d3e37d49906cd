"""Models for Mattermost REST request and response payloads.

Response models are built with ``from_dict``; a missing required key raises
``KeyError`` and a value of the wrong shape raises ``TypeError`` or
``ValueError``. Callers translate those into ``MattermostProtocolError``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class MattermostError:
    """Structured error body returned by Mattermost on non-2xx responses.

    See https://api.mattermost.com/#tag/errors
    """

    id: str
    message: str
    request_id: str
    status_code: int
    is_oauth: bool

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MattermostError:
        if not isinstance(data["status_code"], int) or not isinstance(
            data["is_oauth"], bool
        ):
            raise TypeError("Malformed Mattermost error body")
        return cls(
            id=str(data["id"]),
            message=str(data["message"]),
            request_id=str(data["request_id"]),
            status_code=data["status_code"],
            is_oauth=data["is_oauth"],
        )


@dataclass(frozen=True, slots=True)
class TeamInformation:
    """Response from ``teams/{id}`` and ``teams/name/{name}``."""

    id: str
    create_at: int
    update_at: int
    delete_at: int
    display_name: str
    name: str
    description: str
    email: str
    type: str
    allowed_domains: str
    invite_id: str
    allow_open_invite: bool
    policy_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TeamInformation:
        return cls(
            id=data["id"],
            create_at=int(data["create_at"]),
            update_at=int(data["update_at"]),
            delete_at=int(data["delete_at"]),
            display_name=data["display_name"],
            name=data["name"],
            description=data["description"],
            email=data["email"],
            type=data["type"],
            allowed_domains=data["allowed_domains"],
            invite_id=data["invite_id"],
            allow_open_invite=bool(data["allow_open_invite"]),
            policy_id=data.get("policy_id"),
        )


@dataclass(frozen=True, slots=True)
class TeamsUnreadInformation:
    """Response from ``users/{user_id}/teams/unread``."""

    team_id: str
    msg_count: int
    mention_count: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TeamsUnreadInformation:
        return cls(
            team_id=data["team_id"],
            msg_count=int(data["msg_count"]),
            mention_count=int(data["mention_count"]),
        )


@dataclass(frozen=True, slots=True)
class ChannelInformation:
    """Information about a single channel on the instance."""

    id: str
    team_id: str
    type: str
    display_name: str
    name: str
    create_at: int = 0
    update_at: int = 0
    delete_at: int = 0
    header: str = ""
    purpose: str = ""
    last_post_at: int = 0
    total_msg_count: int = 0
    creator_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChannelInformation:
        return cls(
            id=data["id"],
            team_id=data["team_id"],
            type=data["type"],
            display_name=data["display_name"],
            name=data["name"],
            create_at=int(data.get("create_at", 0)),
            update_at=int(data.get("update_at", 0)),
            delete_at=int(data.get("delete_at", 0)),
            header=data.get("header", ""),
            purpose=data.get("purpose", ""),
            last_post_at=int(data.get("last_post_at", 0)),
            total_msg_count=int(data.get("total_msg_count", 0)),
            creator_id=data.get("creator_id", ""),
        )


@dataclass(frozen=True, slots=True)
class CreatePost:
    """Request body for ``POST posts``."""

    channel_id: str
    message: str
    root_id: str = ""


@dataclass(frozen=True, slots=True)
class Post:
    """A single post."""

    id: str
    channel_id: str
    user_id: str
    message: str
    create_at: int = 0
    update_at: int = 0
    delete_at: int = 0
    root_id: str = ""
    type: str = ""
    props: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Post:
        return cls(
            id=data["id"],
            channel_id=data["channel_id"],
            user_id=data["user_id"],
            message=data["message"],
            create_at=int(data.get("create_at", 0)),
            update_at=int(data.get("update_at", 0)),
            delete_at=int(data.get("delete_at", 0)),
            root_id=data.get("root_id", ""),
            type=data.get("type", ""),
            props=dict(data.get("props") or {}),
        )
