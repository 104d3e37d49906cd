"""Client error types for Mattermost API interactions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import MattermostError


class MattermostClientError(Exception):
    """Base error for Mattermost client failures."""


class MattermostConfigurationError(MattermostClientError):
    """The instance URL is malformed."""


class MattermostAuthenticationError(MattermostClientError):
    """Base error for authentication failures."""


class MissingAuthTokenError(MattermostAuthenticationError):
    """No token was supplied or retrieved."""

    def __init__(self) -> None:
        super().__init__("No token was supplied or retrieved")


class CouldNotGetTokenError(MattermostAuthenticationError):
    """Login response did not carry a session token."""

    def __init__(self, status: int) -> None:
        super().__init__(
            "Could not turn login_id and password into a session token, "
            f"response code {status}"
        )
        self.status = status


class MattermostTimeout(MattermostClientError):
    """Timeout while communicating with the instance."""


class MattermostConnectionError(MattermostClientError):
    """Network connection to the instance failed."""


class MattermostHandshakeError(MattermostConnectionError):
    """WebSocket handshake failed."""


class MattermostProtocolError(MattermostClientError):
    """A request or response could not be encoded or decoded."""


class MattermostResponseError(MattermostClientError):
    """Non-2xx HTTP response from the instance."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status


class MattermostApiError(MattermostResponseError):
    """Non-2xx HTTP response carrying a structured Mattermost error."""

    def __init__(self, status: int, error: MattermostError) -> None:
        super().__init__(status, f"Mattermost API returned error: {error.message}")
        self.error = error
