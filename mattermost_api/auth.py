"""Authentication data for a Mattermost instance.

Either a ``login_id`` and password, or a personal access token. Use
:meth:`AuthenticationData.from_password` or
:meth:`AuthenticationData.from_access_token` to build one.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class AuthenticationData:
    """Credentials used to obtain a bearer token."""

    login_id: str | None = None
    password: str | None = field(default=None, repr=False)
    token: str | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        has_password = self.login_id is not None and self.password is not None
        has_partial = (self.login_id is None) != (self.password is None)
        if has_partial or has_password == (self.token is not None):
            raise ValueError(
                "Exactly one of login_id/password or token must be supplied"
            )

    @classmethod
    def from_password(cls, login_id: str, password: str) -> AuthenticationData:
        """Create credentials from a user's login_id and password."""
        return cls(login_id=login_id, password=password)

    @classmethod
    def from_access_token(cls, token: str) -> AuthenticationData:
        """Create credentials from a personal access token.

        Personal access tokens must be enabled per instance by an admin.
        """
        return cls(token=token)

    @property
    def using_password(self) -> bool:
        """True if the credentials are a login_id and password."""
        return self.password is not None

    @property
    def using_token(self) -> bool:
        """True if the credentials are a personal access token."""
        return self.token is not None
