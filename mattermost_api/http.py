"""HTTP client for Mattermost REST endpoints."""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from collections.abc import Mapping, Sequence
from typing import Any, Final

import aiohttp

from .errors import (
    CouldNotGetTokenError,
    MattermostApiError,
    MattermostConfigurationError,
    MattermostConnectionError,
    MattermostProtocolError,
    MattermostResponseError,
    MattermostTimeout,
    MissingAuthTokenError,
)
from .models import MattermostError
from .protocol import LOGIN_ENDPOINT, TOKEN_HEADER, join_endpoint

_LOGGER = logging.getLogger(__name__)

# RFC 9110 token characters
_METHOD_RE: Final = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")

QueryParams = Sequence[tuple[str, str]] | Mapping[str, str]


def _is_header_safe(value: str) -> bool:
    return not any(
        (ord(char) < 0x20 and char != "\t") or ord(char) == 0x7F for char in value
    )


class MattermostHttpClient:
    """HTTP client wrapper for a Mattermost instance API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        instance_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._session = session
        self._instance_url = instance_url
        self._timeout = timeout
        self.token = token

    def _url(self, endpoint: str) -> str:
        return join_endpoint(self._instance_url, endpoint)

    def _request_headers(self) -> dict[str, str]:
        if not self.token:
            raise MissingAuthTokenError()
        if not _is_header_safe(self.token):
            raise MattermostProtocolError("Auth token is not a valid header value")
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.token}",
        }

    async def query(
        self,
        method: str,
        endpoint: str,
        query: QueryParams | None = None,
        body: str | None = None,
    ) -> Any:
        """Make a request to the instance API and return the decoded JSON.

        This is the raw form every endpoint method goes through; it is public
        so callers can reach endpoints that have no dedicated wrapper.

        Raises:
            MissingAuthTokenError: If no token is held.
            MattermostProtocolError: If the method, token or response body
                cannot be encoded or decoded.
            MattermostApiError: If the instance returned a structured error.
            MattermostResponseError: If the instance returned any other
                non-2xx response.
            MattermostTimeout: If the request timed out.
            MattermostConnectionError: If the network request failed.
        """
        if not _METHOD_RE.match(method):
            raise MattermostProtocolError(f"Invalid HTTP method: {method!r}")
        url = self._url(endpoint)
        headers = self._request_headers()
        _LOGGER.debug("Making %s request to %s with query %s", method, url, query)

        try:
            async with self._session.request(
                method,
                url,
                headers=headers,
                params=query,
                data=body,
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                if not 200 <= resp.status < 300:
                    _LOGGER.error(
                        "Got status %s when requesting data from %s", resp.status, url
                    )
                    raise await self._response_error(resp)
                try:
                    return await resp.json(content_type=None)
                except ValueError as err:
                    raise MattermostProtocolError(
                        f"Could not decode response body from {url}"
                    ) from err
        except TimeoutError as err:
            raise MattermostTimeout(f"{method} {url} timed out") from err
        except aiohttp.InvalidURL as err:
            raise MattermostConfigurationError(f"Invalid request URL: {url}") from err
        except aiohttp.ClientError as err:
            raise MattermostConnectionError(f"{method} {url} failed") from err

    async def post(
        self,
        endpoint: str,
        payload: Any,
        query: QueryParams | None = None,
    ) -> Any:
        """POST a dataclass or JSON-serializable payload to the instance API."""
        if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
            payload = dataclasses.asdict(payload)
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as err:
            raise MattermostProtocolError("Could not serialize request body") from err
        return await self.query("POST", endpoint, query, body)

    async def login(self, login_id: str, password: str) -> str:
        """Exchange a login_id and password for a session token."""
        url = self._url(LOGIN_ENDPOINT)
        try:
            async with self._session.post(
                url,
                json={"login_id": login_id, "password": password},
                headers={"Accept": "application/json"},
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            ) as resp:
                token = resp.headers.get(TOKEN_HEADER)
                if token is None:
                    raise CouldNotGetTokenError(resp.status)
                return token
        except TimeoutError as err:
            raise MattermostTimeout("Login request timed out") from err
        except aiohttp.InvalidURL as err:
            raise MattermostConfigurationError(f"Invalid login URL: {url}") from err
        except aiohttp.ClientError as err:
            raise MattermostConnectionError("Login request failed") from err

    @staticmethod
    async def _response_error(resp: aiohttp.ClientResponse) -> MattermostResponseError:
        """Build the error for a non-2xx response.

        Bodies that decode into the structured Mattermost error shape become
        ``MattermostApiError``; anything else falls back to the status code.
        """
        status = resp.status
        try:
            text = await resp.text()
            error = MattermostError.from_dict(json.loads(text))
        except (aiohttp.ClientError, ValueError, KeyError, TypeError):
            return MattermostResponseError(
                status, f"Non-standard remote status code error: {status}"
            )
        return MattermostApiError(status, error)
