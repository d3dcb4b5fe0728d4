"""OAuth2 client-credentials authentication for the Navigator API."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field

import aiohttp

from .const import (
    DEFAULT_TOKEN_LIFETIME,
    ENV_CLIENT_ID,
    ENV_CLIENT_SECRET,
    OAUTH_SCOPE,
    TOKEN_SAFETY_MARGIN,
    TOKEN_URL,
)
from .errors import AuthenticationError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    """OAuth2 client credentials."""

    client_id: str
    client_secret: str = field(repr=False)

    @classmethod
    def from_env(cls) -> "Credentials":
        """Read credentials from the CLIENT_ID and CLIENT_SECRET variables."""
        client_id = os.environ.get(ENV_CLIENT_ID, "")
        client_secret = os.environ.get(ENV_CLIENT_SECRET, "")
        if not client_id or not client_secret:
            raise ValueError(
                f"{ENV_CLIENT_ID} and {ENV_CLIENT_SECRET} must be set in the environment"
            )
        return cls(client_id, client_secret)


@dataclass(frozen=True)
class TokenInfo:
    """OAuth2 token information."""

    access_token: str = field(repr=False)
    expires_at: float
    token_type: str = "Bearer"
    scope: str = ""

    @property
    def is_expired(self) -> bool:
        """Check if the token is expired.

        The safety margin is already subtracted from expires_at.
        """
        return time.time() >= self.expires_at

    @property
    def seconds_remaining(self) -> float:
        """Seconds until token expires (negative if already expired)."""
        return self.expires_at - time.time()


class EonAuth:
    """Handles the client-credentials exchange and caches the token."""

    def __init__(
        self,
        credentials: Credentials,
        token_url: str = TOKEN_URL,
        scope: str = OAUTH_SCOPE,
    ):
        self._credentials = credentials
        self._token_url = token_url
        self._scope = scope
        self._token: TokenInfo | None = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> TokenInfo | None:
        """The cached token, if any."""
        return self._token

    def invalidate(self) -> None:
        """Drop the cached token so the next call re-authenticates."""
        self._token = None

    async def get_token(
        self, session: aiohttp.ClientSession, timeout: float | None = None
    ) -> str:
        """Get a valid access token, authenticating if necessary."""
        async with self._lock:
            token = self._token
            if token is None or token.is_expired:
                if token is not None:
                    _LOGGER.info(
                        "Token expired %.0f seconds ago - re-authenticating",
                        -token.seconds_remaining,
                    )
                token = await self._authenticate(session, timeout)
                self._token = token
            return token.access_token

    async def _authenticate(
        self, session: aiohttp.ClientSession, timeout: float | None
    ) -> TokenInfo:
        """Exchange the client credentials for a new token."""
        _LOGGER.debug(
            "Requesting access token for client %s", self._credentials.client_id
        )
        data = {
            "client_id": self._credentials.client_id,
            "client_secret": self._credentials.client_secret,
            "grant_type": "client_credentials",
            "scope": self._scope,
        }
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

        kwargs = {}
        if timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        try:
            async with session.post(
                self._token_url, data=data, headers=headers, **kwargs
            ) as resp:
                text = await resp.text(errors="replace")
                if resp.status != 200:
                    _LOGGER.error(
                        "Authentication failed with status %s: %s", resp.status, text
                    )
                    raise AuthenticationError(
                        f"Authentication failed with status {resp.status}: {text}",
                        status=resp.status,
                        body=text,
                    )
                try:
                    result = await resp.json(content_type=None)
                except ValueError as err:
                    raise AuthenticationError(
                        f"Token response is not valid JSON: {text}",
                        status=resp.status,
                        body=text,
                    ) from err
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            _LOGGER.error("Failed to reach token endpoint: %s", err)
            raise AuthenticationError(f"Failed to authenticate: {err}") from err

        if not isinstance(result, dict) or not result.get("access_token"):
            raise AuthenticationError(
                "No access token in token response", status=200, body=text
            )

        expires_in = result.get("expires_in")
        if not isinstance(expires_in, (int, float)) or isinstance(expires_in, bool):
            _LOGGER.warning(
                "Token response has no usable expires_in, assuming %s seconds",
                DEFAULT_TOKEN_LIFETIME,
            )
            expires_in = DEFAULT_TOKEN_LIFETIME

        token = TokenInfo(
            access_token=result["access_token"],
            expires_at=time.time() + expires_in - TOKEN_SAFETY_MARGIN,
            token_type=result.get("token_type") or "Bearer",
            scope=result.get("scope") or "",
        )
        _LOGGER.info(
            "Authentication successful. Token expires in %s seconds", expires_in
        )
        return token

    async def get_auth_header(
        self, session: aiohttp.ClientSession, timeout: float | None = None
    ) -> dict:
        """Get the Authorization header for API requests."""
        token = await self.get_token(session, timeout)
        return {"Authorization": f"Bearer {token}"}
