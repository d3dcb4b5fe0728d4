"""E.ON Energy Navigator API client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from http import HTTPStatus
from typing import Any, TypeVar

import aiohttp

from .auth import Credentials, EonAuth
from .const import BASE_URL, TOKEN_URL
from .costs import CostStatement, decode_cost_statement
from .errors import DecodeError, NoCostDataError, TransportError, api_error
from .models import (
    Installation,
    InstallationMeasurementSeries,
    MeasurementSet,
    Resolution,
)
from .timecodec import format_query_timestamp, format_timestamp

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")


class EonClient:
    """Client for interacting with the Navigator API.

    One client may be shared by concurrent tasks on the same event loop;
    the token cache is the only shared state and is guarded by a lock.

    204 responses are handled per endpoint: installations, measurement
    series and measurements treat them as an empty result, costs raise
    NoCostDataError.
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        base_url: str = BASE_URL,
        token_url: str = TOKEN_URL,
        timeout: float | None = None,
    ):
        """Initialize the client with credentials.

        Args:
            client_id: OAuth client id (default: CLIENT_ID env variable)
            client_secret: OAuth client secret (default: CLIENT_SECRET env variable)
            session: Session to use; it is not closed by the client
            base_url: Base URL of the resource endpoints
            token_url: URL of the token endpoint
            timeout: Default total timeout in seconds for each request
        """
        if client_id and client_secret:
            credentials = Credentials(client_id, client_secret)
        elif client_id or client_secret:
            raise ValueError("client_id and client_secret must be given together")
        else:
            credentials = Credentials.from_env()
        self._auth = EonAuth(credentials, token_url=token_url)
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    @classmethod
    def from_env(cls, **kwargs: Any) -> "EonClient":
        """Create a client from the CLIENT_ID and CLIENT_SECRET variables."""
        return cls(**kwargs)

    @property
    def auth(self) -> EonAuth:
        return self._auth

    async def __aenter__(self) -> "EonClient":
        """Enter async context."""
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active session."""
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    def _timeout_kwargs(self, timeout: float | None) -> dict:
        timeout = timeout if timeout is not None else self._timeout
        if timeout is None:
            return {}
        return {"timeout": aiohttp.ClientTimeout(total=timeout)}

    async def _get(
        self,
        endpoint: str,
        action: str,
        params: list[tuple[str, str]] | None = None,
        timeout: float | None = None,
    ) -> tuple[int, Any]:
        """Make an authenticated GET request.

        Returns the status and decoded JSON body. The body is None for a
        204. Any status other than 200 or 204 raises the classified
        ApiError.
        """
        session = await self._ensure_session()
        if timeout is None:
            timeout = self._timeout
        auth_header = await self._auth.get_auth_header(session, timeout)

        headers = {
            "Accept": "application/json",
            **auth_header,
        }
        url = f"{self._base_url}{endpoint}"
        _LOGGER.debug("GET %s params=%s", url, params)

        try:
            async with session.get(
                url, params=params, headers=headers, **self._timeout_kwargs(timeout)
            ) as resp:
                if resp.status == HTTPStatus.NO_CONTENT:
                    _LOGGER.debug("GET %s returned no content", url)
                    return resp.status, None

                if resp.status != HTTPStatus.OK:
                    text = await resp.text(errors="replace")
                    _LOGGER.error(
                        "API request to %s failed with status %s: %s",
                        endpoint,
                        resp.status,
                        text,
                    )
                    raise api_error(resp.status, text, action)

                # UnicodeDecodeError is a ValueError
                try:
                    return resp.status, await resp.json(content_type=None)
                except ValueError as err:
                    excerpt = (await resp.text(errors="replace"))[:200]
                    raise DecodeError(
                        f"failed to {action}: response is not valid JSON: {excerpt}"
                    ) from err
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise TransportError(f"failed to {action}: {err!r}") from err

    @staticmethod
    def _decode(action: str, decoder: Callable[[Any], _T], data: Any) -> _T:
        """Run a decoder, turning structural mismatches into DecodeError."""
        try:
            return decoder(data)
        except (AttributeError, KeyError, TypeError, ValueError) as err:
            raise DecodeError(f"failed to {action}: unexpected response: {err}") from err

    async def get_access_token(self, timeout: float | None = None) -> str:
        """Return a valid access token, authenticating if necessary."""
        session = await self._ensure_session()
        if timeout is None:
            timeout = self._timeout
        return await self._auth.get_token(session, timeout)

    async def get_installations(
        self,
        installation_filter: Iterable[str] | None = None,
        timeout: float | None = None,
    ) -> list[Installation]:
        """Fetch installations with metadata.

        Args:
            installation_filter: Only return these installation ids

        Returns:
            List of Installation objects, empty on 204
        """
        action = "get installations"
        params = [("installationFilter", str(i)) for i in installation_filter or ()]
        status, data = await self._get(
            "/installations", action, params=params or None, timeout=timeout
        )
        if status == HTTPStatus.NO_CONTENT:
            return []

        installations = self._decode(
            action,
            lambda body: [
                Installation.from_api_response(item)
                for item in body.get("installations") or []
            ],
            data,
        )
        _LOGGER.debug("get_installations: parsed %d installation(s)", len(installations))
        return installations

    async def get_measurement_series(
        self, timeout: float | None = None
    ) -> list[InstallationMeasurementSeries]:
        """Fetch the measurement series of every installation.

        Returns:
            List of InstallationMeasurementSeries, empty on 204
        """
        action = "get measurement series"
        status, data = await self._get(
            "/installations/measurement-series", action, timeout=timeout
        )
        if status == HTTPStatus.NO_CONTENT:
            return []

        return self._decode(
            action,
            lambda body: [
                InstallationMeasurementSeries.from_api_response(item)
                for item in body.get("installations") or []
            ],
            data,
        )

    async def get_measurements(
        self,
        series_id: int,
        resolution: Resolution | str,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        include_missing: bool = False,
        timeout: float | None = None,
    ) -> MeasurementSet:
        """Fetch values of a measurement series.

        Quarter and hour resolutions need a bounded range (upstream allows
        at most 3 months and 1 year respectively). The range is not checked
        here; the server rejects out-of-policy requests.

        Args:
            series_id: Measurement series id from get_measurement_series
            resolution: quarter, hour, day or month
            from_date: Start of the range
            to_date: End of the range
            include_missing: Ask the server to fill gaps with empty values

        Returns:
            MeasurementSet, with no measurements on 204
        """
        resolution = Resolution(resolution)
        action = "get measurements"
        endpoint = f"/measurements/{series_id}/resolution/{resolution.value}"

        params = []
        if from_date is not None:
            params.append(("from", format_query_timestamp(from_date)))
        if to_date is not None:
            params.append(("to", format_query_timestamp(to_date)))
        params.append(("includeMissing", "true" if include_missing else "false"))

        status, data = await self._get(endpoint, action, params=params, timeout=timeout)
        if status == HTTPStatus.NO_CONTENT:
            return MeasurementSet(id=int(series_id), resolution=resolution.value)

        result = self._decode(action, MeasurementSet.from_api_response, data)
        _LOGGER.debug(
            "get_measurements: %d value(s) for series %s at %s",
            len(result.measurements),
            series_id,
            resolution.value,
        )
        return result

    async def get_costs(
        self,
        installation_id: str,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        timeout: float | None = None,
    ) -> CostStatement:
        """Fetch the cost statement of an installation.

        Whole months are considered for the range. Unlike the other
        endpoints, a 204 here raises NoCostDataError.

        Returns:
            The statement variant matching the energy class, or
            UnrecognizedCosts when the class is missing or unknown
        """
        action = "get costs"
        params = []
        if from_date is not None:
            params.append(("from", format_timestamp(from_date)))
        if to_date is not None:
            params.append(("to", format_timestamp(to_date)))

        status, data = await self._get(
            f"/costs/{installation_id}", action, params=params or None, timeout=timeout
        )
        if status == HTTPStatus.NO_CONTENT:
            raise NoCostDataError(installation_id)

        return decode_cost_statement(data)

    async def is_alive(self, timeout: float | None = None) -> bool:
        """Check if the API is reachable.

        Sends an unauthenticated request to the base path. Any HTTP
        response, error statuses included, counts as reachable.
        """
        session = await self._ensure_session()
        try:
            async with session.get(
                f"{self._base_url}/", **self._timeout_kwargs(timeout)
            ) as resp:
                _LOGGER.debug("Liveness probe answered with status %s", resp.status)
                return True
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            _LOGGER.warning("Navigator API unreachable: %s", err)
            return False

    async def close(self) -> None:
        """Close the client session if the client created it."""
        if self._session and self._owns_session:
            await self._session.close()
        self._session = None
