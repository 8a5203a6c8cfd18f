"""Station telemetry client for the wheretheiss.at API."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from .. import constants
from ..core import TelemetryFetchError, TelemetrySnapshot
from .http import describe_error, is_success

LOGGER = logging.getLogger(__name__)


class TelemetryClient:
    """Fetches the current position of the station in a single attempt."""

    def __init__(
        self,
        url: str = constants.DEFAULT_TELEMETRY_URL,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = constants.DEFAULT_TELEMETRY_TIMEOUT_SECONDS,
    ) -> None:
        self._url = url
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout

    @property
    def url(self) -> str:
        return self._url

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the HTTP session if we own it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def fetch(self) -> TelemetrySnapshot:
        """Fetch the current station state.

        Raises:
            TelemetryFetchError: On transport failure, timeout, non-2xx status
                or a payload that is not a complete telemetry object.
        """
        session = await self._ensure_session()
        timeout = aiohttp.ClientTimeout(total=self._timeout)

        try:
            async with session.get(self._url, timeout=timeout) as response:
                if not is_success(response.status):
                    detail = await response.text()
                    raise TelemetryFetchError(
                        f"Unexpected response {response.status} from {self._url}: {detail.strip()[:200]}"
                    )
                payload = await response.json(content_type=None)
        except asyncio.TimeoutError as exc:
            raise TelemetryFetchError(
                f"Request to {self._url} timed out after {self._timeout:g}s"
            ) from exc
        except aiohttp.ClientError as exc:
            raise TelemetryFetchError(describe_error(exc)) from exc
        except ValueError as exc:
            raise TelemetryFetchError(f"Malformed JSON body: {exc}") from exc

        try:
            snapshot = TelemetrySnapshot.from_payload(payload)
        except ValueError as exc:
            raise TelemetryFetchError(f"Malformed telemetry payload: {exc}") from exc

        LOGGER.debug(
            "Telemetry: lat=%.4f lon=%.4f alt=%.1f vel=%.1f visibility=%s",
            snapshot.latitude,
            snapshot.longitude,
            snapshot.altitude,
            snapshot.velocity,
            snapshot.visibility,
        )
        return snapshot
