"""NASA GIBS imagery request building and download.

The Global Imagery Browse Services (GIBS) WMS endpoint serves daily global
composites. Same-day composites are frequently incomplete, so requests always
target the previous UTC calendar day.
"""

from __future__ import annotations

import asyncio
import io
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlencode

import aiohttp
from PIL import Image, UnidentifiedImageError

from .. import constants
from ..core import ImageArtifact, ImageryFetchError, ImageryRequest
from .http import describe_error, is_success

LOGGER = logging.getLogger(__name__)

WHOLE_GLOBE_BBOX = "-180,-90,180,90"


class ImageryLocator:
    """Builds the WMS GetMap request for yesterday's true-color composite."""

    def __init__(
        self,
        base_url: str = constants.DEFAULT_IMAGERY_BASE_URL,
        *,
        layer: str = constants.DEFAULT_IMAGERY_LAYER,
        width: int = constants.DEFAULT_IMAGERY_WIDTH,
        height: int = constants.DEFAULT_IMAGERY_HEIGHT,
    ) -> None:
        self.base_url = base_url
        self.layer = layer
        self.width = width
        self.height = height

    def resolve(self, now: datetime) -> ImageryRequest:
        """Return the request for the UTC calendar day before ``now``.

        Naive datetimes are interpreted as UTC.
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        reference_date = (now.astimezone(timezone.utc) - timedelta(days=1)).date()

        params = {
            "SERVICE": "WMS",
            "REQUEST": "GetMap",
            "VERSION": "1.3.0",
            "LAYERS": self.layer,
            "CRS": "EPSG:4326",
            "STYLES": "",
            "FORMAT": "image/jpeg",
            "TIME": reference_date.isoformat(),
            "BBOX": WHOLE_GLOBE_BBOX,
            "WIDTH": str(self.width),
            "HEIGHT": str(self.height),
        }
        url = f"{self.base_url}?{urlencode(params, safe=':,/')}"
        return ImageryRequest(url=url, reference_date=reference_date)


def inspect_image(data: bytes) -> Tuple[int, int, str]:
    """Return ``(width, height, mime_type)`` of an encoded image.

    Raises:
        ValueError: If the payload is not a decodable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            width, height = image.size
            mime_type = Image.MIME.get(image.format or "", "image/jpeg")
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise ValueError(f"Payload is not a valid image: {describe_error(exc)}") from exc
    return width, height, mime_type


class ImageryFetcher:
    """Downloads an imagery request into a fixed staging file."""

    def __init__(
        self,
        staging_path: Path,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = constants.DEFAULT_IMAGERY_TIMEOUT_SECONDS,
    ) -> None:
        self._staging_path = staging_path
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout

    @property
    def staging_path(self) -> Path:
        return self._staging_path

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

    async def fetch(self, request: ImageryRequest) -> ImageArtifact:
        """Download the image and overwrite the staging file with it.

        Raises:
            ImageryFetchError: On transport failure, timeout, non-2xx status,
                or a body that is not an image (WMS reports errors as XML
                with status 200).
        """
        session = await self._ensure_session()
        timeout = aiohttp.ClientTimeout(total=self._timeout)

        try:
            async with session.get(request.url, timeout=timeout) as response:
                if not is_success(response.status):
                    raise ImageryFetchError(
                        f"Unexpected response {response.status} for imagery of {request.time_parameter}"
                    )
                data = await response.read()
        except asyncio.TimeoutError as exc:
            raise ImageryFetchError(
                f"Imagery download timed out after {self._timeout:g}s"
            ) from exc
        except aiohttp.ClientError as exc:
            raise ImageryFetchError(describe_error(exc)) from exc

        if not data:
            raise ImageryFetchError("Imagery service returned an empty body")

        try:
            width, height, content_type = inspect_image(data)
        except ValueError as exc:
            snippet = data[:200].decode("utf-8", errors="replace").strip()
            raise ImageryFetchError(f"{exc} ({snippet})") from exc

        try:
            self._staging_path.parent.mkdir(parents=True, exist_ok=True)
            self._staging_path.write_bytes(data)
        except OSError as exc:
            raise ImageryFetchError(
                f"Could not stage image at {self._staging_path}: {describe_error(exc)}"
            ) from exc

        LOGGER.debug(
            "Staged %d bytes (%dx%d %s) at %s",
            len(data),
            width,
            height,
            content_type,
            self._staging_path,
        )
        return ImageArtifact(
            path=self._staging_path,
            data=data,
            content_type=content_type,
            width=width,
            height=height,
        )
