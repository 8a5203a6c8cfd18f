"""Facebook Graph API page photo publisher."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import aiohttp

from .. import constants
from ..core import ImageArtifact, PostMessage, PublishError, PublishReceipt
from .http import describe_error, is_success

LOGGER = logging.getLogger(__name__)


def _graph_error_message(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if error is None:
        return None
    if isinstance(error, dict):
        message = error.get("message") or "unknown Graph API error"
        code = error.get("code")
        return f"{message} (code {code})" if code is not None else str(message)
    return str(error)


class FacebookPublisher:
    """Uploads a photo with a caption to a page in a single attempt.

    There is no idempotency key: if the acknowledgement is lost after the
    Graph API accepted the upload, a later run can create a duplicate post.
    """

    def __init__(
        self,
        page_id: str,
        access_token: str,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        graph_url: str = constants.DEFAULT_GRAPH_URL,
        api_version: str = constants.DEFAULT_GRAPH_API_VERSION,
        timeout: float = constants.DEFAULT_PUBLISH_TIMEOUT_SECONDS,
    ) -> None:
        self._page_id = page_id
        self._access_token = access_token
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._url = f"{graph_url.rstrip('/')}/{api_version}/{page_id}/photos"

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

    def _build_form(self, image: ImageArtifact, message: PostMessage) -> aiohttp.FormData:
        form = aiohttp.FormData()
        form.add_field("access_token", self._access_token)
        form.add_field("message", message)
        form.add_field(
            "source",
            image.data,
            filename=image.filename,
            content_type=image.content_type,
        )
        return form

    async def publish(self, image: ImageArtifact, message: PostMessage) -> PublishReceipt:
        """Create the photo post.

        Raises:
            PublishError: On transport failure, timeout, non-2xx status, or an
                acknowledgement that carries an error or lacks a post id.
        """
        session = await self._ensure_session()
        timeout = aiohttp.ClientTimeout(total=self._timeout)
        form = self._build_form(image, message)

        try:
            async with session.post(self._url, data=form, timeout=timeout) as response:
                status = response.status
                raw_body = await response.read()
        except asyncio.TimeoutError as exc:
            raise PublishError(
                f"Graph API did not acknowledge within {self._timeout:g}s"
            ) from exc
        except aiohttp.ClientError as exc:
            raise PublishError(describe_error(exc)) from exc

        body = raw_body.decode("utf-8", errors="replace")

        try:
            payload = json.loads(body) if body else None
        except ValueError:
            payload = None

        error_message = _graph_error_message(payload)
        if not is_success(status):
            detail = error_message or body.strip()[:200]
            raise PublishError(f"Unexpected response {status} from Graph API: {detail}")
        if error_message is not None:
            raise PublishError(f"Graph API reported an error: {error_message}")
        if not isinstance(payload, dict):
            raise PublishError(f"Malformed acknowledgement from Graph API: {body.strip()[:200]}")

        photo_id = payload.get("id")
        post_id = payload.get("post_id") or photo_id
        if not post_id:
            raise PublishError("Graph API acknowledgement is missing a post id")

        return PublishReceipt(
            post_id=str(post_id), photo_id=str(photo_id) if photo_id else None
        )
