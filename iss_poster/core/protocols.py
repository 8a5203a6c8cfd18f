"""Protocol definitions for the pipeline stages."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Protocol

from .models import (
    ImageArtifact,
    ImageryRequest,
    PostMessage,
    PublishReceipt,
    TelemetrySnapshot,
)

Clock = Callable[[], datetime]


class TelemetrySource(Protocol):
    async def fetch(self) -> TelemetrySnapshot:
        """Return the current station state.

        Raises:
            TelemetryFetchError: On transport, timeout, status or payload failure.
        """
        ...


class ImageryResolver(Protocol):
    def resolve(self, now: datetime) -> ImageryRequest:
        """Build the imagery request for the day before ``now`` (UTC)."""
        ...


class ImagerySource(Protocol):
    async def fetch(self, request: ImageryRequest) -> ImageArtifact:
        """Download the requested image and stage it on disk.

        Raises:
            ImageryFetchError: On transport, timeout or status failure.
        """
        ...


class MessageBuilder(Protocol):
    def compose(
        self, telemetry: TelemetrySnapshot, request: ImageryRequest, now: datetime
    ) -> PostMessage:
        ...


class PostPublisher(Protocol):
    async def publish(
        self, image: ImageArtifact, message: PostMessage
    ) -> PublishReceipt:
        """Create the photo post.

        Raises:
            PublishError: On transport, timeout, status or error-shaped response.
        """
        ...
