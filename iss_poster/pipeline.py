"""Posting pipeline: telemetry, imagery, message, publish."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from . import constants
from .adapters import (
    FacebookPublisher,
    ImageryFetcher,
    ImageryLocator,
    TelemetryClient,
    create_session,
)
from .config import PosterConfig
from .core import (
    Clock,
    ConfigurationError,
    ImageArtifact,
    ImageryResolver,
    ImagerySource,
    MessageBuilder,
    PipelineResult,
    PostPublisher,
    TelemetrySource,
)
from .message import MessageComposer, exceeds_limit

LOGGER = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PostingPipeline:
    """Runs the stages strictly in sequence, one attempt each.

    Any stage failure propagates as a ``PipelineError`` subclass and the
    remaining stages are skipped. The staged image is released after the
    publish stage whether it succeeded or not, unless ``keep_artifact`` is set.
    """

    def __init__(
        self,
        *,
        telemetry: TelemetrySource,
        locator: ImageryResolver,
        fetcher: ImagerySource,
        composer: MessageBuilder,
        publisher: Optional[PostPublisher] = None,
        clock: Clock = utc_now,
        keep_artifact: bool = False,
        message_limit: int = constants.DEFAULT_MESSAGE_LIMIT,
    ) -> None:
        self._telemetry = telemetry
        self._locator = locator
        self._fetcher = fetcher
        self._composer = composer
        self._publisher = publisher
        self._clock = clock
        self._keep_artifact = keep_artifact
        self._message_limit = message_limit

    async def run(self) -> PipelineResult:
        if self._publisher is None:
            raise ConfigurationError("No publisher configured for this pipeline")

        now = self._clock()

        LOGGER.info("Fetching ISS telemetry...")
        telemetry = await self._telemetry.fetch()

        request = self._locator.resolve(now)
        LOGGER.info("Downloading map image for %s...", request.time_parameter)
        artifact: ImageArtifact = await self._fetcher.fetch(request)

        try:
            LOGGER.info("Creating post message...")
            message = self._composer.compose(telemetry, request, now)
            self._check_length(message)
            LOGGER.info("Posting to Facebook...")
            LOGGER.info("%s", message)
            receipt = await self._publisher.publish(artifact, message)
        finally:
            if not self._keep_artifact:
                artifact.release()

        LOGGER.info("Posted to Facebook successfully (post %s)", receipt.post_id)
        return PipelineResult(
            telemetry=telemetry, request=request, message=message, receipt=receipt
        )

    async def preview(self) -> PipelineResult:
        """Compose the message from live telemetry without downloading or posting."""
        now = self._clock()
        LOGGER.info("Fetching ISS telemetry...")
        telemetry = await self._telemetry.fetch()
        request = self._locator.resolve(now)
        message = self._composer.compose(telemetry, request, now)
        self._check_length(message)
        return PipelineResult(telemetry=telemetry, request=request, message=message)

    def _check_length(self, message: str) -> None:
        # Not truncated: the platform rejects the post instead.
        if exceeds_limit(message, self._message_limit):
            LOGGER.warning(
                "Message is %d characters, above the %d character limit",
                len(message),
                self._message_limit,
            )


async def run_from_config(
    config: PosterConfig, *, publish: bool = True, clock: Clock = utc_now
) -> PipelineResult:
    """Build every stage from configuration, share one session, and run."""

    if publish and not (config.facebook.page_id and config.facebook.access_token):
        raise ConfigurationError(
            "Facebook page id and access token are required (FB_PAGE_ID, FB_ACCESS_TOKEN)"
        )

    session = create_session(ignore_tls=config.network.ignore_tls)
    try:
        publisher: Optional[FacebookPublisher] = None
        if publish:
            publisher = FacebookPublisher(
                config.facebook.page_id or "",
                config.facebook.access_token or "",
                session=session,
                graph_url=config.facebook.graph_url,
                api_version=config.facebook.api_version,
                timeout=config.facebook.timeout_seconds,
            )

        pipeline = PostingPipeline(
            telemetry=TelemetryClient(
                config.telemetry.url,
                session=session,
                timeout=config.telemetry.timeout_seconds,
            ),
            locator=ImageryLocator(
                config.imagery.base_url,
                layer=config.imagery.layer,
                width=config.imagery.width,
                height=config.imagery.height,
            ),
            fetcher=ImageryFetcher(
                config.imagery.staging_path,
                session=session,
                timeout=config.imagery.timeout_seconds,
            ),
            composer=MessageComposer(config.message.timezone),
            publisher=publisher,
            clock=clock,
            keep_artifact=config.imagery.keep_artifact,
            message_limit=config.facebook.message_limit,
        )

        if publish:
            return await pipeline.run()
        return await pipeline.preview()
    finally:
        await session.close()
