"""Error taxonomy for the posting pipeline."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when required settings (page id, access token) are missing."""


class PipelineError(RuntimeError):
    """Terminal failure of one pipeline stage.

    Attributes:
        stage: Short tag of the failing stage (``telemetry``, ``imagery``, ``publish``).
        cause: Message of the underlying transport, status or payload error.
    """

    stage = "pipeline"

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"{self.stage} failed: {cause}")


class TelemetryFetchError(PipelineError):
    stage = "telemetry"


class ImageryFetchError(PipelineError):
    stage = "imagery"


class PublishError(PipelineError):
    stage = "publish"
