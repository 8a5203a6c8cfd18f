"""Core primitives for iss-poster."""

from .errors import (
    ConfigurationError,
    ImageryFetchError,
    PipelineError,
    PublishError,
    TelemetryFetchError,
)
from .models import (
    ImageArtifact,
    ImageryRequest,
    PipelineResult,
    PostMessage,
    PublishReceipt,
    TelemetrySnapshot,
    Visibility,
)
from .protocols import (
    Clock,
    ImageryResolver,
    ImagerySource,
    MessageBuilder,
    PostPublisher,
    TelemetrySource,
)

__all__ = [
    "Clock",
    "ConfigurationError",
    "ImageArtifact",
    "ImageryFetchError",
    "ImageryRequest",
    "ImageryResolver",
    "ImagerySource",
    "MessageBuilder",
    "PipelineError",
    "PipelineResult",
    "PostMessage",
    "PostPublisher",
    "PublishError",
    "PublishReceipt",
    "TelemetryFetchError",
    "TelemetrySnapshot",
    "Visibility",
]
