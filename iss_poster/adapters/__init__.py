"""Adapter modules for external services."""

from .facebook import FacebookPublisher
from .http import create_session
from .imagery import ImageryFetcher, ImageryLocator, inspect_image
from .telemetry import TelemetryClient

__all__ = [
    "FacebookPublisher",
    "ImageryFetcher",
    "ImageryLocator",
    "TelemetryClient",
    "create_session",
    "inspect_image",
]
