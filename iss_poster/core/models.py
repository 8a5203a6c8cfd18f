"""Domain models handed between pipeline stages."""

from __future__ import annotations

import contextlib
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional

PostMessage = str

TELEMETRY_FIELDS = ("latitude", "longitude", "altitude", "velocity", "visibility")


class Visibility(str, Enum):
    DAYLIGHT = "daylight"
    ECLIPSED = "eclipsed"

    @classmethod
    def parse(cls, value: str) -> "Visibility":
        """Only the literal daylight marker counts as daylight."""
        if value == cls.DAYLIGHT.value:
            return cls.DAYLIGHT
        return cls.ECLIPSED


def _as_float(payload: Mapping[str, Any], key: str) -> float:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field {key!r} is not numeric: {value!r}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValueError(f"Field {key!r} is out of range: {value!r}") from exc
    if not math.isfinite(number):
        raise ValueError(f"Field {key!r} is not finite: {value!r}")
    return number


@dataclass(frozen=True, slots=True)
class TelemetrySnapshot:
    """Instantaneous position and illumination state of the station."""

    latitude: float
    longitude: float
    altitude: float
    velocity: float
    visibility: str

    @property
    def light(self) -> Visibility:
        return Visibility.parse(self.visibility)

    @classmethod
    def from_payload(cls, payload: Any) -> "TelemetrySnapshot":
        """Build a snapshot from a decoded JSON body.

        Raises:
            ValueError: If the payload is not an object, a field is missing,
                or a numeric field cannot be interpreted as a number.
        """
        if not isinstance(payload, Mapping):
            raise ValueError(f"Expected JSON object, got {type(payload).__name__}")

        missing = [key for key in TELEMETRY_FIELDS if key not in payload]
        if missing:
            raise ValueError(f"Response missing expected field(s): {', '.join(missing)}")

        visibility = payload["visibility"]
        if not isinstance(visibility, str):
            raise ValueError(f"Field 'visibility' is not a string: {visibility!r}")

        return cls(
            latitude=_as_float(payload, "latitude"),
            longitude=_as_float(payload, "longitude"),
            altitude=_as_float(payload, "altitude"),
            velocity=_as_float(payload, "velocity"),
            visibility=visibility,
        )


@dataclass(frozen=True, slots=True)
class ImageryRequest:
    """Retrieval URL for the daily imagery composite and its embedded date."""

    url: str
    reference_date: date

    @property
    def time_parameter(self) -> str:
        return self.reference_date.isoformat()


@dataclass(slots=True)
class ImageArtifact:
    """Downloaded image payload staged on disk for upload."""

    path: Path
    data: bytes
    content_type: str = "image/jpeg"
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def filename(self) -> str:
        return self.path.name

    def release(self) -> None:
        """Remove the staged file if it is still present."""
        with contextlib.suppress(FileNotFoundError):
            self.path.unlink()


@dataclass(frozen=True, slots=True)
class PublishReceipt:
    """Identifiers returned by the Graph API for a created photo post."""

    post_id: str
    photo_id: Optional[str] = None


@dataclass(slots=True)
class PipelineResult:
    telemetry: TelemetrySnapshot
    request: ImageryRequest
    message: PostMessage
    receipt: Optional[PublishReceipt] = None
