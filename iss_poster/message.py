"""Post message composition.

Each message shares the same slots (timestamp, position summary, light
condition, imagery citation and hashtag suffix) and differs per weekday only in
a single flourish sentence.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from . import constants
from .core import (
    ConfigurationError,
    ImageryRequest,
    PostMessage,
    TelemetrySnapshot,
    Visibility,
)

LOGGER = logging.getLogger(__name__)

SUNLIGHT_PHRASE = "bathed in sunlight ☀️"
SHADOW_PHRASE = "passing through Earth's shadow 🌑"
IMAGE_SOURCE = "NASA GIBS MODIS Terra True Color"
SIGNATURE = "(ISS = International Space Station) #ISS #Space #NASA"


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


# Indexed by datetime.weekday(), Monday == 0.
WEEKDAY_NAMES = tuple(day.value for day in Weekday)

FLOURISHES = {
    Weekday.SUNDAY: "Taking a breather and enjoying the view.",
    Weekday.MONDAY: "Kicked off the week with a research run. Here's the scene below.",
    Weekday.TUESDAY: "Running experiments and watching the sunrise sweep across continents.",
    Weekday.WEDNESDAY: "Midweek check-in from orbit — science, maintenance, and sweeping views.",
    Weekday.THURSDAY: "Preparing gear and sharing this snapshot from above.",
    Weekday.FRIDAY: "Wrapping up a busy week onboard — enjoy this view.",
    Weekday.SATURDAY: "Weekend vibes above Earth — peaceful and busy all at once.",
}


def format_timestamp(now: datetime) -> str:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")


def light_phrase(visibility: str) -> str:
    if Visibility.parse(visibility) is Visibility.DAYLIGHT:
        return SUNLIGHT_PHRASE
    return SHADOW_PHRASE


def flourish_for(weekday_name: str) -> Optional[str]:
    """Return the flourish for a weekday name, or None for unknown names."""
    try:
        weekday = Weekday(weekday_name)
    except ValueError:
        return None
    return FLOURISHES[weekday]


def resolve_timezone(name: str) -> Optional[tzinfo]:
    """Return the zone for an IANA name, or None for the host timezone.

    Raises:
        ConfigurationError: If the name is not a known timezone.
    """
    if name.strip().lower() == constants.LOCAL_TIMEZONE:
        return None
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone {name!r} in [message] timezone") from exc


def exceeds_limit(message: PostMessage, limit: int = constants.DEFAULT_MESSAGE_LIMIT) -> bool:
    return len(message) > limit


class MessageComposer:
    """Builds the post text from telemetry and calendar context.

    ``display_timezone`` selects the calendar used for the weekday lookup and
    defaults to the host timezone. The timestamp in the message is always
    rendered in UTC.
    """

    def __init__(
        self, display_timezone: Optional[tzinfo] | str = constants.DEFAULT_DISPLAY_TIMEZONE
    ) -> None:
        if isinstance(display_timezone, str):
            display_timezone = resolve_timezone(display_timezone)
        self._timezone = display_timezone

    def weekday_name(self, now: datetime) -> str:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return WEEKDAY_NAMES[now.astimezone(self._timezone).weekday()]

    def compose(
        self,
        telemetry: TelemetrySnapshot,
        request: ImageryRequest,
        now: datetime,
    ) -> PostMessage:
        return self.render(telemetry, request, now, self.weekday_name(now))

    def render(
        self,
        telemetry: TelemetrySnapshot,
        request: ImageryRequest,
        now: datetime,
        weekday_name: str,
    ) -> PostMessage:
        """Fill the template for an explicit weekday name.

        Names outside the seven weekdays fall back to the template without a
        flourish sentence.
        """
        coords = f"{telemetry.latitude:.2f}°N, {telemetry.longitude:.2f}°E"
        altitude = f"{telemetry.altitude:.0f} km"
        speed = f"{telemetry.velocity:.0f} km/h"

        parts = [
            f"Hi from the ISS — {format_timestamp(now)}.",
            f"I'm over {coords} at ~{altitude}, moving {speed}.",
            f"Currently {light_phrase(telemetry.visibility)}.",
        ]

        flourish = flourish_for(weekday_name)
        if flourish is None:
            LOGGER.warning("Unrecognised weekday %r; using generic message", weekday_name)
        else:
            parts.append(flourish)

        parts.append(f"View: {IMAGE_SOURCE} (TIME={request.time_parameter})")
        parts.append(SIGNATURE)
        return " ".join(parts)
