"""Tests for post message composition."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from iss_poster.core import ConfigurationError, ImageryRequest, TelemetrySnapshot
from iss_poster.message import (
    FLOURISHES,
    SHADOW_PHRASE,
    SUNLIGHT_PHRASE,
    MessageComposer,
    Weekday,
    exceeds_limit,
    flourish_for,
    light_phrase,
    resolve_timezone,
)

TELEMETRY = TelemetrySnapshot(
    latitude=45.123,
    longitude=-122.456,
    altitude=408.7,
    velocity=27600.3,
    visibility="daylight",
)
REQUEST = ImageryRequest(url="https://gibs.example/wms.cgi?TIME=2024-06-14", reference_date=date(2024, 6, 14))

# 2024-06-10 was a Monday.
WEEK_START = datetime(2024, 6, 10, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    ("offset", "weekday"),
    [
        (0, Weekday.MONDAY),
        (1, Weekday.TUESDAY),
        (2, Weekday.WEDNESDAY),
        (3, Weekday.THURSDAY),
        (4, Weekday.FRIDAY),
        (5, Weekday.SATURDAY),
        (6, Weekday.SUNDAY),
    ],
)
def test_compose_selects_weekday_template(offset, weekday):
    now = WEEK_START + timedelta(days=offset)
    composer = MessageComposer("UTC")

    message = composer.compose(TELEMETRY, REQUEST, now)

    assert composer.weekday_name(now) == weekday.value
    assert FLOURISHES[weekday] in message
    for other, flourish in FLOURISHES.items():
        if other is not weekday:
            assert flourish not in message
    assert now.strftime("%Y-%m-%d 12:00:00 UTC") in message
    assert "45.12°N, -122.46°E" in message
    assert "~409 km" in message
    assert "27600 km/h" in message
    assert "(TIME=2024-06-14)" in message


@pytest.mark.parametrize(
    ("visibility", "phrase"),
    [
        ("daylight", SUNLIGHT_PHRASE),
        ("eclipsed", SHADOW_PHRASE),
        ("unknown-state", SHADOW_PHRASE),
        ("", SHADOW_PHRASE),
    ],
)
def test_light_phrase_is_binary(visibility, phrase):
    assert light_phrase(visibility) == phrase

    telemetry = TelemetrySnapshot(1.0, 2.0, 3.0, 4.0, visibility)
    message = MessageComposer("UTC").compose(telemetry, REQUEST, WEEK_START)
    assert f"Currently {phrase}." in message


def test_sunlight_phrase_mentions_sunlight():
    assert "sunlight" in SUNLIGHT_PHRASE
    assert "shadow" in SHADOW_PHRASE


def test_unknown_weekday_falls_back_to_generic_template():
    composer = MessageComposer("UTC")

    message = composer.render(TELEMETRY, REQUEST, WEEK_START, "Caturday")

    assert flourish_for("Caturday") is None
    assert message == (
        "Hi from the ISS — 2024-06-10 12:00:00 UTC. "
        "I'm over 45.12°N, -122.46°E at ~409 km, moving 27600 km/h. "
        "Currently bathed in sunlight ☀️. "
        "View: NASA GIBS MODIS Terra True Color (TIME=2024-06-14) "
        "(ISS = International Space Station) #ISS #Space #NASA"
    )


def test_timestamp_is_rendered_in_utc():
    now = datetime(2024, 6, 15, 14, 30, 5, tzinfo=timezone(timedelta(hours=2)))

    message = MessageComposer("UTC").compose(TELEMETRY, REQUEST, now)

    assert "2024-06-15 12:30:05 UTC" in message


def test_weekday_follows_display_timezone():
    # 23:30 UTC on Saturday is already Sunday in Tokyo.
    now = datetime(2024, 6, 15, 23, 30, tzinfo=timezone.utc)

    assert MessageComposer("UTC").weekday_name(now) == "Saturday"
    assert MessageComposer("Asia/Tokyo").weekday_name(now) == "Sunday"


def test_compose_is_deterministic():
    composer = MessageComposer("UTC")

    assert composer.compose(TELEMETRY, REQUEST, WEEK_START) == composer.compose(
        TELEMETRY, REQUEST, WEEK_START
    )


def test_long_messages_are_not_truncated():
    # Overlong messages are reported, never shortened; the platform rejects them.
    composer = MessageComposer("UTC")
    message = composer.compose(TELEMETRY, REQUEST, WEEK_START)

    assert exceeds_limit(message, limit=50)
    assert not exceeds_limit(message)
    assert message.endswith("#ISS #Space #NASA")


def test_default_weekday_uses_host_timezone(monkeypatch):
    import time

    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    # 23:30 UTC on Saturday is already Sunday at UTC+10.
    monkeypatch.setenv("TZ", "AEST-10")
    time.tzset()
    try:
        now = datetime(2024, 6, 15, 23, 30, tzinfo=timezone.utc)
        assert MessageComposer().weekday_name(now) == "Sunday"
        assert MessageComposer("local").weekday_name(now) == "Sunday"
        assert MessageComposer("UTC").weekday_name(now) == "Saturday"
    finally:
        monkeypatch.delenv("TZ")
        time.tzset()


def test_resolve_timezone():
    assert resolve_timezone("local") is None
    assert resolve_timezone(" LOCAL ") is None
    assert str(resolve_timezone("Europe/Madrid")) == "Europe/Madrid"


@pytest.mark.parametrize("name", ["Mars/Olympus", "../etc/passwd"])
def test_unknown_timezone_is_a_configuration_error(name):
    with pytest.raises(ConfigurationError, match="timezone"):
        MessageComposer(name)
