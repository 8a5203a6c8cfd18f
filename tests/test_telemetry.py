"""Tests for the station telemetry client."""

from __future__ import annotations

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from iss_poster.adapters.telemetry import TelemetryClient
from iss_poster.core import TelemetryFetchError

ISS_PAYLOAD = {
    "name": "iss",
    "id": 25544,
    "latitude": 45.123,
    "longitude": -122.456,
    "altitude": 408.7,
    "velocity": 27600.3,
    "visibility": "daylight",
    "footprint": 4446.1,
    "timestamp": 1718452800,
    "units": "kilometers",
}


async def _fetch_with(handler, *, timeout: float = 2.0) -> object:
    app = web.Application()
    app.router.add_get("/v1/satellites/25544", handler)

    async with TestServer(app) as server:
        client = TelemetryClient(
            str(server.make_url("/v1/satellites/25544")), timeout=timeout
        )
        try:
            return await client.fetch()
        finally:
            await client.close()


@pytest.mark.asyncio
async def test_fetch_returns_snapshot():
    async def handler(request: web.Request) -> web.StreamResponse:
        return web.json_response(ISS_PAYLOAD)

    snapshot = await _fetch_with(handler)

    assert snapshot.latitude == 45.123
    assert snapshot.longitude == -122.456
    assert snapshot.altitude == 408.7
    assert snapshot.velocity == 27600.3
    assert snapshot.visibility == "daylight"


@pytest.mark.asyncio
async def test_fetch_accepts_json_with_unexpected_content_type():
    async def handler(request: web.Request) -> web.StreamResponse:
        return web.Response(
            text='{"latitude": 1, "longitude": 2, "altitude": 3, "velocity": 4, "visibility": "eclipsed"}',
            content_type="text/plain",
        )

    snapshot = await _fetch_with(handler)

    assert snapshot.visibility == "eclipsed"


@pytest.mark.asyncio
async def test_fetch_raises_on_error_status():
    async def handler(request: web.Request) -> web.StreamResponse:
        return web.Response(status=429, text="Too Many Requests")

    with pytest.raises(TelemetryFetchError) as exc_info:
        await _fetch_with(handler)

    assert exc_info.value.stage == "telemetry"
    assert "429" in exc_info.value.cause
    assert "Too Many Requests" in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_raises_on_non_json_body():
    async def handler(request: web.Request) -> web.StreamResponse:
        return web.Response(text="<html>gateway</html>", content_type="text/html")

    with pytest.raises(TelemetryFetchError, match="Malformed JSON"):
        await _fetch_with(handler)


@pytest.mark.asyncio
async def test_fetch_raises_on_missing_field():
    async def handler(request: web.Request) -> web.StreamResponse:
        payload = dict(ISS_PAYLOAD)
        del payload["visibility"]
        return web.json_response(payload)

    with pytest.raises(TelemetryFetchError, match="visibility"):
        await _fetch_with(handler)


@pytest.mark.asyncio
async def test_fetch_times_out():
    async def handler(request: web.Request) -> web.StreamResponse:
        await asyncio.sleep(0.5)
        return web.json_response(ISS_PAYLOAD)

    with pytest.raises(TelemetryFetchError, match="timed out"):
        await _fetch_with(handler, timeout=0.1)


@pytest.mark.asyncio
async def test_fetch_raises_on_connection_failure(unused_tcp_port):
    client = TelemetryClient(f"http://127.0.0.1:{unused_tcp_port}/v1/satellites/25544")
    try:
        with pytest.raises(TelemetryFetchError):
            await client.fetch()
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_fetch_rejects_non_finite_coordinates():
    async def handler(request: web.Request) -> web.StreamResponse:
        return web.Response(
            text='{"latitude": NaN, "longitude": Infinity, "altitude": 1, "velocity": 2, "visibility": "daylight"}',
            content_type="application/json",
        )

    with pytest.raises(TelemetryFetchError, match="Malformed telemetry payload"):
        await _fetch_with(handler)
