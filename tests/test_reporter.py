from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import aiohttp
import pytest

from ndpbridge._transport import FormTransport
from ndpbridge.exceptions import BridgeTransportError
from ndpbridge.models.sample import CanonicalSample
from ndpbridge.reporter import Reporter, build_location_form, format_decimal
from ndpbridge.session import Session

SESSION = Session(session_id="SESSION-42")


class _RecordingTransport:
    def __init__(self, errors: list[BaseException | None] | None = None) -> None:
        self.calls: list[tuple[str, dict[str, str]]] = []
        self._errors = list(errors or [])

    async def post_form(self, endpoint: str, form: Mapping[str, str]) -> None:
        self.calls.append((endpoint, dict(form)))
        error = self._errors.pop(0) if self._errors else None
        if error is not None:
            raise error


class _FakeResponse:
    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self._body = body

    async def text(self) -> str:
        return self._body

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeHttpSession:
    def __init__(self, response: _FakeResponse | None = None, error: BaseException | None = None) -> None:
        self._response = response
        self._error = error
        self.requests: list[dict[str, Any]] = []

    def post(self, url: str, *, data: Any = None, headers: Any = None) -> _FakeResponse:
        self.requests.append({"url": url, "data": data, "headers": headers})
        if self._error is not None:
            raise self._error
        assert self._response is not None
        return self._response


@pytest.mark.parametrize(
    ("value", "places", "expected"),
    [
        (47.123456789, 6, "47.123457"),
        (-122.5, 6, "-122.5"),
        (12.0, 6, "12"),
        (0.0, 2, "0"),
        (-0.0000001, 6, "0"),
        (359.999, 2, "360"),
        (359.995, 2, "360"),
        (359.994, 2, "359.99"),
        (3280.839895013123, 2, "3280.84"),
        (0.125, 2, "0.13"),
        (1e-7, 6, "0"),
        (123456789.0, 2, "123456789"),
    ],
)
def test_format_decimal(value: float, places: int, expected: str) -> None:
    assert format_decimal(value, places) == expected


def test_build_location_form_fields() -> None:
    sample = CanonicalSample(latitude=47.123456789, longitude=8.5, heading=359.994, altitude=3500.006)

    form = build_location_form(SESSION, sample)

    assert form == {
        "sessionId": "SESSION-42",
        "latitude": "47.123457",
        "longitude": "8.5",
        "heading": "359.99",
        "altitude": "3500.01",
    }


@pytest.mark.asyncio
async def test_report_posts_to_location_endpoint() -> None:
    transport = _RecordingTransport()
    reporter = Reporter(transport)

    await reporter.report(SESSION, CanonicalSample(latitude=1.0, longitude=2.0, heading=3.0, altitude=4.0))

    assert transport.calls == [
        (
            "/api/v3/location",
            {"sessionId": "SESSION-42", "latitude": "1", "longitude": "2", "heading": "3", "altitude": "4"},
        )
    ]


@pytest.mark.asyncio
async def test_report_swallows_transport_failure_and_keeps_reporting(caplog: pytest.LogCaptureFixture) -> None:
    transport = _RecordingTransport(errors=[BridgeTransportError("boom", endpoint="/api/v3/location"), None])
    reporter = Reporter(transport)
    sample = CanonicalSample(latitude=1.0, longitude=2.0, heading=3.0, altitude=4.0)

    with caplog.at_level(logging.WARNING, logger="ndpbridge.reporter"):
        await reporter.report(SESSION, sample)
        await reporter.report(SESSION, sample)

    assert len(transport.calls) == 2
    assert "Error updating location" in caplog.text


@pytest.mark.asyncio
async def test_report_swallows_unexpected_errors() -> None:
    transport = _RecordingTransport(errors=[RuntimeError("unexpected")])

    await Reporter(transport).report(SESSION, CanonicalSample(latitude=1.0, longitude=2.0, heading=3.0, altitude=4.0))

    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_form_transport_posts_form_body() -> None:
    http = _FakeHttpSession(response=_FakeResponse(200))
    transport = FormTransport("https://charts.example.test/", http)  # type: ignore[arg-type]

    await transport.post_form("/api/v3/location", {"sessionId": "s", "latitude": "1"})

    assert http.requests[0]["url"] == "https://charts.example.test/api/v3/location"
    assert http.requests[0]["data"] == {"sessionId": "s", "latitude": "1"}


@pytest.mark.asyncio
async def test_form_transport_raises_on_http_error_status() -> None:
    http = _FakeHttpSession(response=_FakeResponse(503, "unavailable"))
    transport = FormTransport("https://charts.example.test", http)  # type: ignore[arg-type]

    with pytest.raises(BridgeTransportError) as excinfo:
        await transport.post_form("/api/v3/location", {})

    assert excinfo.value.status_code == 503
    assert excinfo.value.endpoint == "/api/v3/location"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()],
)
async def test_form_transport_wraps_network_errors(error: BaseException) -> None:
    http = _FakeHttpSession(error=error)
    transport = FormTransport("https://charts.example.test", http)  # type: ignore[arg-type]

    with pytest.raises(BridgeTransportError) as excinfo:
        await transport.post_form("/api/v3/location", {})

    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_network_error_does_not_escape_report() -> None:
    http = _FakeHttpSession(error=aiohttp.ClientConnectionError("refused"))
    reporter = Reporter(FormTransport("https://charts.example.test", http))  # type: ignore[arg-type]

    await reporter.report(SESSION, CanonicalSample(latitude=1.0, longitude=2.0, heading=3.0, altitude=4.0))

    assert len(http.requests) == 1
