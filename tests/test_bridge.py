from __future__ import annotations

import json
from collections.abc import AsyncIterator, Mapping
from pathlib import Path

import pytest

from ndpbridge import __main__ as cli
from ndpbridge.bridge import TelemetryBridge
from ndpbridge.config import BridgeConfig
from ndpbridge.exceptions import (
    BackendUnavailableError,
    BridgeTransportError,
    ConfigMissingError,
    NoActiveSessionError,
)
from ndpbridge.models.sample import BackendKind, PollSample, PushSample, RawSample
from ndpbridge.reporter import Reporter
from ndpbridge.selector import BackendSelector


class _ScriptedSource:
    def __init__(self, kind: BackendKind, samples: list[RawSample]) -> None:
        self.kind = kind
        self._samples = samples
        self.closed = False

    async def samples(self) -> AsyncIterator[RawSample]:
        for sample in self._samples:
            yield sample

    def close(self) -> None:
        self.closed = True


class _RecordingTransport:
    def __init__(self, fail_first: bool = False) -> None:
        self.forms: list[dict[str, str]] = []
        self._fail_first = fail_first

    async def post_form(self, endpoint: str, form: Mapping[str, str]) -> None:
        self.forms.append(dict(form))
        if self._fail_first and len(self.forms) == 1:
            raise BridgeTransportError("connection reset", endpoint=endpoint)


class _CountingOpener:
    def __init__(self, source: _ScriptedSource) -> None:
        self._source = source
        self.calls = 0

    async def __call__(self) -> _ScriptedSource:
        self.calls += 1
        return self._source


async def _failing_opener() -> _ScriptedSource:
    raise BackendUnavailableError("SimConnect not running", backend="simconnect")


def _settings(tmp_path: Path, session_id: str) -> Path:
    path = tmp_path / "ndp-settings.json"
    path.write_text(json.dumps({"sessionId": session_id}), encoding="utf-8")
    return path


def _bridge(config: BridgeConfig, selector: BackendSelector, transport: _RecordingTransport) -> TelemetryBridge:
    bridge = TelemetryBridge(config, selector=selector)
    # Bypass the aiohttp session; run() only needs a reporter.
    bridge._reporter = Reporter(transport)  # type: ignore[attr-defined]
    return bridge


@pytest.mark.asyncio
async def test_bridge_reports_normalized_poll_samples(tmp_path: Path) -> None:
    source = _ScriptedSource(
        BackendKind.FSUIPC,
        [PollSample(latitude=0, longitude=2**62, heading=2147418112, altitude=256000)],
    )
    transport = _RecordingTransport()
    selector = BackendSelector(_failing_opener, _CountingOpener(source))
    bridge = _bridge(BridgeConfig(settings_path=_settings(tmp_path, "S1")), selector, transport)

    await bridge.run()

    assert bridge.source is source
    assert transport.forms == [
        {"sessionId": "S1", "latitude": "0", "longitude": "90", "heading": "180", "altitude": "3280.84"}
    ]


@pytest.mark.asyncio
async def test_bridge_keeps_reporting_after_failed_send(tmp_path: Path) -> None:
    source = _ScriptedSource(
        BackendKind.SIMCONNECT,
        [
            PushSample(latitude=1.0, longitude=2.0, heading=3.0, altitude=4.0),
            PushSample(latitude=5.0, longitude=6.0, heading=7.0, altitude=8.0),
        ],
    )
    poll = _CountingOpener(_ScriptedSource(BackendKind.FSUIPC, []))
    transport = _RecordingTransport(fail_first=True)
    bridge = _bridge(
        BridgeConfig(settings_path=_settings(tmp_path, "S2")),
        BackendSelector(_CountingOpener(source), poll),
        transport,
    )

    await bridge.run()

    assert [form["latitude"] for form in transport.forms] == ["1", "5"]
    assert poll.calls == 0


@pytest.mark.asyncio
async def test_missing_settings_prevents_backend_selection(tmp_path: Path) -> None:
    push = _CountingOpener(_ScriptedSource(BackendKind.SIMCONNECT, []))
    poll = _CountingOpener(_ScriptedSource(BackendKind.FSUIPC, []))
    bridge = _bridge(
        BridgeConfig(settings_path=tmp_path / "missing.json"),
        BackendSelector(push, poll),
        _RecordingTransport(),
    )

    with pytest.raises(ConfigMissingError):
        await bridge.run()

    assert push.calls == 0
    assert poll.calls == 0


@pytest.mark.asyncio
async def test_empty_session_prevents_backend_selection(tmp_path: Path) -> None:
    push = _CountingOpener(_ScriptedSource(BackendKind.SIMCONNECT, []))
    poll = _CountingOpener(_ScriptedSource(BackendKind.FSUIPC, []))
    bridge = _bridge(
        BridgeConfig(settings_path=_settings(tmp_path, "")),
        BackendSelector(push, poll),
        _RecordingTransport(),
    )

    with pytest.raises(NoActiveSessionError):
        await bridge.run()

    assert push.calls == 0
    assert poll.calls == 0


@pytest.mark.asyncio
async def test_bridge_closes_source_on_exit(tmp_path: Path) -> None:
    source = _ScriptedSource(BackendKind.SIMCONNECT, [])
    config = BridgeConfig(settings_path=_settings(tmp_path, "S3"))
    selector = BackendSelector(_CountingOpener(source), _CountingOpener(source))

    async with TelemetryBridge(config, selector=selector) as bridge:
        await bridge.run()

    assert source.closed


def test_cli_exits_after_fatal_session_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["--settings", str(tmp_path / "missing.json"), "--no-wait"])

    assert code == 1
    assert "Could not find NDP settings file!" in capsys.readouterr().err


def test_cli_exits_after_undecodable_settings(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    settings = tmp_path / "ndp-settings.json"
    settings.write_bytes(b"\xff{\"sessionId\": \"x\"}")

    code = cli.main(["--settings", str(settings), "--no-wait"])

    assert code == 1
    assert "No active NDP session!" in capsys.readouterr().err
