from __future__ import annotations

import logging

import pytest

from conftest import FakeClock, FakeHost, FakeRadio, RecordingHandler, make_reading, settle
from pygovee.config import GoveeConfig
from pygovee.discovery import RoutingOutcome
from pygovee.events import RadioEvent
from pygovee.handler import GoveeDeviceHandler
from pygovee.identity import generate_identity
from pygovee.models.accessory import AccessoryContext, AccessoryRecord
from pygovee.platform import GoveePlatform
from pygovee.scheduler import ScanState


def _platform(
    radio: FakeRadio,
    host: FakeHost,
    clock: FakeClock,
    config: GoveeConfig | None = None,
    **kwargs,
) -> GoveePlatform:
    return GoveePlatform(config or GoveeConfig(), host, radio, timers=clock, **kwargs)


def test_launch_starts_scanning(radio: FakeRadio, host: FakeHost, clock: FakeClock) -> None:
    platform = _platform(radio, host, clock)
    assert radio.start_times == []

    platform.did_finish_launching()

    assert radio.start_times == [0.0]
    assert platform.scheduler.state == ScanState.SCANNING
    assert platform.scheduler.platform_running is True
    assert radio.debug is None


def test_launch_is_idempotent(radio: FakeRadio, host: FakeHost, clock: FakeClock) -> None:
    platform = _platform(radio, host, clock)
    platform.did_finish_launching()
    platform.did_finish_launching()

    assert radio.start_times == [0.0]


def test_debug_config_enables_radio_debug(radio: FakeRadio, host: FakeHost, clock: FakeClock) -> None:
    platform = _platform(radio, host, clock, GoveeConfig(debug=True))
    platform.did_finish_launching()

    assert radio.debug is True


def test_readings_from_radio_reach_one_handler(
    radio: FakeRadio, host: FakeHost, clock: FakeClock, recording_handler: type[RecordingHandler]
) -> None:
    platform = _platform(radio, host, clock, handler_factory=recording_handler)
    platform.did_finish_launching()

    radio.emit(make_reading(uuid="ABC_123", humidity=50))
    radio.emit(make_reading(uuid="abc123", humidity=51))
    radio.emit(make_reading(model="H5179_9F00"))

    assert len(platform.cache) == 2
    assert recording_handler.binds == 2
    handler = platform.cache.get("ABC123")
    assert isinstance(handler, RecordingHandler)
    assert [r.humidity for r in handler.readings] == [50, 51]
    assert len(host.registered) == 2


def test_unidentifiable_reading_is_dropped(
    radio: FakeRadio, host: FakeHost, clock: FakeClock, caplog: pytest.LogCaptureFixture
) -> None:
    platform = _platform(radio, host, clock)
    platform.did_finish_launching()

    with caplog.at_level(logging.ERROR, logger="pygovee.platform"):
        outcome = platform.handle_reading(make_reading(uuid="", humidity=40))

    assert outcome is None
    assert len(platform.cache) == 0
    assert host.registered == []
    assert "missing unique identifier" in caplog.text
    # The address is masked in the log line.
    assert "A4:C1:38:12:34:56" not in caplog.text


def test_ignored_device_never_takes_a_cache_slot(radio: FakeRadio, host: FakeHost, clock: FakeClock) -> None:
    config = GoveeConfig(ignore_device_names=("gvh5075_1a2b",))
    platform = _platform(radio, host, clock, config)
    platform.did_finish_launching()

    outcome = platform.handle_reading(make_reading(model="GVH5075_1A2B"))

    assert outcome is None
    assert "GVH50751A2B" not in platform.cache
    assert host.registered == []
    assert platform.handle_reading(make_reading(model="GVH5075_FFFF")) == RoutingOutcome.CREATED


def test_restored_accessory_after_restart(radio: FakeRadio, host: FakeHost, clock: FakeClock) -> None:
    record = AccessoryRecord(
        uuid=generate_identity("GVH50751A2B"),
        display_name="GVH50751A2B",
        context=AccessoryContext(battery_threshold=25, humidity_offset=0),
    )
    platform = _platform(radio, host, clock, GoveeConfig(battery_threshold=40, humidity_offset=3))
    platform.configure_accessory(record)
    platform.did_finish_launching()

    outcome = platform.handle_reading(make_reading(model="GVH5075_1A2B", humidity=50, battery=35))

    assert outcome == RoutingOutcome.RESTORED
    assert host.registered == []
    assert host.updated == [platform.registry.find(record.uuid)]
    assert host.updated[0].context.battery_threshold == 40
    handler = platform.cache.get("GVH50751A2B")
    assert isinstance(handler, GoveeDeviceHandler)
    assert handler.state.humidity == 53
    assert handler.state.low_battery is True


def test_dispatch_routes_events(radio: FakeRadio, host: FakeHost, clock: FakeClock) -> None:
    platform = _platform(radio, host, clock)
    platform.did_finish_launching()

    outcome = platform.dispatch(RadioEvent.reading_received(make_reading(uuid="ABC")))
    assert outcome == RoutingOutcome.CREATED
    assert platform.dispatch(RadioEvent.scan_started()) is None

    platform.dispatch(RadioEvent.scan_stopped())
    clock.advance(5.0)
    assert radio.start_times == [0.0, 5.0]


def test_stop_event_before_launch_is_ignored(radio: FakeRadio, host: FakeHost, clock: FakeClock) -> None:
    platform = _platform(radio, host, clock)

    platform.dispatch(RadioEvent.scan_stopped())
    clock.advance(60.0)

    assert radio.start_times == []
    assert platform.scheduler.pending_timers() == []


@pytest.mark.asyncio
async def test_context_manager_launches_and_shuts_down(radio: FakeRadio, host: FakeHost, clock: FakeClock) -> None:
    platform = _platform(radio, host, clock, GoveeConfig(scan_duration_ms=1000, cooldown_duration_ms=500))

    async with platform:
        assert radio.start_times == [0.0]
        clock.advance(1.0)
        await settle()
        assert platform.scheduler.state == ScanState.COOLING_DOWN

    assert platform.scheduler.platform_running is False
    clock.advance(10.0)
    assert radio.start_times == [0.0]
