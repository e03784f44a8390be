from __future__ import annotations

import pytest
from pydantic import ValidationError

from pygovee.events import RadioEvent, RadioEventKind
from pygovee.models.accessory import AccessoryContext, AccessoryRecord, DeviceContext
from pygovee.models.reading import GoveeReading


def test_reading_maps_wire_keys() -> None:
    reading = GoveeReading.model_validate(
        {
            "uuid": "ABC_123",
            "model": "GVH5075_1A2B",
            "address": " A4:C1:38:12:34:56 ",
            "tempInC": 21.5,
            "humidity": 48.2,
            "battery": 87,
            "rssi": -71,
        }
    )

    assert reading.identity_hint == "ABC_123"
    assert reading.model_hint == "GVH5075_1A2B"
    assert reading.address == "A4:C1:38:12:34:56"
    assert reading.temp_in_c == 21.5
    assert reading.rssi == -71
    assert reading.raw["tempInC"] == 21.5


def test_sentinel_hints_are_treated_as_missing() -> None:
    reading = GoveeReading.model_validate({"address": "A4:C1:38:12:34:56", "uuid": "", "model": "--"})
    assert reading.identity_hint is None
    assert reading.model_hint is None


def test_whitespace_only_hint_is_missing() -> None:
    reading = GoveeReading.model_validate({"address": "A4:C1:38:12:34:56", "uuid": "   "})
    assert reading.identity_hint is None


def test_address_is_required() -> None:
    with pytest.raises(ValidationError):
        GoveeReading.model_validate({"uuid": "ABC"})
    with pytest.raises(ValidationError):
        GoveeReading.model_validate({"uuid": "ABC", "address": "  "})


def test_payload_keeps_undeclared_fields() -> None:
    reading = GoveeReading.model_validate(
        {"address": "A4:C1:38:12:34:56", "model": "H5179", "tempInC": 20.0, "tempInF": 68.0, "sensorError": False}
    )

    assert reading.payload == {"temp_in_c": 20.0, "temp_in_f": 68.0, "sensorError": False}


def test_record_serializes_with_camel_case_keys() -> None:
    record = AccessoryRecord(
        uuid="0b2f",
        display_name="GVH50751A2B",
        context=AccessoryContext(
            device=DeviceContext(address="A4:C1:38:12:34:56", model="GVH50751A2B", identity_key="GVH50751A2B"),
            battery_threshold=20,
            humidity_offset=-1.5,
        ),
    )

    dumped = record.model_dump(by_alias=True)
    assert dumped["displayName"] == "GVH50751A2B"
    assert dumped["context"]["batteryThreshold"] == 20
    assert dumped["context"]["device"]["identityKey"] == "GVH50751A2B"
    assert AccessoryRecord.model_validate(dumped) == record


def test_record_context_is_mutable_and_validated() -> None:
    record = AccessoryRecord(uuid="0b2f", display_name="H5179")
    record.context.battery_threshold = 30
    assert record.context.battery_threshold == 30
    with pytest.raises(ValidationError):
        record.context.humidity_offset = "not a number"  # type: ignore[assignment]


def test_reading_event_requires_reading() -> None:
    with pytest.raises(ValidationError):
        RadioEvent(kind=RadioEventKind.READING)
    with pytest.raises(ValidationError):
        RadioEvent(
            kind=RadioEventKind.SCAN_STOPPED,
            reading=GoveeReading(address="A4:C1:38:12:34:56"),
        )


def test_event_constructors() -> None:
    reading = GoveeReading(address="A4:C1:38:12:34:56", model_hint="H5179")
    assert RadioEvent.reading_received(reading).reading is reading
    assert RadioEvent.scan_started().kind == RadioEventKind.SCAN_STARTED
    assert RadioEvent.scan_stopped().kind == RadioEventKind.SCAN_STOPPED
