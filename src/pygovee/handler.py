"""Per-device handlers.

A handler is bound exactly once to a persisted record and the reading that
caused it to be created; every later reading for the same identity key is
passed to :meth:`DeviceHandler.update_reading`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from pygovee.models.accessory import AccessoryRecord
from pygovee.models.reading import GoveeReading

_logger = logging.getLogger(__name__)


class DeviceHandler(Protocol):
    def update_reading(self, reading: GoveeReading) -> None: ...


HandlerFactory = Callable[[AccessoryRecord, GoveeReading], DeviceHandler]
"""Binds a handler to a record and its initial reading."""


class DeviceState(BaseModel):
    """Snapshot of the values derived from a device's latest reading."""

    model_config = ConfigDict(frozen=True)

    temperature_c: float | None = None
    humidity: float | None = None
    battery: float | None = None
    low_battery: bool = False
    rssi: int | None = None
    readings: int = 0
    updated_at: datetime | None = None


def _calibrated_humidity(value: float | None, offset: float) -> float | None:
    if value is None:
        return None
    return max(0.0, min(100.0, value + offset))


class GoveeDeviceHandler:
    """Default handler keeping the latest derived state for one sensor.

    Calibration settings are read from the record's context on every
    reading, so a refreshed record takes effect immediately.
    """

    def __init__(self, record: AccessoryRecord, reading: GoveeReading) -> None:
        self.record = record
        self._state = DeviceState()
        self.update_reading(reading)

    @property
    def state(self) -> DeviceState:
        return self._state

    def update_reading(self, reading: GoveeReading) -> None:
        context = self.record.context
        previous = self._state

        temperature = reading.temp_in_c
        if temperature is None and reading.temp_in_f is not None:
            temperature = round((reading.temp_in_f - 32) * 5 / 9, 2)

        battery = reading.battery if reading.battery is not None else previous.battery
        self._state = DeviceState(
            temperature_c=temperature if temperature is not None else previous.temperature_c,
            humidity=_calibrated_humidity(reading.humidity, context.humidity_offset)
            if reading.humidity is not None
            else previous.humidity,
            battery=battery,
            low_battery=battery is not None and battery <= context.battery_threshold,
            rssi=reading.rssi if reading.rssi is not None else previous.rssi,
            readings=previous.readings + 1,
            updated_at=datetime.now(UTC),
        )
        _logger.debug("Updated %s: %s", self.record.display_name, self._state)
