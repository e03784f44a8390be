"""Pytest configuration and fakes for the radio and host collaborators."""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from pygovee.identity import generate_identity
from pygovee.models.accessory import AccessoryRecord
from pygovee.models.reading import GoveeReading


class FakeClock:
    """Virtual-time timer service.  Timers only fire inside :meth:`advance`."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), callback))

    @property
    def scheduled(self) -> list[float]:
        return sorted(when for when, _, _ in self._queue)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, callback = heapq.heappop(self._queue)
            self.now = when
            callback()
        self.now = target


class FakeRadio:
    """Radio collaborator recording calls against a :class:`FakeClock`."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.start_times: list[float] = []
        self.stop_requests: list[float] = []
        self.start_registrations = 0
        self.stop_registrations = 0
        self.debug: bool | None = None
        self.stop_error: Exception | None = None
        self.notify_on_stop = True
        self._on_reading: Callable[[GoveeReading], None] | None = None
        self._on_start: Callable[[], None] | None = None
        self._on_stop: Callable[[], None] | None = None

    def start_scan(self, on_reading: Callable[[GoveeReading], None]) -> None:
        self._on_reading = on_reading
        self.start_times.append(self.clock.now)

    async def stop_scan(self) -> None:
        self.stop_requests.append(self.clock.now)
        if self.stop_error is not None:
            raise self.stop_error
        if self.notify_on_stop:
            self.notify_stopped()

    def on_scan_start(self, callback: Callable[[], None]) -> None:
        self.start_registrations += 1
        self._on_start = callback

    def on_scan_stop(self, callback: Callable[[], None]) -> None:
        self.stop_registrations += 1
        self._on_stop = callback

    def set_debug(self, enabled: bool) -> None:
        self.debug = enabled

    def emit(self, reading: GoveeReading) -> None:
        assert self._on_reading is not None
        self._on_reading(reading)

    def notify_started(self) -> None:
        assert self._on_start is not None
        self._on_start()

    def notify_stopped(self) -> None:
        assert self._on_stop is not None
        self._on_stop()


class FakeHost:
    """In-memory host bridge recording registrations and updates."""

    def __init__(self) -> None:
        self.registered: list[AccessoryRecord] = []
        self.updated: list[AccessoryRecord] = []
        self.fail_with: Exception | None = None

    def generate_identity(self, seed: str) -> str:
        return generate_identity(seed)

    def register_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.registered.extend(records)

    def update_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.updated.extend(records)


class RecordingHandler:
    """Handler factory target counting binds and updates."""

    binds = 0

    def __init__(self, record: AccessoryRecord, reading: GoveeReading) -> None:
        type(self).binds += 1
        self.record = record
        self.readings = [reading]

    def update_reading(self, reading: GoveeReading) -> None:
        self.readings.append(reading)


def make_reading(**fields: Any) -> GoveeReading:
    fields.setdefault("address", "A4:C1:38:12:34:56")
    return GoveeReading.model_validate(fields)


async def settle() -> None:
    """Let tasks spawned by timer callbacks run to completion."""
    for _ in range(3):
        await asyncio.sleep(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def radio(clock: FakeClock) -> FakeRadio:
    return FakeRadio(clock)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def recording_handler() -> type[RecordingHandler]:
    RecordingHandler.binds = 0
    return RecordingHandler
