"""Normalized radio events.

Every notification the radio collaborator produces (a reading, a scan start,
a scan stop) is converted into a :class:`RadioEvent` before it reaches the
platform, so the state machine can be driven in tests without a radio.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pygovee.models.reading import GoveeReading


class RadioEventKind(StrEnum):
    READING = "reading"
    SCAN_STARTED = "scan_started"
    SCAN_STOPPED = "scan_stopped"


class RadioEvent(BaseModel):
    """A tagged notification from the radio collaborator."""

    model_config = ConfigDict(frozen=True)

    kind: RadioEventKind
    reading: GoveeReading | None = None
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @model_validator(mode="after")
    def _reading_matches_kind(self) -> RadioEvent:
        if self.kind == RadioEventKind.READING and self.reading is None:
            raise ValueError("reading events must carry a reading")
        if self.kind != RadioEventKind.READING and self.reading is not None:
            raise ValueError(f"{self.kind} events must not carry a reading")
        return self

    @classmethod
    def reading_received(cls, reading: GoveeReading) -> RadioEvent:
        return cls(kind=RadioEventKind.READING, reading=reading)

    @classmethod
    def scan_started(cls) -> RadioEvent:
        return cls(kind=RadioEventKind.SCAN_STARTED)

    @classmethod
    def scan_stopped(cls) -> RadioEvent:
        return cls(kind=RadioEventKind.SCAN_STOPPED)
