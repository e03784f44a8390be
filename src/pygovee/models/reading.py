"""Sensor reading model."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from pygovee.models._base import GoveeBaseModel


class GoveeReading(GoveeBaseModel):
    """A parsed advertisement from one broadcast-only sensor.

    Only ``address`` is guaranteed.  ``identity_hint`` and ``model_hint``
    are best-effort and either may be missing; a reading with neither
    cannot be identified.  Payload fields the radio layer adds beyond the
    ones declared here are kept as extras.
    """

    address: str
    """Radio address.  Not stable across power cycles for every device class."""
    identity_hint: str | None = Field(default=None, alias="uuid")
    """Stable hardware identifier supplied by the radio layer."""
    model_hint: str | None = Field(default=None, alias="model")
    """Human-readable model string (e.g. ``"GVH5075_1A2B"``)."""
    temp_in_c: float | None = None
    temp_in_f: float | None = None
    humidity: float | None = None
    battery: float | None = None
    rssi: int | None = None

    @field_validator("address")
    @classmethod
    def _strip_address(cls, value: str) -> str:
        address = value.strip()
        if not address:
            raise ValueError("address must be non-empty")
        return address

    @property
    def payload(self) -> dict[str, Any]:
        """Sensor fields without identity data, including undeclared extras."""
        return self.model_dump(exclude={"raw", "address", "identity_hint", "model_hint"}, exclude_none=True)
