"""Persisted accessory record model.

Records are the host's durable representation of a discovered device.  They
are serialized with camelCase keys so they round-trip through the host's
accessory cache file unchanged.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _RecordModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        validate_assignment=True,
    )


class DeviceContext(_RecordModel):
    """Identity data captured when the device was first discovered."""

    address: str = ""
    """Sanitized radio address."""
    model: str = ""
    """Sanitized model name."""
    identity_key: str = ""
    """Normalized identity key the record was created for."""


class AccessoryContext(_RecordModel):
    device: DeviceContext = Field(default_factory=DeviceContext)
    battery_threshold: float = 25
    humidity_offset: float = 0


class AccessoryRecord(_RecordModel):
    """A persisted device record, restored by the host across restarts."""

    uuid: str
    """Host identity generated from the identity key."""
    display_name: str
    context: AccessoryContext = Field(default_factory=AccessoryContext)
