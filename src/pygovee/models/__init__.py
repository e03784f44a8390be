"""Data models for radio readings and persisted accessories."""

from pygovee.models._base import GoveeBaseModel
from pygovee.models.accessory import AccessoryContext, AccessoryRecord, DeviceContext
from pygovee.models.reading import GoveeReading

__all__ = [
    "AccessoryContext",
    "AccessoryRecord",
    "DeviceContext",
    "GoveeBaseModel",
    "GoveeReading",
]
