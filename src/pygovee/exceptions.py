"""Custom exception hierarchy for pygovee."""

from __future__ import annotations

from typing import Any


class GoveeError(Exception):
    """Base exception for all pygovee errors."""


class GoveeConfigError(GoveeError):
    """Invalid or missing configuration."""


class UnidentifiableReadingError(GoveeError):
    """A reading carries neither an identity hint nor a model hint.

    Such readings cannot be mapped onto a device and are dropped before
    they reach the discovery cache.
    """

    def __init__(self, message: str, *, reading: Any = None) -> None:
        self.reading = reading
        super().__init__(message)


class GoveeRegistryError(GoveeError):
    """The host persistence layer failed to register or update a record.

    Raised from the discovery cache when restoring or creating a device,
    and by the JSON accessory store when a uuid would be registered twice.
    """

    def __init__(self, message: str, *, uuid: str = "") -> None:
        self.uuid = uuid
        super().__init__(message)
