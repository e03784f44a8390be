"""Device identity resolution.

Readings are mapped onto a stable identity key so that the same physical
sensor is tracked as one device across scan cycles.  Priority order:

1. ``identity_hint`` (hardware id supplied by the radio layer)
2. ``model_hint`` (model string, which for these sensors embeds the
   device's address suffix)

Both are normalized so trivial formatting differences (surrounding
whitespace, underscores, case) never create a second identity.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from pygovee.exceptions import UnidentifiableReadingError
from pygovee.models.reading import GoveeReading

# Namespace for host identities derived from identity keys.
_IDENTITY_NAMESPACE = uuid.UUID("6c1f3f0e-9d1a-5b7e-8a43-3c2f8b1d4e90")


def sanitize(value: str | None) -> str:
    """Trim and strip underscores from a wire string.  ``None`` becomes ``""``."""
    if value is None:
        return ""
    return value.strip().replace("_", "")


def normalize_identity(value: str) -> str:
    """Normalize a raw identity hint into an identity key.

    Idempotent: ``normalize_identity(normalize_identity(x)) == normalize_identity(x)``.
    """
    return sanitize(value).upper()


def resolve_identity(reading: GoveeReading) -> str:
    """Return the identity key for *reading*.

    Raises
    ------
    UnidentifiableReadingError
        When neither hint yields a non-empty key.
    """
    for hint in (reading.identity_hint, reading.model_hint):
        if not hint:
            continue
        key = normalize_identity(hint)
        if key:
            return key
    raise UnidentifiableReadingError(
        "device missing unique identifier",
        reading=reading,
    )


def is_ignored(reading: GoveeReading, identity_key: str, ignored_names: Iterable[str]) -> bool:
    """Whether the reading belongs to a device the user asked to ignore.

    A configured name matches when its normalized form equals the identity
    key or the normalized model name.
    """
    candidates = {identity_key}
    if reading.model_hint:
        candidates.add(normalize_identity(reading.model_hint))
    for name in ignored_names:
        normalized = normalize_identity(name)
        if normalized and normalized in candidates:
            return True
    return False


def generate_identity(seed: str) -> str:
    """Deterministic host identity for *seed* (UUIDv5)."""
    return str(uuid.uuid5(_IDENTITY_NAMESPACE, seed))
