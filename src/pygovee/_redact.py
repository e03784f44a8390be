"""Helpers for safe debug logging.

Readings carry radio addresses which, for public-address devices, identify
a physical sensor in a specific home.  This module masks them before
readings are emitted to DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_ADDRESS_KEYS: frozenset[str] = frozenset({"address", "mac", "addr"})


def redact_address(address: str) -> str:
    """Remove the centre octets of a radio address, keeping the first and last."""
    value = address.strip()
    if len(value) <= 4:
        return "<redacted>"
    return f"{value[:2]}::{value[-2:]}"


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a copy of *value* with radio addresses masked, suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if key.lower() in _ADDRESS_KEYS and isinstance(v, str):
                redacted[key] = redact_address(v)
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
