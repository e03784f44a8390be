"""Platform configuration for pygovee."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pygovee._constants import PLATFORM_NAME
from pygovee.exceptions import GoveeConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_names(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclasses.dataclass(frozen=True)
class GoveeConfig:
    """Platform configuration.

    Parameters
    ----------
    name : str
        Display label of the platform.
    battery_threshold : float
        Battery percentage at or below which a device reports low battery.
        Propagated to every device record.
    debug : bool
        Enable verbose logging in the radio collaborator.
    humidity_offset : float
        Calibration offset added to every humidity reading.
    scan_duration_ms : int
        Length of an active scan window in milliseconds.  ``0`` scans
        indefinitely and never cools down.
    cooldown_duration_ms : int
        Pause between scan windows in milliseconds.  Ignored when
        ``scan_duration_ms`` is ``0``.
    ignore_device_names : tuple[str, ...]
        Device names (or identity keys) that are never added.
    """

    name: str = PLATFORM_NAME
    battery_threshold: float = 25
    debug: bool = False
    humidity_offset: float = 0
    scan_duration_ms: int = 0
    cooldown_duration_ms: int = 0
    ignore_device_names: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise GoveeConfigError("name must be a non-empty string")
        if self.scan_duration_ms < 0:
            raise GoveeConfigError(f"scan_duration_ms must be >= 0, got {self.scan_duration_ms}")
        if self.cooldown_duration_ms < 0:
            raise GoveeConfigError(f"cooldown_duration_ms must be >= 0, got {self.cooldown_duration_ms}")
        if self.battery_threshold < 0:
            raise GoveeConfigError(f"battery_threshold must be >= 0, got {self.battery_threshold}")
        if isinstance(self.ignore_device_names, str) or not all(
            isinstance(item, str) for item in self.ignore_device_names
        ):
            raise GoveeConfigError("ignore_device_names must be a sequence of strings")
        # Lists from JSON config are frozen into a tuple.
        object.__setattr__(self, "ignore_device_names", tuple(self.ignore_device_names))

    @property
    def duty_cycled(self) -> bool:
        """Whether scanning alternates between scan windows and cooldowns."""
        return self.scan_duration_ms > 0

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> GoveeConfig:
        """Create configuration from the host's platform config block.

        Keys follow the host's config schema (``batteryThreshold``,
        ``scanDuration``, ``IgnoreDeviceNames`` ...).  Unknown keys such as
        ``platform`` are ignored; missing keys take their defaults.
        """
        key_map = {
            "name": "name",
            "batteryThreshold": "battery_threshold",
            "debug": "debug",
            "humidityOffset": "humidity_offset",
            "scanDuration": "scan_duration_ms",
            "cooldownDuration": "cooldown_duration_ms",
            "IgnoreDeviceNames": "ignore_device_names",
        }
        kwargs: dict[str, Any] = {}
        for key, field_name in key_map.items():
            if key in raw and raw[key] is not None:
                kwargs[field_name] = raw[key]

        ignored = kwargs.get("ignore_device_names")
        if ignored is not None and not isinstance(ignored, (list, tuple)):
            raise GoveeConfigError("IgnoreDeviceNames must be an array of strings")

        try:
            for field_name in ("scan_duration_ms", "cooldown_duration_ms"):
                if field_name in kwargs:
                    kwargs[field_name] = int(kwargs[field_name])
            for field_name in ("battery_threshold", "humidity_offset"):
                if field_name in kwargs:
                    kwargs[field_name] = float(kwargs[field_name])
        except (TypeError, ValueError) as exc:
            raise GoveeConfigError(f"Invalid numeric config value: {exc}") from exc

        if "debug" in kwargs:
            kwargs["debug"] = bool(kwargs["debug"])
        return cls(**kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> GoveeConfig:
        """Create configuration from ``GOVEE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        name = env.get("GOVEE_NAME")
        if name is not None:
            config_kwargs["name"] = name

        try:
            threshold = env.get("GOVEE_BATTERY_THRESHOLD")
            if threshold is not None:
                config_kwargs["battery_threshold"] = float(threshold)
            offset = env.get("GOVEE_HUMIDITY_OFFSET")
            if offset is not None:
                config_kwargs["humidity_offset"] = float(offset)
            scan = env.get("GOVEE_SCAN_DURATION")
            if scan is not None:
                config_kwargs["scan_duration_ms"] = int(scan)
            cooldown = env.get("GOVEE_COOLDOWN_DURATION")
            if cooldown is not None:
                config_kwargs["cooldown_duration_ms"] = int(cooldown)
        except ValueError as exc:
            raise GoveeConfigError(f"Invalid numeric environment value: {exc}") from exc

        config_kwargs["debug"] = _env_bool(env.get("GOVEE_DEBUG"), False)

        ignored = env.get("GOVEE_IGNORE_DEVICE_NAMES")
        if ignored is not None:
            config_kwargs["ignore_device_names"] = _env_names(ignored)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
