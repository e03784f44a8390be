"""pygovee - Async discovery and scan scheduling for Govee BLE sensors."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pygovee")
except PackageNotFoundError:
    __version__ = "0+local"
from pygovee.config import GoveeConfig
from pygovee.discovery import DiscoveryCache, RoutingOutcome
from pygovee.events import RadioEvent, RadioEventKind
from pygovee.exceptions import (
    GoveeConfigError,
    GoveeError,
    GoveeRegistryError,
    UnidentifiableReadingError,
)
from pygovee.handler import DeviceHandler, DeviceState, GoveeDeviceHandler
from pygovee.host import HostBridge, JsonAccessoryStore
from pygovee.identity import generate_identity, is_ignored, normalize_identity, resolve_identity, sanitize
from pygovee.models import AccessoryContext, AccessoryRecord, DeviceContext, GoveeReading
from pygovee.platform import GoveePlatform
from pygovee.radio import RadioScanner
from pygovee.registry import AccessoryRegistry
from pygovee.scheduler import AsyncioTimerService, ScanScheduler, ScanState, TimerKind, TimerService

__all__ = [
    "__version__",
    "AccessoryContext",
    "AccessoryRecord",
    "AccessoryRegistry",
    "AsyncioTimerService",
    "DeviceContext",
    "DeviceHandler",
    "DeviceState",
    "DiscoveryCache",
    "GoveeConfig",
    "GoveeConfigError",
    "GoveeDeviceHandler",
    "GoveeError",
    "GoveePlatform",
    "GoveeReading",
    "GoveeRegistryError",
    "HostBridge",
    "JsonAccessoryStore",
    "RadioEvent",
    "RadioEventKind",
    "RadioScanner",
    "RoutingOutcome",
    "ScanScheduler",
    "ScanState",
    "TimerKind",
    "TimerService",
    "UnidentifiableReadingError",
    "generate_identity",
    "is_ignored",
    "normalize_identity",
    "resolve_identity",
    "sanitize",
]
