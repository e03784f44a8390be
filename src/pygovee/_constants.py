"""Internal constants shared across the library."""

PLATFORM_NAME = "Govee"

#: Milliseconds to wait before restarting a scan that stopped on its own.
#: Independent of configuration.
STALL_RECOVERY_DELAY_MS: int = 5000

# Wire values the radio layer uses for "not available".
SENTINELS: frozenset[str] = frozenset({"", "--"})
