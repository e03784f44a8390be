"""Interface of the radio scanning collaborator.

The radio library parses advertisements and reports scan lifecycle changes
through callbacks.  Scanning hardware and protocol parsing are provided by
that library; pygovee only drives it through this protocol.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from pygovee.models.reading import GoveeReading

ReadingCallback = Callable[[GoveeReading], None]
ScanCallback = Callable[[], None]


class RadioScanner(Protocol):
    def start_scan(self, on_reading: ReadingCallback) -> None:
        """Start (or restart) scanning, delivering readings to *on_reading*."""
        ...

    def stop_scan(self) -> Awaitable[Any]:
        """Request the scan to stop.  Completion is reported via ``on_scan_stop``."""
        ...

    def on_scan_start(self, callback: ScanCallback) -> None: ...

    def on_scan_stop(self, callback: ScanCallback) -> None: ...

    def set_debug(self, enabled: bool) -> None: ...
