"""Govee sensor platform.

One :class:`GoveePlatform` exists per process.  The host restores persisted
records through :meth:`GoveePlatform.configure_accessory`, then signals
readiness with :meth:`GoveePlatform.did_finish_launching`; from then on the
platform scans, resolves readings to device identities and routes them to
per-device handlers until :meth:`GoveePlatform.shutdown`.
"""

from __future__ import annotations

import logging
from typing import Any

from pygovee._redact import redact_for_log
from pygovee.config import GoveeConfig
from pygovee.discovery import DiscoveryCache, RoutingOutcome
from pygovee.events import RadioEvent, RadioEventKind
from pygovee.exceptions import UnidentifiableReadingError
from pygovee.handler import GoveeDeviceHandler, HandlerFactory
from pygovee.host import HostBridge
from pygovee.identity import is_ignored, resolve_identity
from pygovee.models.accessory import AccessoryRecord
from pygovee.models.reading import GoveeReading
from pygovee.radio import RadioScanner
from pygovee.registry import AccessoryRegistry
from pygovee.scheduler import ScanScheduler, TimerService

_logger = logging.getLogger(__name__)


class GoveePlatform:
    """Discovers Govee sensors and keeps one handler per physical device.

    Usage::

        platform = GoveePlatform(config, host, radio)
        for record in host.load():
            platform.configure_accessory(record)
        async with platform:
            await stop_event.wait()
    """

    def __init__(
        self,
        config: GoveeConfig,
        host: HostBridge,
        radio: RadioScanner,
        *,
        handler_factory: HandlerFactory = GoveeDeviceHandler,
        timers: TimerService | None = None,
    ) -> None:
        self._config = config
        self._host = host
        self._radio = radio
        self._launched = False
        self.registry = AccessoryRegistry()
        self.cache = DiscoveryCache(config, host, self.registry, handler_factory=handler_factory)
        self.scheduler = ScanScheduler(
            radio,
            on_reading=self._on_radio_reading,
            on_scan_started=self._on_radio_scan_started,
            on_scan_stopped=self._on_radio_scan_stopped,
            scan_duration_ms=config.scan_duration_ms,
            cooldown_duration_ms=config.cooldown_duration_ms,
            timers=timers,
        )
        _logger.info("Finished initializing platform: %s", config.name)

    @property
    def config(self) -> GoveeConfig:
        return self._config

    # ------------------------------------------------------------------
    # Host lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GoveePlatform:
        self.did_finish_launching()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.shutdown()

    def configure_accessory(self, record: AccessoryRecord) -> None:
        """Accept a record the host restored from its persistent cache."""
        _logger.info("Loading accessory from cache: %s", record.display_name)
        self.registry.add(record)

    def did_finish_launching(self) -> None:
        """Host readiness: restored records are in place, start discovery."""
        if self._launched:
            _logger.debug("Platform already launched")
            return
        self._launched = True
        _logger.debug("Start discovery")
        self.scheduler.mark_running()
        if self._config.debug:
            self._radio.set_debug(True)
        self.scheduler.start()

    def shutdown(self) -> None:
        self.scheduler.shutdown()

    # ------------------------------------------------------------------
    # Radio events
    # ------------------------------------------------------------------

    def dispatch(self, event: RadioEvent) -> RoutingOutcome | None:
        """Apply a radio event.  Returns the routing outcome for readings."""
        if event.kind == RadioEventKind.READING:
            assert event.reading is not None  # noqa: S101
            return self.handle_reading(event.reading)
        if event.kind == RadioEventKind.SCAN_STARTED:
            self.scheduler.handle_scan_started()
        elif event.kind == RadioEventKind.SCAN_STOPPED:
            self.scheduler.handle_scan_stopped()
        return None

    def handle_reading(self, reading: GoveeReading) -> RoutingOutcome | None:
        """Resolve, filter and route one reading.  ``None`` means it was dropped."""
        _logger.debug("Govee reading %s", redact_for_log(reading.raw or reading.model_dump()))

        try:
            identity_key = resolve_identity(reading)
        except UnidentifiableReadingError:
            _logger.error(
                "device missing unique identifier. Govee reading: %s",
                redact_for_log(reading.raw or reading.model_dump()),
            )
            return None

        if is_ignored(reading, identity_key, self._config.ignore_device_names):
            _logger.debug("Ignoring device %s", identity_key)
            return None

        return self.cache.route(identity_key, reading)

    def _on_radio_reading(self, reading: GoveeReading) -> None:
        self.dispatch(RadioEvent.reading_received(reading))

    def _on_radio_scan_started(self) -> None:
        self.dispatch(RadioEvent.scan_started())

    def _on_radio_scan_stopped(self) -> None:
        self.dispatch(RadioEvent.scan_stopped())
