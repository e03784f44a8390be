"""Scan cycle scheduler.

Drives the radio collaborator through a duty cycle::

    idle --start()--> scanning --scan window--> cooling_down --cooldown--> scanning ...

The radio reports every stop through the same callback, whether the
scheduler asked for it or the radio stack stalled on its own.  The
``cooldown_pending`` flag, set just before the scheduler requests a stop,
is what tells the two apart: a requested stop enters cooldown, any other
stop is treated as a stall and scanning is restarted after
:data:`~pygovee._constants.STALL_RECOVERY_DELAY_MS`.

Timers are never cancelled.  Each one carries the scheduler's run token and
checks it when it fires, so everything armed before shutdown becomes a
no-op.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from pygovee._constants import STALL_RECOVERY_DELAY_MS
from pygovee.radio import RadioScanner, ReadingCallback, ScanCallback

_logger = logging.getLogger(__name__)


class ScanState(StrEnum):
    IDLE = "idle"
    SCANNING = "scanning"
    COOLING_DOWN = "cooling_down"


class TimerKind(StrEnum):
    SCAN_WINDOW = "scan_window"
    COOLDOWN = "cooldown"
    STALL_RECOVERY = "stall_recovery"


class TimerService(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Any:
        """Run *callback* once after *delay* seconds."""
        ...


class AsyncioTimerService:
    """Timer service backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


@dataclass(slots=True)
class RunToken:
    """Shared flag telling timers whether the platform is still running."""

    running: bool = False


@dataclass(slots=True)
class ScheduledTimer:
    """A one-shot timer whose action only runs while its token is running."""

    kind: TimerKind
    delay: float
    token: RunToken
    action: Callable[[], None] = field(repr=False)
    fired: bool = False

    def fire(self) -> None:
        self.fired = True
        if not self.token.running:
            _logger.debug("Skipping %s timer, platform is not running", self.kind)
            return
        self.action()


class ScanScheduler:
    """Timer-driven scan/cooldown state machine with stall recovery.

    Parameters
    ----------
    radio : RadioScanner
        Radio collaborator to start and stop.
    on_reading : callable
        Registered with the radio for every reading.
    on_scan_started, on_scan_stopped : callable
        Registered with the radio for scan lifecycle notifications.  They
        are expected to end up in :meth:`handle_scan_started` and
        :meth:`handle_scan_stopped`.
    scan_duration_ms : int
        Active scan window.  ``0`` scans indefinitely.
    cooldown_duration_ms : int
        Pause between scan windows.
    timers : TimerService or None
        Defaults to the running asyncio loop.
    """

    def __init__(
        self,
        radio: RadioScanner,
        *,
        on_reading: ReadingCallback,
        on_scan_started: ScanCallback,
        on_scan_stopped: ScanCallback,
        scan_duration_ms: int = 0,
        cooldown_duration_ms: int = 0,
        timers: TimerService | None = None,
    ) -> None:
        self._radio = radio
        self._on_reading = on_reading
        self._on_scan_started = on_scan_started
        self._on_scan_stopped = on_scan_stopped
        self._scan_duration_ms = scan_duration_ms
        self._cooldown_duration_ms = cooldown_duration_ms
        self._timers = timers or AsyncioTimerService()
        self._token = RunToken()
        self._state = ScanState.IDLE
        self._cooldown_pending = False
        self._scan_cycles = 0
        self._pending: list[ScheduledTimer] = []
        self._stop_tasks: set[asyncio.Future[Any]] = set()

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def platform_running(self) -> bool:
        return self._token.running

    @property
    def cooldown_pending(self) -> bool:
        return self._cooldown_pending

    @property
    def scan_cycles(self) -> int:
        """Number of times :meth:`start` has begun a scan cycle."""
        return self._scan_cycles

    def pending_timers(self) -> list[ScheduledTimer]:
        """Armed timers that have not fired yet."""
        self._pending = [t for t in self._pending if not t.fired]
        return list(self._pending)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mark_running(self) -> None:
        self._token.running = True

    def shutdown(self) -> None:
        """Stop acting on timers and scan notifications."""
        self._token.running = False
        _logger.debug("Scan scheduler shut down in state %s", self._state)

    def start(self) -> None:
        """Start a scan cycle and register the radio callbacks."""
        self._radio.start_scan(self._on_reading)
        self._radio.on_scan_start(self._on_scan_started)
        self._radio.on_scan_stop(self._on_scan_stopped)
        self._state = ScanState.SCANNING
        self._scan_cycles += 1
        if self._scan_duration_ms > 0:
            _logger.debug("Stop scanning after %d ms", self._scan_duration_ms)
            self._arm(TimerKind.SCAN_WINDOW, self._scan_duration_ms, self._end_scan_window)

    # ------------------------------------------------------------------
    # Radio notifications
    # ------------------------------------------------------------------

    def handle_scan_started(self) -> None:
        _logger.info("Govee scan started")

    def handle_scan_stopped(self) -> None:
        _logger.info("Govee scan stopped")

        if not self._token.running:
            return

        if self._cooldown_pending:
            self._cooldown_pending = False
            self._state = ScanState.COOLING_DOWN
            _logger.debug("Cooldown started")
            self._arm(TimerKind.COOLDOWN, self._cooldown_duration_ms, self.start)
            return

        if self._state == ScanState.COOLING_DOWN:
            _logger.debug("Ignoring scan stop notification during cooldown")
            return

        if any(t.kind == TimerKind.STALL_RECOVERY for t in self.pending_timers()):
            _logger.debug("Stall recovery already scheduled")
            return

        cycle = self._scan_cycles
        self._arm(TimerKind.STALL_RECOVERY, STALL_RECOVERY_DELAY_MS, lambda: self._recover_stall(cycle))

    # ------------------------------------------------------------------
    # Timer actions
    # ------------------------------------------------------------------

    def _arm(self, kind: TimerKind, delay_ms: float, action: Callable[[], None]) -> ScheduledTimer:
        timer = ScheduledTimer(kind=kind, delay=delay_ms / 1000, token=self._token, action=action)
        self._pending = [t for t in self._pending if not t.fired]
        self._pending.append(timer)
        self._timers.call_later(timer.delay, timer.fire)
        return timer

    def _end_scan_window(self) -> None:
        self._cooldown_pending = True
        _logger.debug("Start cooldown for %d ms", self._cooldown_duration_ms)
        result = self._radio.stop_scan()
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._stop_tasks.add(task)
            task.add_done_callback(self._stop_done)

    def _stop_done(self, task: asyncio.Future[Any]) -> None:
        self._stop_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            return
        _logger.warning("Stop scan request failed", exc_info=exc)
        self._cooldown_pending = False
        # Scanning carries on; try again after another scan window.
        if self._token.running and self._state == ScanState.SCANNING:
            self._arm(TimerKind.SCAN_WINDOW, self._scan_duration_ms, self._end_scan_window)

    def _recover_stall(self, cycle: int) -> None:
        if self._state == ScanState.COOLING_DOWN or cycle != self._scan_cycles:
            # The duty cycle took over since the stall; the cooldown restarts scanning.
            _logger.debug("Skipping stall recovery, scan cycle moved on to %s", self._state)
            return

        _logger.warning("Govee discovery stopped while the platform is running")
        _logger.info("Restart discovery")
        # A stop requested while stalled never gets its notification.
        self._cooldown_pending = False
        # Callbacks registered by start() stay bound.
        self._radio.start_scan(self._on_reading)
        self._state = ScanState.SCANNING
        if self._scan_duration_ms > 0 and not any(t.kind == TimerKind.SCAN_WINDOW for t in self.pending_timers()):
            self._arm(TimerKind.SCAN_WINDOW, self._scan_duration_ms, self._end_scan_window)
