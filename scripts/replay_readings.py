#!/usr/bin/env python3
"""Replay recorded Govee readings through a platform.

Each line of the input file is a JSON object in the radio library's reading
format (``uuid``, ``model``, ``address``, ``tempInC`` ...).  Lines of the form
``{"event": "scan_stopped"}`` or ``{"event": "scan_started"}`` replay scan
lifecycle notifications instead.

Devices are persisted to the accessory cache file, so replaying twice shows
``created`` on the first run and ``restored`` on the second.

Usage
-----
::

    python scripts/replay_readings.py readings.jsonl --cache accessories.json
    python scripts/replay_readings.py readings.jsonl --scan-duration 2000 --cooldown-duration 1000 --interval 0.5
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections import Counter
from collections.abc import Callable
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydantic import ValidationError  # noqa: E402

from pygovee import GoveeConfig, GoveePlatform, GoveeReading, JsonAccessoryStore, RadioEvent  # noqa: E402


class ReplayRadio:
    """Radio stand-in whose readings come from a file."""

    def __init__(self) -> None:
        self.scanning = False
        self._on_stop: Callable[[], None] | None = None

    def start_scan(self, on_reading: Callable[[GoveeReading], None]) -> None:
        self.scanning = True

    async def stop_scan(self) -> None:
        self.scanning = False
        if self._on_stop is not None:
            self._on_stop()

    def on_scan_start(self, callback: Callable[[], None]) -> None:
        pass

    def on_scan_stop(self, callback: Callable[[], None]) -> None:
        self._on_stop = callback

    def set_debug(self, enabled: bool) -> None:
        logging.getLogger("pygovee").setLevel(logging.DEBUG if enabled else logging.INFO)


def _parse_line(line: str) -> RadioEvent:
    payload: Any = json.loads(line)
    if not isinstance(payload, dict):
        raise ValueError("expected a JSON object")
    event = payload.get("event")
    if event == "scan_started":
        return RadioEvent.scan_started()
    if event == "scan_stopped":
        return RadioEvent.scan_stopped()
    return RadioEvent.reading_received(GoveeReading.model_validate(payload))


async def run(args: argparse.Namespace) -> int:
    config = GoveeConfig.from_env(
        scan_duration_ms=args.scan_duration,
        cooldown_duration_ms=args.cooldown_duration,
        ignore_device_names=tuple(args.ignore),
        debug=args.verbose,
    )
    store = JsonAccessoryStore(args.cache)
    radio = ReplayRadio()
    platform = GoveePlatform(config, store, radio)
    for record in store.load():
        platform.configure_accessory(record)

    outcomes: Counter[str] = Counter()
    async with platform:
        for lineno, line in enumerate(Path(args.readings).read_text(encoding="utf-8").splitlines(), start=1):
            if not line.strip():
                continue
            try:
                event = _parse_line(line)
            except (ValueError, ValidationError) as exc:
                print(f"line {lineno}: skipped ({exc.__class__.__name__})", file=sys.stderr)
                outcomes["invalid"] += 1
                continue
            if event.reading is not None and not radio.scanning:
                outcomes["missed"] += 1
                print(f"line {lineno}: missed (radio cooling down)")
            else:
                outcome = platform.dispatch(event)
                label = str(outcome) if outcome is not None else str(event.kind)
                if event.reading is not None and outcome is None:
                    label = "dropped"
                outcomes[label] += 1
                print(f"line {lineno}: {label} state={platform.scheduler.state}")
            if args.interval > 0:
                await asyncio.sleep(args.interval)

    print(json.dumps(dict(outcomes), sort_keys=True))
    print(f"{len(platform.cache)} device(s) live, {len(platform.registry)} persisted in {store.path}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay recorded Govee readings through a platform.")
    parser.add_argument("readings", help="JSON-lines file of readings")
    parser.add_argument("--cache", default="accessories.json", help="Accessory cache file (default: accessories.json)")
    parser.add_argument("--scan-duration", type=int, default=0, help="Scan window in ms (0 = indefinitely)")
    parser.add_argument("--cooldown-duration", type=int, default=0, help="Cooldown between scans in ms")
    parser.add_argument("--interval", type=float, default=0.0, help="Seconds to wait between lines")
    parser.add_argument("--ignore", action="append", default=[], help="Device name to ignore (repeatable)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
