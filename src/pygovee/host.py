"""Host application collaborators.

The host owns the accessory lifecycle: it restores persisted records into the
platform before signalling readiness, and persists records the platform
registers or updates.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from pygovee.exceptions import GoveeRegistryError
from pygovee.identity import generate_identity
from pygovee.models.accessory import AccessoryRecord

_logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(list[AccessoryRecord])


class HostBridge(Protocol):
    def generate_identity(self, seed: str) -> str:
        """Return an opaque, stable host identity for *seed*."""
        ...

    def register_accessories(self, records: Sequence[AccessoryRecord]) -> None: ...

    def update_accessories(self, records: Sequence[AccessoryRecord]) -> None: ...


class JsonAccessoryStore:
    """Host bridge persisting accessory records to a JSON file.

    The file holds a list of records with camelCase keys.  Every register or
    update writes the whole file.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._records: dict[str, AccessoryRecord] = {}

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[AccessoryRecord]:
        """Read persisted records.  A missing file yields an empty list."""
        if not self._path.exists():
            self._records = {}
            return []
        try:
            records = _RECORDS.validate_json(self._path.read_bytes())
        except (OSError, ValidationError) as exc:
            raise GoveeRegistryError(f"Failed to load accessory cache {self._path}: {exc}") from exc
        self._records = {record.uuid: record for record in records}
        _logger.debug("Loaded %d accessories from %s", len(records), self._path)
        return list(self._records.values())

    def generate_identity(self, seed: str) -> str:
        return generate_identity(seed)

    def register_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        for record in records:
            if record.uuid in self._records:
                raise GoveeRegistryError(
                    f"Accessory {record.display_name!r} is already registered",
                    uuid=record.uuid,
                )
        for record in records:
            self._records[record.uuid] = record
        self._save()

    def update_accessories(self, records: Sequence[AccessoryRecord]) -> None:
        for record in records:
            if record.uuid not in self._records:
                raise GoveeRegistryError(
                    f"Cannot update unregistered accessory {record.display_name!r}",
                    uuid=record.uuid,
                )
            self._records[record.uuid] = record
        self._save()

    def _save(self) -> None:
        payload = [record.model_dump(mode="json", by_alias=True) for record in self._records.values()]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise GoveeRegistryError(f"Failed to write accessory cache {self._path}: {exc}") from exc
