"""Registry of accessory records restored by the host."""

from __future__ import annotations

from collections.abc import Iterator

from pygovee.models.accessory import AccessoryRecord


class AccessoryRegistry:
    """Records known to the host, indexed by host identity.

    The host restores previously persisted records into the registry before
    signalling readiness; newly created records are added as they are
    registered.
    """

    def __init__(self) -> None:
        self._records: dict[str, AccessoryRecord] = {}

    def add(self, record: AccessoryRecord) -> None:
        self._records[record.uuid] = record

    def find(self, uuid: str) -> AccessoryRecord | None:
        return self._records.get(uuid)

    def __contains__(self, uuid: object) -> bool:
        return uuid in self._records

    def __iter__(self) -> Iterator[AccessoryRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)
