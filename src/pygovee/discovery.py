"""Discovery cache routing readings to live device handlers."""

from __future__ import annotations

import logging
from enum import StrEnum

from pygovee.config import GoveeConfig
from pygovee.exceptions import GoveeRegistryError
from pygovee.handler import DeviceHandler, GoveeDeviceHandler, HandlerFactory
from pygovee.host import HostBridge
from pygovee.identity import sanitize
from pygovee.models.accessory import AccessoryContext, AccessoryRecord, DeviceContext
from pygovee.models.reading import GoveeReading
from pygovee.registry import AccessoryRegistry

_logger = logging.getLogger(__name__)


class RoutingOutcome(StrEnum):
    UPDATED = "updated"
    RESTORED = "restored"
    CREATED = "created"


class DiscoveryCache:
    """Identity key -> live device handler, for the lifetime of the process.

    A key is bound to exactly one handler on its first reading.  Records are
    registered with the host only when neither the cache nor the registry
    knows the device, so a device is never registered twice.
    """

    def __init__(
        self,
        config: GoveeConfig,
        host: HostBridge,
        registry: AccessoryRegistry,
        *,
        handler_factory: HandlerFactory = GoveeDeviceHandler,
    ) -> None:
        self._config = config
        self._host = host
        self._registry = registry
        self._handler_factory = handler_factory
        self._handlers: dict[str, DeviceHandler] = {}

    def __contains__(self, identity_key: object) -> bool:
        return identity_key in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    def get(self, identity_key: str) -> DeviceHandler | None:
        return self._handlers.get(identity_key)

    def handlers(self) -> dict[str, DeviceHandler]:
        return dict(self._handlers)

    def route(self, identity_key: str, reading: GoveeReading) -> RoutingOutcome:
        """Deliver *reading* to the handler for *identity_key*, binding one if needed.

        Raises
        ------
        GoveeRegistryError
            When the host fails to update or register the record.  The cache
            is left unchanged so the next reading retries.
        """
        handler = self._handlers.get(identity_key)
        if handler is not None:
            handler.update_reading(reading)
            return RoutingOutcome.UPDATED

        uuid = self._host.generate_identity(identity_key)
        existing = self._registry.find(uuid)
        if existing is not None:
            self._restore(identity_key, existing, reading)
            return RoutingOutcome.RESTORED

        self._create(identity_key, uuid, reading)
        return RoutingOutcome.CREATED

    def _restore(self, identity_key: str, record: AccessoryRecord, reading: GoveeReading) -> None:
        _logger.info("Restoring existing accessory from cache: %s", record.display_name)
        record = record.model_copy(deep=True)
        record.context.battery_threshold = self._config.battery_threshold
        record.context.humidity_offset = self._config.humidity_offset
        try:
            self._host.update_accessories([record])
        except GoveeRegistryError:
            raise
        except Exception as exc:
            raise GoveeRegistryError(
                f"Failed to update accessory {record.display_name!r}: {exc}",
                uuid=record.uuid,
            ) from exc

        self._registry.add(record)
        self._handlers[identity_key] = self._handler_factory(record, reading)

    def _create(self, identity_key: str, uuid: str, reading: GoveeReading) -> None:
        model = sanitize(reading.model_hint)
        display_name = model or identity_key
        _logger.info("Adding new accessory: %s", display_name)

        record = AccessoryRecord(
            uuid=uuid,
            display_name=display_name,
            context=AccessoryContext(
                device=DeviceContext(
                    address=sanitize(reading.address),
                    model=model,
                    identity_key=identity_key,
                ),
                battery_threshold=self._config.battery_threshold,
                humidity_offset=self._config.humidity_offset,
            ),
        )
        handler = self._handler_factory(record, reading)
        try:
            self._host.register_accessories([record])
        except GoveeRegistryError:
            raise
        except Exception as exc:
            raise GoveeRegistryError(
                f"Failed to register accessory {display_name!r}: {exc}",
                uuid=uuid,
            ) from exc

        self._registry.add(record)
        self._handlers[identity_key] = handler
