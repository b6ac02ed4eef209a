from __future__ import annotations

import itertools
import logging
import threading
from typing import Callable, Optional

from pydantic import BaseModel

from .errors import DuplicateKeyError
from .events import EVENT_FOR_TYPE, EventBus
from .schemas import ExtensionType, Registration, key_for

logger = logging.getLogger(__name__)


class RegistryStore:
    """Four typed collections of registrations, each kept in insertion order.

    Every successful mutation publishes the collection's event before the
    call returns. The lock is re-entrant so a subscriber may read the store
    from inside its callback.
    """

    def __init__(self, bus: EventBus):
        self._bus = bus
        self._collections: dict[ExtensionType, list[Registration]] = {
            extension_type: [] for extension_type in ExtensionType
        }
        self._sequence = itertools.count()
        self._lock = threading.RLock()

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def add(
        self, extension_type: ExtensionType, module_id: str, item: BaseModel
    ) -> Registration:
        extension_type = ExtensionType(extension_type)
        key = key_for(extension_type, item)
        with self._lock:
            existing = self._find(extension_type, key)
            if existing is not None:
                raise DuplicateKeyError(extension_type, key, owner=existing.module_id)
            registration = Registration(
                type=extension_type,
                module_id=module_id,
                item=item,
                sequence=next(self._sequence),
            )
            self._collections[extension_type].append(registration)
            logger.debug(
                "Registered %s %r for module %r",
                extension_type.value,
                key,
                module_id,
            )
            self._bus.publish(EVENT_FOR_TYPE[extension_type])
        return registration

    def remove(self, extension_type: ExtensionType, key: str) -> Optional[Registration]:
        extension_type = ExtensionType(extension_type)
        removed = self.remove_where(extension_type, lambda entry: entry.key == key)
        return removed[0] if removed else None

    def remove_where(
        self,
        extension_type: ExtensionType,
        predicate: Callable[[Registration], bool],
    ) -> list[Registration]:
        extension_type = ExtensionType(extension_type)
        with self._lock:
            kept: list[Registration] = []
            removed: list[Registration] = []
            for entry in self._collections[extension_type]:
                (removed if predicate(entry) else kept).append(entry)
            if not removed:
                return []
            self._collections[extension_type] = kept
            for entry in removed:
                logger.debug(
                    "Unregistered %s %r owned by module %r",
                    extension_type.value,
                    entry.key,
                    entry.module_id,
                )
            self._bus.publish(EVENT_FOR_TYPE[extension_type])
        return removed

    def get(self, extension_type: ExtensionType, key: str) -> Optional[Registration]:
        with self._lock:
            return self._find(ExtensionType(extension_type), key)

    def get_all(self, extension_type: ExtensionType) -> list[Registration]:
        with self._lock:
            return list(self._collections[ExtensionType(extension_type)])

    def count(self, extension_type: ExtensionType) -> int:
        with self._lock:
            return len(self._collections[ExtensionType(extension_type)])

    def clear(self) -> None:
        """Drop every registration without publishing; used on reset."""
        with self._lock:
            for entries in self._collections.values():
                entries.clear()

    def _find(self, extension_type: ExtensionType, key: str) -> Optional[Registration]:
        for entry in self._collections[extension_type]:
            if entry.key == key:
                return entry
        return None
