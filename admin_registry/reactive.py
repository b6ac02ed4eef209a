from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, TypeVar

from .events import RegistryEvent, Unsubscribe

if TYPE_CHECKING:
    from .registry import AdminRegistry

logger = logging.getLogger(__name__)

SnapshotT = TypeVar("SnapshotT")
Watcher = Callable[[Any], None]


class _Watch:
    __slots__ = ("watcher",)

    def __init__(self, watcher: Watcher):
        self.watcher = watcher


class LiveQuery(Generic[SnapshotT]):
    """Keeps the latest result of an accessor current.

    On every ``event`` the accessor is re-run and the fresh snapshot is
    pushed to each watcher, in the order they started watching.
    """

    def __init__(
        self,
        registry: "AdminRegistry",
        accessor: Callable[[], SnapshotT],
        event: RegistryEvent,
    ):
        self._accessor = accessor
        self._event = RegistryEvent(event)
        self._watchers: list[_Watch] = []
        self._snapshot: SnapshotT = accessor()
        self._unsubscribe: Optional[Unsubscribe] = registry.subscribe(
            self._event, self._on_event
        )

    @property
    def event(self) -> RegistryEvent:
        return self._event

    @property
    def snapshot(self) -> SnapshotT:
        return self._snapshot

    @property
    def closed(self) -> bool:
        return self._unsubscribe is None

    def watch(self, watcher: Watcher) -> Unsubscribe:
        entry = _Watch(watcher)
        self._watchers.append(entry)

        def _unwatch() -> None:
            for index, existing in enumerate(self._watchers):
                if existing is entry:
                    del self._watchers[index]
                    return

        return _unwatch

    def refresh(self) -> SnapshotT:
        self._snapshot = self._accessor()
        for entry in list(self._watchers):
            try:
                entry.watcher(self._snapshot)
            except Exception:
                logger.exception(
                    "Watcher %r failed while handling %s", entry.watcher, self._event.value
                )
        return self._snapshot

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._watchers.clear()

    def _on_event(self, _event: RegistryEvent) -> None:
        self.refresh()

    def __enter__(self) -> "LiveQuery[SnapshotT]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
