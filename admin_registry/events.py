"""Synchronous in-process notification channel for registry collections.

Events carry no payload. A subscriber that wants the new state re-queries
the registry; by the time it runs the mutation is already visible.
"""
from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable

from .schemas import ExtensionType

logger = logging.getLogger(__name__)

Subscriber = Callable[["RegistryEvent"], None]
Unsubscribe = Callable[[], None]


class RegistryEvent(str, Enum):
    NAV_UPDATED = "NAV_UPDATED"
    DASHBOARD_UPDATED = "DASHBOARD_UPDATED"
    VIEWS_UPDATED = "VIEWS_UPDATED"
    ACTIONS_UPDATED = "ACTIONS_UPDATED"


EVENT_FOR_TYPE: dict[ExtensionType, RegistryEvent] = {
    ExtensionType.NAV_ITEM: RegistryEvent.NAV_UPDATED,
    ExtensionType.DASHBOARD_CARD: RegistryEvent.DASHBOARD_UPDATED,
    ExtensionType.ADMIN_VIEW: RegistryEvent.VIEWS_UPDATED,
    ExtensionType.QUICK_ACTION: RegistryEvent.ACTIONS_UPDATED,
}


class _Subscription:
    __slots__ = ("event", "callback")

    def __init__(self, event: RegistryEvent, callback: Subscriber):
        self.event = event
        self.callback = callback


class EventBus:
    def __init__(self) -> None:
        self._subscriptions: dict[RegistryEvent, list[_Subscription]] = {
            event: [] for event in RegistryEvent
        }
        self._lock = threading.Lock()

    def subscribe(self, event: RegistryEvent, callback: Subscriber) -> Unsubscribe:
        """Register ``callback`` for ``event`` and return a detach function.

        The same callable may be subscribed more than once; each call gets
        its own handle. Calling the returned function twice is harmless.
        """
        event = RegistryEvent(event)
        subscription = _Subscription(event, callback)
        with self._lock:
            self._subscriptions[event].append(subscription)

        def _unsubscribe() -> None:
            with self._lock:
                entries = self._subscriptions[event]
                for index, entry in enumerate(entries):
                    if entry is subscription:
                        del entries[index]
                        return

        return _unsubscribe

    def publish(self, event: RegistryEvent) -> None:
        event = RegistryEvent(event)
        with self._lock:
            subscriptions = list(self._subscriptions[event])

        for subscription in subscriptions:
            try:
                subscription.callback(event)
            except Exception:
                logger.exception(
                    "Subscriber %r failed while handling %s",
                    subscription.callback,
                    event.value,
                )

    def subscriber_count(self, event: RegistryEvent) -> int:
        with self._lock:
            return len(self._subscriptions[RegistryEvent(event)])

    def clear(self) -> None:
        with self._lock:
            for entries in self._subscriptions.values():
                entries.clear()
