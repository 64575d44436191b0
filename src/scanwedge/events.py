import collections.abc
import logging

from .types import ScanSignal

logger = logging.getLogger(__name__)

Subscriber = collections.abc.Callable[[ScanSignal], None]


class EventBus:
    """Synchronous fan-out of scanner signals to whoever is interested (UI, sound, inventory lookups)."""

    def __init__(self):
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> collections.abc.Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: ScanSignal):
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r failed handling %r", callback, event)
