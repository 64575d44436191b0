import collections.abc
import datetime
import logging
import typing

import trio

from .timers import RearmableTimer

logger = logging.getLogger(__name__)


class DynamicDebouncer:
    """Trailing debounce whose quiet period is supplied on every trigger.

    Each trigger() restarts the wait, so the callback runs once after activity has
    stopped for the interval passed to the most recent trigger.
    """

    def __init__(self, callback: collections.abc.Callable[[], None]):
        self.callback = callback
        self.timer = RearmableTimer(self._expired)
        self.interval: typing.Optional[datetime.timedelta] = None

    def attach(self, nursery: typing.Optional[trio.Nursery]):
        self.timer.attach(nursery)

    @property
    def pending(self):
        return self.timer.pending

    def trigger(self, interval: datetime.timedelta):
        self.interval = interval
        self.timer.rearm(interval)

    def cancel(self):
        self.timer.cancel()

    def _expired(self):
        logger.debug("Quiet for %r, dispatching", self.interval)
        self.callback()
