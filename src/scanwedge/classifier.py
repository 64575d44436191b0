# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import datetime
import enum
import logging
import typing

import msgspec
import trio

from .timers import RearmableTimer
from .types import RawKeyEvent, ScanCancelled, ScanSignal, ScanStarted

logger = logging.getLogger(__name__)

# fewer keystrokes than this could just be a fast typist
MIN_KEYSTROKES_TO_CONSIDER_SCANNING = 10
# any gap between keystrokes longer than this means a human is typing.
# The gate only sees such a gap when the buffer time is longer than it; with the
# 150ms default a longer pause dispatches the keys typed so far as their own buffer.
MAX_KEYSTROKE_THRESHOLD = datetime.timedelta(milliseconds=200)
ABORT_BUFFER_TIME = datetime.timedelta(seconds=2)


class ScanState(enum.Enum):
    IDLE = enum.auto()
    ACCUMULATING = enum.auto()
    READING = enum.auto()


class ClassifierState(msgspec.Struct):
    buffer: list[RawKeyEvent] = msgspec.field(default_factory=list)
    # seconds between each key and the one before it; the first key of a buffer has no gap
    key_times: list[float] = msgspec.field(default_factory=list)
    last_key_time: typing.Optional[float] = None
    reading: bool = False
    # set when the abort timer fires; the next key starts a fresh buffer
    stale: bool = False


class TakenBuffer(msgspec.Struct, frozen=True):
    buffer: list[RawKeyEvent]
    max_key_time: typing.Optional[float]
    was_reading: bool


class ScanClassifier:
    """Decides from keystroke timing whether the keyboard input is coming from a scanner.

    Once enough keys have arrived quickly enough, ScanStarted is published (once per scan).
    If the keyboard then goes quiet for ABORT_BUFFER_TIME without the buffer being taken,
    ScanCancelled is published.
    """

    min_keystrokes = MIN_KEYSTROKES_TO_CONSIDER_SCANNING
    max_keystroke_threshold = MAX_KEYSTROKE_THRESHOLD
    abort_buffer_time = ABORT_BUFFER_TIME

    def __init__(
        self,
        publish: collections.abc.Callable[[ScanSignal], None],
        clock: collections.abc.Callable[[], float] = trio.current_time,
    ):
        self.publish = publish
        self.clock = clock
        self._state = ClassifierState()
        self.abort_timer = RearmableTimer(self._abort)

    def attach(self, nursery: typing.Optional[trio.Nursery]):
        self.abort_timer.attach(nursery)

    @property
    def state(self) -> ScanState:
        if self._state.reading:
            return ScanState.READING
        if self._state.buffer and not self._state.stale:
            return ScanState.ACCUMULATING
        return ScanState.IDLE

    @property
    def buffer_length(self):
        return len(self._state.buffer)

    def max_key_time(self) -> typing.Optional[float]:
        if not self._state.key_times:
            return None
        return max(self._state.key_times)

    def on_key(self, event: RawKeyEvent) -> bool:
        "Returns True if this key is the one that started a scan."
        now = self.clock()
        if self._state.stale:
            logger.debug("Discarding %d stale keys", len(self._state.buffer))
            self._state = ClassifierState()
        if self._state.buffer and self._state.last_key_time is not None:
            self._state.key_times.append(now - self._state.last_key_time)
        self._state.last_key_time = now
        self._state.buffer.append(event)

        started = False
        if len(self._state.buffer) > self.min_keystrokes and self.max_key_time() < self.max_keystroke_threshold.total_seconds():
            if not self._state.reading:
                started = True
                self._state.reading = True
                logger.debug("Scan started after %d keys", len(self._state.buffer))
                self.publish(ScanStarted(buffer=tuple(self._state.buffer)))

        self.abort_timer.rearm(self.abort_buffer_time)
        return started

    def take_buffer(self) -> TakenBuffer:
        "Hand over the buffer and return to idle."
        taken = TakenBuffer(buffer=self._state.buffer, max_key_time=self.max_key_time(), was_reading=self._state.reading)
        self.clear()
        return taken

    def clear(self):
        self.abort_timer.cancel()
        self._state = ClassifierState()

    def _abort(self):
        if self._state.reading:
            logger.debug("Scan cancelled with %d keys buffered", len(self._state.buffer))
            self.publish(ScanCancelled(buffer=tuple(self._state.buffer)))
        self._state.reading = False
        self._state.stale = True
