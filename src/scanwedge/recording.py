# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import pathlib
from contextlib import aclosing

import msgspec
import trio

from .keystreams import Section
from .types import RawKeyEvent

RecordedEvent = tuple[float, RawKeyEvent]


# records key events with their offset from the first one, passing them along unchanged
class Recorder(Section):
    def __init__(self):
        self.zero_time = None
        self.events: list[RecordedEvent] = []

    def save_events(self, path: pathlib.Path):
        path.write_bytes(msgspec.json.encode(self.events))

    async def pump(self, source: trio.MemoryReceiveChannel[RawKeyEvent], sink: trio.MemorySendChannel[RawKeyEvent]):
        async with aclosing(source), aclosing(sink):
            async for event in source:
                now = trio.current_time()
                if self.zero_time is None:
                    self.zero_time = now
                self.events.append((now - self.zero_time, event))
                await sink.send(event)


def load_events(path: pathlib.Path) -> list[RecordedEvent]:
    return msgspec.json.decode(path.read_bytes(), type=list[RecordedEvent])


async def replay_events(events: collections.abc.Sequence[RecordedEvent]):
    "Yield recorded events, sleeping so that each arrives at its recorded offset."
    zero_time = trio.current_time()
    for offset, event in events:
        await trio.sleep_until(zero_time + offset)
        yield event
