# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import abc
import collections.abc
from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterable

import trio

from .decoder import make_passthrough_events
from .types import BarcodeInput, RawKeyEvent, ScannerInput


class Section(abc.ABC):
    @abc.abstractmethod
    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Any]): ...


# expand literal strings into synthetic key presses, one per character
class ExpandText(Section):
    async def pump(self, source: trio.MemoryReceiveChannel[str | ScannerInput], sink: trio.MemorySendChannel[ScannerInput]):
        async with aclosing(source), aclosing(sink):
            async for item in source:
                if isinstance(item, str):
                    for event in make_passthrough_events(item):
                        await sink.send(event)
                else:
                    await sink.send(item)


# treat each literal string as an already-decoded barcode instead of as keystrokes
class TextAsBarcode(Section):
    async def pump(self, source: trio.MemoryReceiveChannel[str | ScannerInput], sink: trio.MemorySendChannel[ScannerInput]):
        async with aclosing(source), aclosing(sink):
            async for item in source:
                await sink.send(BarcodeInput(text=item) if isinstance(item, str) else item)


@asynccontextmanager
async def pump_all(first_source: AsyncIterable[Any], *sections: Section):
    async with trio.open_nursery() as nursery:
        section_input = first_source
        for section in sections:
            section_send_channel, section_receive_channel = trio.open_memory_channel(0)
            nursery.start_soon(section.pump, section_input, section_send_channel)
            section_input = section_receive_channel
        yield section_input
        nursery.cancel_scope.cancel()


async def iterate_key_events(events: collections.abc.Iterable[RawKeyEvent], interval: float = 0):
    "Deliver key events with a fixed gap between them, the way a scanner would type them."
    for event in events:
        await trio.sleep(interval)
        yield event
