# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import datetime
import logging
import typing
from contextlib import aclosing

import trio
from trio_util import AsyncValue

from .classifier import MAX_KEYSTROKE_THRESHOLD, ScanClassifier, TakenBuffer
from .datamatrix import process_barcode
from .debounce import DynamicDebouncer
from .decoder import make_passthrough_events, process_key_buffer
from .events import EventBus
from .keycodes import KeyCode, is_function_key
from .keystreams import Section
from .settings import BarcodeConfig
from .types import (
    BarcodeInput,
    BarcodeReceived,
    DecodedBuffer,
    DisableInput,
    ParsedBarcode,
    RawKeyEvent,
    RestoreInput,
    ScanCancelled,
    ScannerInput,
)

logger = logging.getLogger(__name__)

# lower values will falsely detect scans, higher may fail on short barcodes
MIN_BUFFER_LENGTH_TO_ACCEPT = 15


def is_never_swallowed(event: RawKeyEvent):
    "Function keys and clipboard shortcuts always reach the host."
    if is_function_key(event.key_code):
        return True
    if event.ctrl and event.key in ("c", "v", "x"):
        return True
    return event.shift and event.key == "Insert"


def is_always_swallowed(event: RawKeyEvent):
    # Ctrl+Shift+D moves the browser inspector dock; scanners can emit it by accident
    return event.key_code == KeyCode.KEY_D and event.ctrl and event.shift


class BarcodeScanner(Section):
    """Turns keyboard-wedge scanner input into parsed barcodes.

    Key events go through the ScanClassifier; after the keyboard has been quiet for the
    configured buffer time, the accumulated buffer is checked, decoded and parsed, and a
    BarcodeReceived is published on the bus.

    run() must be running (it owns the timers) before keys are handled.
    """

    config: AsyncValue[BarcodeConfig]
    _nursery: typing.Optional[trio.Nursery]

    def __init__(
        self,
        config: typing.Optional[BarcodeConfig] = None,
        bus: typing.Optional[EventBus] = None,
        *,
        on_received: typing.Optional[collections.abc.Callable[[ParsedBarcode], None]] = None,
        on_disabled: typing.Optional[collections.abc.Callable[[], None]] = None,
        swallow_key_events: bool = True,
    ):
        self.config = AsyncValue(config if config is not None else BarcodeConfig())
        self.bus = bus if bus is not None else EventBus()
        self.on_received = on_received
        self.on_disabled = on_disabled
        self.swallow_key_events = swallow_key_events
        self.classifier = ScanClassifier(self.bus.publish)
        self.debouncer = DynamicDebouncer(self.accept_buffer)
        self.listening = True
        self._input_disabled = False
        self._previous_listening = True
        self._nursery = None

    @property
    def buffer_time(self) -> datetime.timedelta:
        return self.config.value.buffer_time

    def set_config(self, config: BarcodeConfig):
        # takes effect from the next key; the pending debounce keeps its old interval
        logger.debug("Barcode config replaced with %r", config)
        self.config.value = config

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        try:
            async with trio.open_nursery() as nursery:
                self._nursery = nursery
                self.classifier.attach(nursery)
                self.debouncer.attach(nursery)
                if not self.config.value.enabled:
                    logger.info("Barcode support is disabled")
                    if self.on_disabled is not None:
                        self.on_disabled()
                task_status.started()
                await trio.sleep_forever()
        finally:
            self.classifier.attach(None)
            self.debouncer.attach(None)
            self._nursery = None

    def stop(self):
        if self._nursery is not None:
            self._nursery.cancel_scope.cancel()

    @property
    def is_listening(self):
        return self.listening and self.config.value.enabled

    def disable_input(self):
        logger.debug("disabled barcode input on request")
        if not self._input_disabled:
            self._previous_listening = self.listening
            self._input_disabled = True
        self.listening = False

    def restore_input(self):
        logger.debug("enabled barcode input on request")
        self.listening = self._previous_listening
        self._input_disabled = False

    def handle_key(self, event: RawKeyEvent) -> bool:
        "Buffer a key press. Returns True if the host should still see the key."
        if not self.is_listening:
            logger.debug("input ignored, not listening")
            return True
        if self.swallow_key_events and is_always_swallowed(event):
            return False
        self._buffer_key(event)
        return not self.swallow_key_events or is_never_swallowed(event)

    def pass_through(self, text: str):
        "Inject a literal string into the buffer as synthetic key presses."
        for event in make_passthrough_events(text):
            self._buffer_key(event)

    def _buffer_key(self, event: RawKeyEvent):
        self.classifier.on_key(event)
        self.debouncer.trigger(self.buffer_time)

    def accept_buffer(self):
        taken = self.classifier.take_buffer()
        received = False
        if self._accept(taken):
            received = self.process_decoded(process_key_buffer(taken.buffer))
        if taken.was_reading and not received:
            self.bus.publish(ScanCancelled(buffer=tuple(taken.buffer)))

    def _accept(self, taken: TakenBuffer):
        prefix = self.config.value.prefix_2d
        if len(taken.buffer) < MIN_BUFFER_LENGTH_TO_ACCEPT:
            peeked = process_key_buffer(taken.buffer, len(prefix))
            if peeked is None or peeked.barcode_text != prefix:
                logger.debug("barcode dropped short input of %d keys, max key time %r", len(taken.buffer), taken.max_key_time)
                return False
        if taken.max_key_time is not None and taken.max_key_time > MAX_KEYSTROKE_THRESHOLD.total_seconds():
            logger.debug("dropped buffer due to max key time %r", taken.max_key_time)
            return False
        logger.debug("accepted buffer of %d keys", len(taken.buffer))
        return True

    def submit_text(self, text: str) -> bool:
        "Process a string that is already known to be a complete barcode."
        return self.process_decoded(DecodedBuffer(barcode_text=text, text=text))

    def process_decoded(self, decoded: typing.Optional[DecodedBuffer]) -> bool:
        if decoded is None or not decoded.barcode_text:
            logger.warning("no scan found, filtered.")
            return False
        barcode = process_barcode(decoded.barcode_text, self.config.value.prefix_2d)
        if barcode is None:
            logger.warning("Ignoring 2D barcode with an unsupported format: %r", decoded.barcode_text)
            return False
        if self.on_received is not None:
            try:
                self.on_received(barcode)
            except Exception:
                logger.exception("on_received callback failed handling %r", barcode)
        self.bus.publish(BarcodeReceived(barcode=barcode, text=decoded.text))
        return True

    async def pump(self, source: trio.MemoryReceiveChannel[ScannerInput], sink: trio.MemorySendChannel[RawKeyEvent]):
        async with aclosing(source), aclosing(sink):
            async for item in source:
                match item:
                    case RawKeyEvent():
                        if self.handle_key(item):
                            await sink.send(item)
                    case DisableInput():
                        self.disable_input()
                    case RestoreInput():
                        self.restore_input()
                    case BarcodeInput(text=text):
                        self.submit_text(text)
                    case _:
                        raise NotImplementedError(f"Don't know how to handle {type(item)}.")
