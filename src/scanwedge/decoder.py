# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import logging
import typing

from .keycodes import KeyCode, is_framing, is_numpad_digit, is_printable, is_punctuation
from .types import DecodedBuffer, RawKeyEvent

logger = logging.getLogger(__name__)


def make_passthrough_events(text: str) -> list[RawKeyEvent]:
    return [RawKeyEvent.fake(ch) for ch in text]


# US layout: unshifted, shifted
PUNCTUATION_KEYS = {
    KeyCode.SEMICOLON: ";:",
    187: "=+",
    188: ",<",
    189: "-_",
    190: ".>",
    191: "/?",
    KeyCode.BACKQUOTE: "`~",
    KeyCode.BRACKET_LEFT: "[{",
    220: "\\|",
    221: "]}",
    KeyCode.QUOTE: "'\"",
}
SHIFTED_DIGITS = ")!@#$%^&*("
NAMED_KEYS = {
    "\r": ("Enter", KeyCode.ENTER),
    "\n": ("Enter", KeyCode.ENTER),
    "\t": ("Tab", KeyCode.TAB),
    " ": (" ", KeyCode.SPACE),
}


def make_scanner_events(text: str) -> list[RawKeyEvent]:
    """Produce the key presses a keyboard-wedge scanner emulating a US keyboard would type for text.

    Characters with no key of their own (control characters, non-ASCII) are typed as
    Alt + numeric keypad codes.
    """
    events = []
    for ch in text:
        if ch in NAMED_KEYS:
            key, code = NAMED_KEYS[ch]
            events.append(RawKeyEvent(key=key, key_code=code))
        elif ch.isascii() and ch.isalpha():
            events.append(RawKeyEvent(key=ch, key_code=ord(ch.upper()), shift=ch.isupper()))
        elif ch.isascii() and ch.isdigit():
            events.append(RawKeyEvent(key=ch, key_code=ord(ch)))
        elif ch in SHIFTED_DIGITS:
            events.append(RawKeyEvent(key=ch, key_code=KeyCode.DIGIT_0 + SHIFTED_DIGITS.index(ch), shift=True))
        else:
            for code, keys in PUNCTUATION_KEYS.items():
                if ch in keys:
                    events.append(RawKeyEvent(key=ch, key_code=code, shift=keys.index(ch) == 1))
                    break
            else:
                events.append(RawKeyEvent(key="Alt", key_code=KeyCode.ALT, alt=True))
                for digit in str(ord(ch)):
                    events.append(RawKeyEvent(key=digit, key_code=KeyCode.NUMPAD_0 + int(digit), alt=True))
    return events


def resolve_character(event: RawKeyEvent) -> str:
    if event.is_fake or event.shift or is_punctuation(event.key_code):
        return event.key
    if is_numpad_digit(event.key_code):
        return chr(event.key_code - KeyCode.NUMPAD_0 + ord("0"))
    return chr(event.key_code)


def is_accepted(event: RawKeyEvent):
    return event.is_fake or event.key_code in (KeyCode.ENTER, KeyCode.SPACE, KeyCode.TAB) or is_printable(event.key_code)


class _AltCode:
    """Collects the digits typed while Alt is held (the Alt+numpad input method)."""

    def __init__(self):
        self.digits: list[str] = []

    def reset(self):
        self.digits = []

    def flush(self) -> typing.Optional[str]:
        if not self.digits:
            return None
        digits = "".join(self.digits)
        self.reset()
        try:
            return chr(int(digits))
        except (ValueError, OverflowError):
            logger.debug("Discarding unparseable alt code %r", digits)
            return None


def process_key_buffer(
    buffer: collections.abc.Sequence[RawKeyEvent], length: typing.Optional[int] = None
) -> typing.Optional[DecodedBuffer]:
    """Turn a buffer of key presses into text.

    If length is given, only the first length events are examined; this lets the caller
    peek at the start of a buffer without decoding all of it.

    Returns None if every examined event carried a modifier flag and none of them
    produced a character, since that is modifier noise rather than input.
    """
    events = buffer if length is None else buffer[:length]
    barcode_text = []
    text = []
    alt_code = _AltCode()
    modifier_count = 0
    for event in events:
        if event.has_modifier:
            modifier_count += 1

        # a fresh Alt press, or any key without Alt held, ends the previous code
        if event.key_code == KeyCode.ALT or not event.alt:
            special = alt_code.flush()
            if special is not None:
                barcode_text.append(special)
        if event.key_code == KeyCode.ALT:
            continue
        if event.alt:
            alt_code.digits.append(event.key)
            continue

        if not is_accepted(event):
            continue
        character = resolve_character(event)
        barcode_text.append(character)
        if not event.ctrl and not is_framing(event.key_code):
            text.append(character)
    special = alt_code.flush()
    if special is not None:
        barcode_text.append(special)

    if len(events) == modifier_count and not barcode_text:
        return None
    return DecodedBuffer(barcode_text="".join(barcode_text), text="".join(text))
