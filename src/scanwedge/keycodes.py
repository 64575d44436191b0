# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from enum import IntEnum

# These are the legacy DOM keyCode values. Keyboard-wedge scanners emulate a
# US layout, so the codes for letters match their uppercase ASCII value and the
# codes for the top-row digits match ASCII '0'-'9'.


class KeyCode(IntEnum):
    TAB = 9
    LINEFEED = 10
    ENTER = 13
    SHIFT = 16
    CTRL = 17
    ALT = 18
    SPACE = 32
    INSERT = 45
    DIGIT_0 = 48
    DIGIT_9 = 57
    KEY_A = 65
    KEY_C = 67
    KEY_D = 68
    KEY_V = 86
    KEY_X = 88
    KEY_Z = 90
    NUMPAD_0 = 96
    NUMPAD_9 = 105
    NUMPAD_MULTIPLY = 106
    NUMPAD_DIVIDE = 111
    F1 = 112
    F12 = 123
    SEMICOLON = 186
    BACKQUOTE = 192
    BRACKET_LEFT = 219
    QUOTE = 222


def is_numpad_digit(code: int):
    return KeyCode.NUMPAD_0 <= code <= KeyCode.NUMPAD_9


def is_punctuation(code: int):
    "Punctuation keys whose character depends on the layout, so the reported key value is used."
    return (
        KeyCode.NUMPAD_MULTIPLY <= code <= KeyCode.NUMPAD_DIVIDE
        or KeyCode.SEMICOLON <= code <= KeyCode.BACKQUOTE
        or KeyCode.BRACKET_LEFT <= code <= KeyCode.QUOTE
    )


def is_function_key(code: int):
    return KeyCode.F1 <= code <= KeyCode.F12


def is_printable(code: int):
    return (
        KeyCode.DIGIT_0 <= code <= KeyCode.KEY_Z
        or KeyCode.NUMPAD_0 <= code <= KeyCode.NUMPAD_DIVIDE
        or KeyCode.SEMICOLON <= code <= KeyCode.QUOTE
    )


def is_framing(code: int):
    return code in (KeyCode.ENTER, KeyCode.TAB, KeyCode.LINEFEED)
