# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""Canonical forms of the framing control characters used by 2D barcodes.

Scanners report Group Separator, Record Separator and End Of Transmission in
several ways depending on their keyboard emulation settings: as the raw
control byte, as the caret-notation character (CTRL-] is ``]``, CTRL-^ is
``^``), or as the Unicode "control picture" symbol. We fold all of them into
the control picture.
"""

GS = "␝"
RS = "␞"
EOT = "␄"
CR = "\r"
LF = "\n"

GS_VARIANTS = ("\x1d", "\x5d", GS)
RS_VARIANTS = ("\x1e", "\x5e", RS)
EOT_VARIANTS = ("\x04", "^D", EOT)

# Order matters: ^D must become EOT before a lone ^ becomes RS.
REPLACEMENTS = (
    ("\x1d", GS),
    ("\x5d", GS),
    ("^D", EOT),
    ("\x04", EOT),
    ("\x1e", RS),
    ("\x5e", RS),
)


def normalize_control_characters(value: str) -> str:
    for variant, canonical in REPLACEMENTS:
        value = value.replace(variant, canonical)
    return value


def strip_line_endings(value: str) -> str:
    "Remove the first CR and the first LF, the way 1D scans are cleaned up."
    return value.replace(LF, "", 1).replace(CR, "", 1)
