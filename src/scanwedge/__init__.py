# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Scan pipeline stages
# host level:
# stage 0: host delivers key presses (real keyboard, UI framework, or literal strings expanded into fake presses)

# scanner level:
# stage 1: classify keystroke timing; announce ScanStarted / ScanCancelled
# stage 2: debounce; once the keyboard is quiet, gate the buffer on length and timing
# stage 3: decode key presses into text (including Alt+numpad codes)
# stage 4: parse text as a 1D barcode or a 2D DataMatrix label; publish BarcodeReceived
