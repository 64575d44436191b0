# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import enum
import typing

import msgspec

FieldValue = typing.Union[str, int]


class ScanwedgeError(Exception):
    pass


class ConfigError(ScanwedgeError):
    pass


class NotRunningError(ScanwedgeError):
    def __init__(self):
        return super().__init__("BarcodeScanner.run() must be started first")


class RawKeyEvent(msgspec.Struct, frozen=True):
    key: str
    key_code: int
    alt: bool = False
    ctrl: bool = False
    shift: bool = False
    is_fake: bool = False

    @property
    def has_modifier(self):
        return self.alt or self.ctrl or self.shift

    @classmethod
    def fake(cls, character: str):
        return cls(key=character, key_code=ord(character), is_fake=True)


class DecodedBuffer(msgspec.Struct, frozen=True):
    # framing characters (Enter, Tab) are kept in barcode_text and stripped from text
    barcode_text: str
    text: str


@enum.unique
class BarcodeType(enum.Enum):
    CODE128 = "code128"
    DATAMATRIX = "datamatrix"


class DataMatrixFlags(msgspec.Struct, frozen=True):
    gs_detected: bool = False
    rs_detected: bool = False
    eot_detected: bool = False
    invalid_barcode_detected: bool = False


class DataMatrix(msgspec.Struct, frozen=True, kw_only=True):
    raw_value: str
    corrected_value: str
    format_number: typing.Optional[int] = None
    fields: dict[str, FieldValue] = msgspec.field(default_factory=dict)
    segments: tuple[str, ...] = ()
    flags: DataMatrixFlags = msgspec.field(default_factory=DataMatrixFlags)
    is_valid: bool = True


class ParsedBarcode(msgspec.Struct, frozen=True, kw_only=True):
    type: BarcodeType
    value: typing.Union[str, dict[str, FieldValue]]
    corrected_value: str
    raw_value: str
    flags: DataMatrixFlags = msgspec.field(default_factory=DataMatrixFlags)

    @property
    def fields(self) -> dict[str, FieldValue]:
        if isinstance(self.value, dict):
            return self.value
        return {}


class ScanStarted(msgspec.Struct, frozen=True):
    buffer: tuple[RawKeyEvent, ...]


class ScanCancelled(msgspec.Struct, frozen=True):
    buffer: tuple[RawKeyEvent, ...]


class BarcodeReceived(msgspec.Struct, frozen=True):
    barcode: ParsedBarcode
    text: str


class DisableInput(msgspec.Struct, frozen=True):
    pass


class RestoreInput(msgspec.Struct, frozen=True):
    pass


class BarcodeInput(msgspec.Struct, frozen=True):
    text: str


ScanSignal = ScanStarted | ScanCancelled | BarcodeReceived
ScannerInput = RawKeyEvent | DisableInput | RestoreInput | BarcodeInput
