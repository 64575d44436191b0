# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""Parsing and building of 2D (DataMatrix) part labels.

The labels follow the ANSI MH10.8.2 "[)>" message envelope: a header, a Record
Separator, a two-digit format number, then one Group Separator before each
field and End Of Transmission at the end. Each field starts with a short data
identifier (the field tag) such as ``1P`` or ``Q``.
"""
from __future__ import annotations

import collections.abc
import logging
import re
import typing

import msgspec
import pygtrie

from .controlchars import CR, EOT, GS, LF, RS, normalize_control_characters, strip_line_endings
from .types import BarcodeType, DataMatrix, DataMatrixFlags, FieldValue, ParsedBarcode

logger = logging.getLogger(__name__)

DEFAULT_HEADER = "[)>"
# Format 06 is the "22z22" layout used by distributor part labels.
EXPECTED_FORMAT_NUMBER = 6


class FieldTag(msgspec.Struct, frozen=True):
    field: typing.Optional[str]
    numeric: bool = False


FIELD_TAGS = pygtrie.CharTrie(
    {
        # could be the distributor part number, or a customer reference
        "P": FieldTag("description"),
        "1P": FieldTag("mfgPartNumber"),
        "P1": FieldTag(None),
        "K": FieldTag(None),
        "1K": FieldTag("salesOrder"),
        "10K": FieldTag("invoice"),
        "11K": FieldTag("unknown1"),
        "4L": FieldTag("countryOfOrigin"),
        "Q": FieldTag("quantity", numeric=True),
        "11Z": FieldTag("pick"),
        "12Z": FieldTag("partId"),
        "13Z": FieldTag("loadId"),
        "20Z": FieldTag(None),
    }
)

# leading integer, the way parseInt reads "10 pcs" as 10
INTEGER_RE = re.compile(r"\s*[+-]?[0-9]+")
FORMAT_NUMBER_RE = re.compile(r"[0-9]{2}")


def match_field_tag(segment: str) -> typing.Optional[tuple[str, FieldTag]]:
    # Tags are read one character at a time and the first accumulated prefix that
    # is a known tag wins, so "P1234" is the P tag rather than the P1 tag.
    step = FIELD_TAGS.shortest_prefix(segment)
    if not step:
        return None
    return step.key, step.value


def parse_field_value(tag: FieldTag, raw: str) -> FieldValue:
    if tag.numeric:
        match = INTEGER_RE.match(raw)
        if match:
            return int(match.group())
    return raw


def is_malformed(segments: collections.abc.Sequence[str]):
    return any(RS in segment for segment in segments)


def repair_segments(segments: collections.abc.Sequence[str]) -> list[str]:
    """Some older labels were encoded with a spurious empty field (a trailing GS RS).

    Keep only whatever data precedes the RS in such a segment, and drop the segment
    entirely if there is none.
    """
    repaired = []
    for segment in segments:
        if RS in segment:
            data, _, _ = segment.partition(RS)
            if data:
                repaired.append(data)
            continue
        repaired.append(segment)
    return repaired


def build_datamatrix(format_number: int, segments: collections.abc.Iterable[str], header: str = DEFAULT_HEADER) -> str:
    parts = [header, RS, f"{format_number:02d}"]
    for segment in segments:
        parts.append(GS)
        parts.append(segment)
    parts.append(EOT)
    parts.append(CR)
    return "".join(parts)


def _read_format_number(normalized: str, header: str) -> tuple[typing.Optional[int], int]:
    start = normalized.find(header)
    if start < 0:
        return None, len(normalized)
    position = start + len(header)
    # the RS after the header is sometimes missing
    if normalized[position : position + 1] == RS:
        position += 1
    digits = normalized[position : position + 2]
    if not FORMAT_NUMBER_RE.fullmatch(digits):
        return None, position
    return int(digits), position + 2


def _split_segments(payload: str) -> list[str]:
    payload, _, _ = payload.partition(EOT)
    payload = payload.rstrip(CR + LF)
    return [segment for segment in payload.split(GS) if segment]


def parse_datamatrix(
    value: str, header: str = DEFAULT_HEADER, expected_format_number: int = EXPECTED_FORMAT_NUMBER
) -> DataMatrix:
    normalized = normalize_control_characters(value)
    header = normalize_control_characters(header)
    gs_detected = GS in normalized
    rs_detected = RS in normalized
    eot_detected = EOT in normalized

    format_number, position = _read_format_number(normalized, header)
    if format_number != expected_format_number:
        logger.error("Expected the 2D barcode format number of %d but was %r", expected_format_number, format_number)
        return DataMatrix(
            raw_value=value,
            corrected_value=value,
            format_number=format_number,
            flags=DataMatrixFlags(gs_detected=gs_detected, rs_detected=rs_detected, eot_detected=eot_detected),
            is_valid=False,
        )

    segments = _split_segments(normalized[position:])
    invalid_barcode_detected = False
    if is_malformed(segments):
        logger.debug("Repairing malformed segments %r", segments)
        segments = repair_segments(segments)
        invalid_barcode_detected = True

    fields: dict[str, FieldValue] = {}
    for segment in segments:
        match = match_field_tag(segment)
        if match is None:
            logger.debug("No known field tag in segment %r", segment)
            continue
        tag_text, tag = match
        if tag.field is None:
            continue
        fields[tag.field] = parse_field_value(tag, segment[len(tag_text) :])

    return DataMatrix(
        raw_value=value,
        corrected_value=build_datamatrix(format_number, segments, header),
        format_number=format_number,
        fields=fields,
        segments=tuple(segments),
        flags=DataMatrixFlags(
            gs_detected=gs_detected,
            rs_detected=rs_detected,
            eot_detected=eot_detected,
            invalid_barcode_detected=invalid_barcode_detected,
        ),
    )


def process_barcode(value: str, prefix_2d: str = DEFAULT_HEADER) -> typing.Optional[ParsedBarcode]:
    """Classify a decoded scan as 1D or 2D and parse it.

    Returns None for a 2D scan with an unsupported format number.
    """
    if value.startswith(prefix_2d):
        datamatrix = parse_datamatrix(value, prefix_2d)
        if not datamatrix.is_valid:
            return None
        return ParsedBarcode(
            type=BarcodeType.DATAMATRIX,
            value=datamatrix.fields,
            corrected_value=datamatrix.corrected_value,
            raw_value=value,
            flags=datamatrix.flags,
        )
    return ParsedBarcode(
        type=BarcodeType.CODE128,
        value=strip_line_endings(value),
        corrected_value=value,
        raw_value=value,
    )
