import pytest

from scanwedge.controlchars import EOT, GS, RS
from scanwedge.datamatrix import (
    FIELD_TAGS,
    build_datamatrix,
    match_field_tag,
    parse_datamatrix,
    process_barcode,
    repair_segments,
)
from scanwedge.types import BarcodeType

LABEL = "[)>␞06␝P1234␝1PMFG1␝Q10␄\r"


def test_part_label():
    datamatrix = parse_datamatrix(LABEL)
    assert datamatrix.is_valid
    assert datamatrix.format_number == 6
    assert datamatrix.fields == {"description": "1234", "mfgPartNumber": "MFG1", "quantity": 10}
    assert datamatrix.segments == ("P1234", "1PMFG1", "Q10")
    assert datamatrix.corrected_value == LABEL
    assert datamatrix.flags.gs_detected
    assert datamatrix.flags.rs_detected
    assert datamatrix.flags.eot_detected
    assert not datamatrix.flags.invalid_barcode_detected


def test_part_label_with_raw_control_characters():
    datamatrix = parse_datamatrix("[)>\x1e06\x1dP1234\x1d1PMFG1\x1dQ10\x04\r")
    assert datamatrix.fields == {"description": "1234", "mfgPartNumber": "MFG1", "quantity": 10}
    assert datamatrix.corrected_value == LABEL


def test_part_label_with_caret_notation():
    datamatrix = parse_datamatrix("[)>^06]P1234]1PMFG1]Q10^D")
    assert datamatrix.fields == {"description": "1234", "mfgPartNumber": "MFG1", "quantity": 10}
    assert datamatrix.corrected_value == LABEL


@pytest.mark.parametrize("format_number", ("00", "05", "07", "99"))
def test_unsupported_format_number(format_number: str):
    value = LABEL.replace("06", format_number, 1)
    datamatrix = parse_datamatrix(value)
    assert not datamatrix.is_valid
    assert datamatrix.fields == {}
    assert datamatrix.format_number == int(format_number)
    assert datamatrix.corrected_value == value
    assert process_barcode(value) is None


@pytest.mark.parametrize("value", ("[)>␞", "[)>␞6␝P1", "[)>␞AB␝P1234␄", "[)>␞0²␝P1␄\r", "[)>␞٠٦␝P1␄\r"))
def test_missing_format_number(value: str):
    datamatrix = parse_datamatrix(value)
    assert not datamatrix.is_valid
    assert datamatrix.format_number is None


def test_missing_record_separator():
    datamatrix = parse_datamatrix("[)>06␝P1234␝Q5␄\r")
    assert datamatrix.is_valid
    assert datamatrix.fields == {"description": "1234", "quantity": 5}
    assert datamatrix.corrected_value == "[)>␞06␝P1234␝Q5␄\r"
    assert not datamatrix.flags.rs_detected


def test_embedded_record_separator_is_repaired():
    datamatrix = parse_datamatrix("[)>␞06␝P1234␝1PMFG1␞␝Q10␝␞␄\r")
    assert datamatrix.is_valid
    assert datamatrix.flags.invalid_barcode_detected
    assert datamatrix.segments == ("P1234", "1PMFG1", "Q10")
    assert datamatrix.fields == {"description": "1234", "mfgPartNumber": "MFG1", "quantity": 10}
    assert datamatrix.corrected_value == LABEL


def test_repair_segments():
    assert repair_segments(["P1", f"1PX{RS}junk", RS, f"{RS}Q1", "Q2"]) == ["P1", "1PX", "Q2"]


@pytest.mark.parametrize(
    "segment,tag,field",
    (
        ("P1234", "P", "description"),
        ("1PMFG1", "1P", "mfgPartNumber"),
        ("1K998", "1K", "salesOrder"),
        ("10K1234", "10K", "invoice"),
        ("11K5", "11K", "unknown1"),
        ("4LUS", "4L", "countryOfOrigin"),
        ("11Z1", "11Z", "pick"),
        ("12Z77", "12Z", "partId"),
        ("13Z42", "13Z", "loadId"),
        ("K0042", "K", None),
        ("20ZABC", "20Z", None),
    ),
)
def test_match_field_tag(segment: str, tag: str, field):
    match = match_field_tag(segment)
    assert match is not None
    assert match[0] == tag
    assert match[1].field == field


@pytest.mark.parametrize("segment", ("9D2021", "ZZZ", "1", ""))
def test_unknown_field_tag(segment: str):
    assert match_field_tag(segment) is None


def test_unknown_and_ignored_tags_are_skipped():
    datamatrix = parse_datamatrix("[)>␞06␝K0042␝9D2021␝4LCN␝20ZXYZ␝11ZPICK␄\r")
    assert datamatrix.fields == {"countryOfOrigin": "CN", "pick": "PICK"}
    # segments are kept even when their tag is not mapped to a field
    assert datamatrix.segments == ("K0042", "9D2021", "4LCN", "20ZXYZ", "11ZPICK")


@pytest.mark.parametrize(
    "segment,quantity",
    (
        ("Q10", 10),
        ("Q10 pcs", 10),
        ("Q-3", -3),
        ("Q 7", 7),
        ("Qten", "ten"),
        ("Q", ""),
    ),
)
def test_quantity_reads_leading_integer(segment: str, quantity):
    datamatrix = parse_datamatrix(f"[)>␞06␝{segment}␄\r")
    assert datamatrix.fields == {"quantity": quantity}


def test_build_datamatrix():
    assert build_datamatrix(6, ["P1234", "Q2"]) == f"[)>{RS}06{GS}P1234{GS}Q2{EOT}\r"
    assert build_datamatrix(6, []) == f"[)>{RS}06{EOT}\r"


def test_build_then_parse():
    segments = ["P1234", "1PMFG1", "1K998", "10K1234", "4LUS", "Q10", "13Z42"]
    value = build_datamatrix(6, segments)
    datamatrix = parse_datamatrix(value)
    assert list(datamatrix.segments) == segments
    assert datamatrix.corrected_value == value


@pytest.mark.parametrize(
    "tagged_fields",
    (
        {"P": "1234", "1P": "MFG1", "Q": 10},
        {"1K": "SO-998", "10K": "INV77", "11K": "x", "4L": "US"},
        {"11Z": "PICK", "12Z": "4471", "13Z": "LD9", "Q": 250},
        {},
    ),
)
def test_parse_of_built_fields(tagged_fields: dict):
    value = build_datamatrix(6, [f"{tag}{raw}" for tag, raw in tagged_fields.items()])
    expected = {FIELD_TAGS[tag].field: raw for tag, raw in tagged_fields.items()}
    assert parse_datamatrix(value).fields == expected


def test_process_1d_barcode():
    barcode = process_barcode("ABC123\r")
    assert barcode.type == BarcodeType.CODE128
    assert barcode.value == "ABC123"
    assert barcode.raw_value == "ABC123\r"
    assert barcode.fields == {}


def test_process_2d_barcode():
    barcode = process_barcode("[)>\x1e06\x1dP1234\x1d1PMFG1\x1dQ10\x04\r")
    assert barcode.type == BarcodeType.DATAMATRIX
    assert barcode.fields == {"description": "1234", "mfgPartNumber": "MFG1", "quantity": 10}
    assert barcode.corrected_value == LABEL


def test_process_barcode_with_custom_prefix():
    barcode = process_barcode("@@␞06␝P55␄\r", prefix_2d="@@")
    assert barcode.type == BarcodeType.DATAMATRIX
    assert barcode.fields == {"description": "55"}
    assert barcode.corrected_value == "@@␞06␝P55␄\r"
    # with a different prefix the same text is a plain barcode
    assert process_barcode("@@␞06␝P55␄\r").type == BarcodeType.CODE128
