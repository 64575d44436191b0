import pytest

from scanwedge.controlchars import EOT, GS, RS, normalize_control_characters, strip_line_endings


@pytest.mark.parametrize(
    "raw,expected",
    (
        ("\x1d", GS),
        ("]", GS),
        (GS, GS),
        ("\x1e", RS),
        ("^", RS),
        (RS, RS),
        ("\x04", EOT),
        ("^D", EOT),
        (EOT, EOT),
        ("[)>\x1e06\x1dP1234\x04\r", "[)>␞06␝P1234␄\r"),
        ("[)>^06]P1234^D", "[)>␞06␝P1234␄"),
        ("plain text", "plain text"),
        ("", ""),
    ),
)
def test_normalize_control_characters(raw: str, expected: str):
    assert normalize_control_characters(raw) == expected


@pytest.mark.parametrize(
    "raw",
    (
        "[)>\x1e06\x1dP1234\x04\r",
        "^^D]]\x1e\x04",
        "^D^D^",
        "␝␞␄abc",
        "",
    ),
)
def test_normalize_is_idempotent(raw: str):
    once = normalize_control_characters(raw)
    assert normalize_control_characters(once) == once


def test_strip_line_endings():
    assert strip_line_endings("ABC123\r") == "ABC123"
    assert strip_line_endings("ABC123\r\n") == "ABC123"
    assert strip_line_endings("AB\rC\r") == "ABC\r"
