from datetime import timedelta

import pytest

from scanwedge.durations import coerce_duration, format_timespan, parse_duration, parse_timespan


@pytest.mark.parametrize(
    "duration,expected",
    (
        ("0", timedelta()),
        ("-0", timedelta()),
        ("150ms", timedelta(milliseconds=150)),
        ("1us", timedelta(microseconds=1)),
        ("2s", timedelta(seconds=2)),
        ("1m30s", timedelta(minutes=1, seconds=30)),
        ("2us3m4s5h", timedelta(hours=5, minutes=3, seconds=4, microseconds=2)),
        ("1.5ms", timedelta(milliseconds=1, microseconds=500)),
        ("0.25s", timedelta(milliseconds=250)),
        ("+1h", timedelta(hours=1)),
        ("-3h2m", -timedelta(hours=3, minutes=2)),
    ),
)
def test_parse_duration(duration: str, expected: timedelta):
    assert parse_duration(duration) == expected


@pytest.mark.parametrize("duration", ("", "1", "0.0", ".5s", "soon", "5 ms", "3d"))
def test_parse_duration_invalid(duration: str):
    with pytest.raises(ValueError):
        parse_duration(duration)


@pytest.mark.parametrize(
    "timespan,expected",
    (
        ("00:00:00.150", timedelta(milliseconds=150)),
        ("00:00:02", timedelta(seconds=2)),
        ("00:01", timedelta(minutes=1)),
        ("1.02:03:04", timedelta(days=1, hours=2, minutes=3, seconds=4)),
        ("-00:00:00.5", timedelta(milliseconds=-500)),
        ("00:00:00.0000001", timedelta()),
    ),
)
def test_parse_timespan(timespan: str, expected: timedelta):
    assert parse_timespan(timespan) == expected


@pytest.mark.parametrize("timespan", ("", "150", "00:00:00.1.5", "aa:bb"))
def test_parse_timespan_invalid(timespan: str):
    with pytest.raises(ValueError):
        parse_timespan(timespan)


@pytest.mark.parametrize(
    "delta,expected",
    (
        (timedelta(), "00:00:00"),
        (timedelta(milliseconds=150), "00:00:00.150"),
        (timedelta(milliseconds=40), "00:00:00.040"),
        (timedelta(microseconds=500), "00:00:00.000500"),
        (timedelta(seconds=2), "00:00:02"),
        (timedelta(hours=1, minutes=2, seconds=3), "01:02:03"),
        (timedelta(days=1, hours=2, minutes=3, seconds=4), "1.02:03:04"),
        (timedelta(milliseconds=-500), "-00:00:00.500"),
    ),
)
def test_format_timespan(delta: timedelta, expected: str):
    assert format_timespan(delta) == expected
    assert parse_timespan(expected) == delta


@pytest.mark.parametrize(
    "value,expected",
    (
        (150, timedelta(milliseconds=150)),
        (12.5, timedelta(milliseconds=12, microseconds=500)),
        ("150ms", timedelta(milliseconds=150)),
        ("00:00:00.150", timedelta(milliseconds=150)),
        (timedelta(seconds=1), timedelta(seconds=1)),
    ),
)
def test_coerce_duration(value, expected: timedelta):
    assert coerce_duration(value) == expected
