"""Convert buffer-time settings between strings and timedeltas.

Settings payloads carry the buffer time in the .NET TimeSpan format
("00:00:00.150", "1.02:03:04"), which is also what we write back out. Go-style
durations ("150ms", "1m30s") and bare millisecond numbers are accepted as input.
"""
import datetime
import decimal
import re

TIMESPAN_RE = re.compile(r"(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}(?:\.\d{1,7})?))?")

# microseconds per unit; "ms" has to be tried before "m"
DURATION_UNITS = {
    "ms": 1000,
    "us": 1,
    "h": 3600 * 1000000,
    "m": 60 * 1000000,
    "s": 1000000,
}
DURATION_PART = r"([0-9]+(?:\.[0-9]*)?)(ms|us|h|m|s)"
DURATION_RE = re.compile(rf"(?P<sign>[+-])?(?P<parts>(?:{DURATION_PART})+|0)")
DURATION_PART_RE = re.compile(DURATION_PART)


def parse_duration(val: str) -> datetime.timedelta:
    match = DURATION_RE.fullmatch(val.strip())
    if match is None:
        raise ValueError(f"Invalid duration string {val!r}")
    microseconds = decimal.Decimal(0)
    for number, unit in DURATION_PART_RE.findall(match["parts"]):
        microseconds += decimal.Decimal(number) * DURATION_UNITS[unit]
    accum = datetime.timedelta(microseconds=int(microseconds))
    return -accum if match["sign"] == "-" else accum


def parse_timespan(val: str) -> datetime.timedelta:
    match = TIMESPAN_RE.fullmatch(val.strip())
    if match is None:
        raise ValueError(f"Invalid timespan string {val!r}")
    accum = datetime.timedelta(
        days=int(match["days"] or 0),
        hours=int(match["hours"]),
        minutes=int(match["minutes"]),
        microseconds=int(decimal.Decimal(match["seconds"] or 0) * 1000000),
    )
    return -accum if match["sign"] else accum


def format_timespan(val: datetime.timedelta) -> str:
    "[-][d.]hh:mm:ss[.fff], with six fractional digits when the value is not whole milliseconds."
    parts = []
    if val < datetime.timedelta():
        parts.append("-")
        val = -val
    if val.days:
        parts.append(f"{val.days}.")
    minutes, seconds = divmod(val.seconds, 60)
    hours, minutes = divmod(minutes, 60)
    parts.append(f"{hours:02d}:{minutes:02d}:{seconds:02d}")
    if val.microseconds % 1000:
        parts.append(f".{val.microseconds:06d}")
    elif val.microseconds:
        parts.append(f".{val.microseconds // 1000:03d}")
    return "".join(parts)


def coerce_duration(val: datetime.timedelta | int | float | str) -> datetime.timedelta:
    "Bare numbers are milliseconds; strings with a colon are timespans."
    if isinstance(val, datetime.timedelta):
        return val
    if isinstance(val, (int, float)):
        return datetime.timedelta(milliseconds=val)
    if ":" in val:
        return parse_timespan(val)
    return parse_duration(val)
