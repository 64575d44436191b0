import dataclasses
import datetime
import enum
import json
import pathlib
import typing

import cattrs

from .datamatrix import DEFAULT_HEADER
from .durations import coerce_duration, format_timespan
from .types import ConfigError

DEFAULT_BUFFER_TIME = datetime.timedelta(milliseconds=150)

# camelCase names used by the server's system settings document
PAYLOAD_ALIASES = {
    "bufferTime": "buffer_time",
    "barcodePrefix2D": "prefix_2d",
}
PAYLOAD_NAMES = {v: k for k, v in PAYLOAD_ALIASES.items()}


@enum.unique
class BarcodeProfile(enum.Enum):
    DEFAULT = "Default"


settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(datetime.timedelta, format_timespan)
settings_converter.register_structure_hook(datetime.timedelta, lambda d, _: coerce_duration(d))


@dataclasses.dataclass(frozen=True, kw_only=True)
class BarcodeConfig:
    enabled: bool = True
    # how long the keyboard must be quiet before a buffer is decoded
    buffer_time: datetime.timedelta = DEFAULT_BUFFER_TIME
    prefix_2d: str = DEFAULT_HEADER
    profile: BarcodeProfile = BarcodeProfile.DEFAULT

    def replace(self, **changes) -> "BarcodeConfig":
        return dataclasses.replace(self, **changes)

    def unstructure(self) -> dict[str, typing.Any]:
        "In the shape of the server's barcode settings payload."
        raw = settings_converter.unstructure(self)
        return {PAYLOAD_NAMES.get(k, k): v for k, v in raw.items()}

    def save(self, dest: pathlib.Path):
        with dest.open("w") as outfile:
            json.dump(self.unstructure(), outfile, indent=2)

    @classmethod
    def structure(cls, raw: typing.Mapping[str, typing.Any]) -> "BarcodeConfig":
        data = {PAYLOAD_ALIASES.get(k, k): v for k, v in raw.items()}
        if not data.get("prefix_2d"):
            data.pop("prefix_2d", None)
        try:
            return settings_converter.structure(data, cls)
        except (cattrs.BaseValidationError, ValueError, TypeError) as exc:
            raise ConfigError(f"Invalid barcode configuration {dict(raw)!r}") from exc

    @classmethod
    def from_payload(cls, payload: typing.Mapping[str, typing.Any]) -> "BarcodeConfig":
        "Accepts either a bare barcode config or a whole system settings document with a barcode member."
        if "barcode" in payload:
            payload = payload["barcode"]
        return cls.structure(payload)

    @classmethod
    def load(cls, src: pathlib.Path) -> "BarcodeConfig":
        try:
            with src.open() as infile:
                raw = json.load(infile)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Unable to read settings from {src}") from exc
        return cls.from_payload(raw)

    @classmethod
    def for_test(cls, **changes):
        return cls.structure({"enabled": True, "bufferTime": "00:00:00.150", "barcodePrefix2D": DEFAULT_HEADER, **changes})
