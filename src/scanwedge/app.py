from __future__ import annotations

import argparse
import logging
import pathlib
import sys
from contextlib import aclosing

import msgspec
import trio

from .datamatrix import process_barcode
from .decoder import make_scanner_events
from .events import EventBus
from .keystreams import pump_all
from .recording import RecordedEvent, load_events, replay_events
from .scanner import BarcodeScanner
from .settings import BarcodeConfig
from .types import ScanSignal

logger = logging.getLogger(__name__)


def unescape(value: str) -> str:
    r"Interpret backslash escapes such as \x1d typed on a command line."
    return value.encode("latin-1", "backslashreplace").decode("unicode_escape")


def encode_pretty(obj) -> str:
    return msgspec.json.format(msgspec.json.encode(obj), indent=2).decode("utf-8")


def load_config(settings_path: pathlib.Path | None) -> BarcodeConfig:
    if settings_path is None:
        return BarcodeConfig()
    return BarcodeConfig.load(settings_path)


decode_parser = argparse.ArgumentParser(prog="scanwedge-decode", description="Parse a barcode string as a scanner would deliver it.")
decode_parser.add_argument("value")
decode_parser.add_argument("--settings", type=pathlib.Path)
decode_parser.add_argument("--prefix", help="2D header literal (default from settings, or [)>)")
decode_parser.add_argument("--verbose", "-v", action="store_true")


def decode_cli(argv=sys.argv):
    args = decode_parser.parse_args(argv[1:])
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    config = load_config(args.settings)
    prefix = args.prefix or config.prefix_2d
    barcode = process_barcode(unescape(args.value), prefix)
    if barcode is None:
        print("not a supported 2D barcode", file=sys.stderr)
        return 1
    print(encode_pretty(barcode))
    return 0


replay_parser = argparse.ArgumentParser(prog="scanwedge-replay", description="Replay recorded key events through the scanner.")
replay_source_group = replay_parser.add_mutually_exclusive_group(required=True)
replay_source_group.add_argument("--recording", type=pathlib.Path, help="JSON file of [offset, key event] pairs")
replay_source_group.add_argument("--text", help="type this text the way a scanner would (backslash escapes allowed)")
replay_parser.add_argument("--interval", type=float, default=0.01, help="seconds between emulated key presses")
replay_parser.add_argument("--settings", type=pathlib.Path)
replay_parser.add_argument("--verbose", "-v", action="store_true")


async def replay(events: list[RecordedEvent], config: BarcodeConfig):
    bus = EventBus()

    def print_signal(signal: ScanSignal):
        print(type(signal).__name__, encode_pretty(signal))

    bus.subscribe(print_signal)
    scanner = BarcodeScanner(config, bus)
    async with trio.open_nursery() as nursery:
        await nursery.start(scanner.run)
        async with aclosing(replay_events(events)) as keysource, pump_all(keysource, scanner) as passed_through:
            async for event in passed_through:
                logger.debug("host sees %r", event)
        # let the debounce settle before shutting down
        await trio.sleep(config.buffer_time.total_seconds() * 2)
        scanner.stop()


def replay_cli(argv=sys.argv):
    args = replay_parser.parse_args(argv[1:])
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    if args.recording is not None:
        events = load_events(args.recording)
    else:
        events = [(i * args.interval, event) for i, event in enumerate(make_scanner_events(unescape(args.text)))]
    trio.run(replay, events, load_config(args.settings))
    return 0
