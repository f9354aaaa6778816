import logging
import pathlib
import sys
import typing
from contextlib import aclosing

import trio

from .device.deviceutil import open_event_source
from .device.dumps import LineFormatter, RawEventLog, TabletTracker
from .device.eventsource import EventSource
from .device.hwtypes import HardwareError


async def dump_events(source: EventSource, formatter: LineFormatter, out: typing.TextIO):
    with source:
        async with aclosing(source.stream()) as events:
            async for evt in events:
                for line in formatter.feed(evt):
                    out.write(line + "\n")
                out.flush()


def _dump_cli(prog: str, formatter: LineFormatter, argv: list[str]):
    if len(argv) < 2:
        print(f"Syntax: {prog} /dev/input/eventXX", file=sys.stderr)
        return 1
    logging.basicConfig(level=logging.INFO)
    source = open_event_source(pathlib.Path(argv[1]))
    try:
        trio.run(dump_events, source, formatter, sys.stdout)
    except KeyboardInterrupt:
        return 130
    except (OSError, HardwareError) as exc:
        print(f"{prog}: {argv[1]}: {str(exc) or type(exc).__name__}", file=sys.stderr)
        return 1
    return 0


def raw_events_cli(argv=sys.argv):
    return _dump_cli("jogshuttle-raw-events", RawEventLog(), argv)


def tablet_events_cli(argv=sys.argv):
    return _dump_cli("jogshuttle-tablet", TabletTracker(), argv)
