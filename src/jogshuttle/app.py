from __future__ import annotations

import argparse
import logging
import math
import pathlib
import sys
import typing

import trio

from .device.decoder import ActionDecoder
from .device.deviceutil import open_event_source
from .device.frames import FrameCombiner, ShuttleReader
from .device.hwtypes import CombinedEvent, HardwareError
from .output import Sink, make_sink
from .settings import Settings

if typing.TYPE_CHECKING:
    from .device.eventsource import EventSource

logger = logging.getLogger(__name__)


class JogShuttle:
    """Reads the device in one task and decodes actions in another.

    The two tasks only share an unbounded memory channel of CombinedEvents;
    the decoder owns all of the jog/shuttle state.
    """

    def __init__(self, settings: Settings, event_source: typing.Optional[EventSource] = None, sink: typing.Optional[Sink] = None):
        self.settings = settings
        if event_source is None:
            event_source = open_event_source(settings.device_path, grab=settings.grab)
        self.event_source = event_source
        if sink is None:
            sink = make_sink(settings)
        self.sink = sink
        self.combiner = FrameCombiner(shuttle_code=settings.shuttle_code, jog_code=settings.jog_code)
        self.decoder = ActionDecoder(settings)

    async def run(self):
        send_channel, receive_channel = trio.open_memory_channel[CombinedEvent](math.inf)
        reader = ShuttleReader(self.event_source, send_channel, self.combiner)
        async with trio.open_nursery() as nursery:
            await nursery.start(reader.run)
            await nursery.start(self.decoder.run, receive_channel, self.sink)
        logger.debug("goodbye")


parser = argparse.ArgumentParser(prog="jogshuttle", description="Turn ShuttlePRO v2 input into actions.")
parser.add_argument("-v", "--verbose", action="store_true", default=None, help="log every command call and its output")
parser.add_argument("-c", "--command", help="run COMMAND with each action appended instead of printing it")
parser.add_argument("-d", "--device", type=pathlib.Path, help="input device or capture file to read")
parser.add_argument("--grab", action="store_true", default=None, help="grab the device so nothing else sees its events")
parser.add_argument("--settings", type=pathlib.Path, help="JSON settings file")


def load_settings(parsed: argparse.Namespace) -> Settings:
    settings = Settings.load(parsed.settings) if parsed.settings is not None else Settings.defaults()
    overrides = {
        "verbose": parsed.verbose,
        "command": parsed.command,
        "device_path": parsed.device,
        "grab": parsed.grab,
    }
    return settings.replace(**{k: v for k, v in overrides.items() if v is not None})


def main(argv=sys.argv):
    parsed = parser.parse_args(argv[1:])
    settings = load_settings(parsed)
    logging.basicConfig(level=logging.DEBUG if settings.verbose else logging.INFO)

    exit_code = 1
    try:
        app = JogShuttle(settings)
        trio.run(app.run)
        logger.error("Reached the end of %s", settings.device_path)
    except* KeyboardInterrupt:
        exit_code = 130
    except* (OSError, HardwareError) as group:
        for exc in group.exceptions:
            logger.error("Unable to read %s: %s", settings.device_path, exc)
    return exit_code
