"""Line formatters for the raw event dump tools."""
from __future__ import annotations

import typing

import msgspec

from .eventsource import AbsCode, EventType, RawEvent, type_string


def format_raw_event(evt: RawEvent) -> str:
    return f"{evt.time_secs}.{evt.time_usecs:<7} {type_string(evt.type)} {evt.code:3d} {evt.value}"


class RawEventLog:
    def feed(self, evt: RawEvent) -> list[str]:
        lines = [format_raw_event(evt)]
        if evt.is_terminator:
            # blank line between frames
            lines.append("")
        return lines


class TabletPosition(msgspec.Struct, kw_only=True):
    x: int = 0
    y: int = 0
    pressure: int = 0
    distance: int = 0
    tilt_x: int = 0
    tilt_y: int = 0

    def format(self) -> str:
        values = (self.x, self.y, self.pressure, self.distance, self.tilt_x, self.tilt_y)
        return "wc " + " ".join(f"{v:8d}" for v in values)


TRACKED_AXES = {
    AbsCode.ABS_X: "x",
    AbsCode.ABS_Y: "y",
    AbsCode.ABS_PRESSURE: "pressure",
    AbsCode.ABS_DISTANCE: "distance",
    AbsCode.ABS_TILT_X: "tilt_x",
    AbsCode.ABS_TILT_Y: "tilt_y",
}


class TabletTracker:
    """Remembers the last absolute value of each pen axis and reports them all on every SYN."""

    def __init__(self):
        self.position = TabletPosition()

    def feed(self, evt: RawEvent) -> list[str]:
        match evt:
            case RawEvent(type=EventType.EV_ABS) if evt.code in TRACKED_AXES:
                setattr(self.position, TRACKED_AXES[evt.code], evt.value)
            case RawEvent(type=EventType.EV_ABS):
                return ["?? " + format_raw_event(evt)]
            case RawEvent(is_terminator=True):
                return [self.position.format()]
        return []


class LineFormatter(typing.Protocol):
    def feed(self, evt: RawEvent) -> list[str]: ...
