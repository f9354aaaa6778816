# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import enum
import struct
import typing

import msgspec

if typing.TYPE_CHECKING:
    import libevdev

# struct input_event from linux/input.h, as laid out on 64-bit platforms:
# two 64-bit timeval fields, __u16 type, __u16 code, __s32 value.
INPUT_EVENT = struct.Struct("=QQHHi")
RECORD_SIZE = INPUT_EVENT.size


class EventType(enum.IntEnum):
    EV_SYN = 0x00
    EV_KEY = 0x01
    EV_REL = 0x02
    EV_ABS = 0x03
    EV_MSC = 0x04
    EV_SW = 0x05
    EV_LED = 0x11
    EV_SND = 0x12
    EV_REP = 0x14
    EV_FF = 0x15
    EV_FF_STATUS = 0x17


class SynCode(enum.IntEnum):
    SYN_REPORT = 0
    SYN_CONFIG = 1
    SYN_MT_REPORT = 2
    SYN_DROPPED = 3


# The ShuttlePRO v2 reports its fifteen buttons starting at BTN_0.
class KeyCode(enum.IntEnum):
    BTN_0 = 0x100
    BTN_1 = 0x101
    BTN_2 = 0x102
    BTN_3 = 0x103
    BTN_4 = 0x104
    BTN_5 = 0x105
    BTN_6 = 0x106
    BTN_7 = 0x107
    BTN_8 = 0x108
    BTN_9 = 0x109
    BTN_LEFT = 0x110
    BTN_RIGHT = 0x111
    BTN_MIDDLE = 0x112
    BTN_SIDE = 0x113
    BTN_EXTRA = 0x114
    BTN_TOOL_PEN = 0x140
    BTN_TOUCH = 0x14A
    BTN_STYLUS = 0x14B


class RelCode(enum.IntEnum):
    REL_X = 0x00
    REL_Y = 0x01
    REL_Z = 0x02
    REL_RX = 0x03
    REL_RY = 0x04
    REL_RZ = 0x05
    REL_HWHEEL = 0x06
    # the shuttle ring
    REL_DIAL = 0x07
    # the jog dial
    REL_WHEEL = 0x08
    REL_MISC = 0x09


class AbsCode(enum.IntEnum):
    ABS_X = 0x00
    ABS_Y = 0x01
    ABS_Z = 0x02
    ABS_WHEEL = 0x08
    ABS_PRESSURE = 0x18
    ABS_DISTANCE = 0x19
    ABS_TILT_X = 0x1A
    ABS_TILT_Y = 0x1B
    ABS_TOOL_WIDTH = 0x1C
    ABS_MISC = 0x28


class MscCode(enum.IntEnum):
    MSC_SERIAL = 0x00
    MSC_PULSELED = 0x01
    MSC_GESTURE = 0x02
    MSC_RAW = 0x03
    MSC_SCAN = 0x04


CODES_BY_TYPE: dict[EventType, type[enum.IntEnum]] = {
    EventType.EV_SYN: SynCode,
    EventType.EV_KEY: KeyCode,
    EventType.EV_REL: RelCode,
    EventType.EV_ABS: AbsCode,
    EventType.EV_MSC: MscCode,
}

TYPE_LABELS = {
    EventType.EV_SYN: "SYN",
    EventType.EV_KEY: "KEY",
    EventType.EV_REL: "REL",
    EventType.EV_ABS: "ABS",
    EventType.EV_MSC: "MSC",
    EventType.EV_SW: "SW ",
    EventType.EV_LED: "LED",
    EventType.EV_SND: "SND",
    EventType.EV_REP: "REP",
    EventType.EV_FF: "FF ",
    EventType.EV_FF_STATUS: "FFStat",
}


def type_string(event_type: int) -> str:
    return TYPE_LABELS.get(event_type, "???")


class RawEvent(msgspec.Struct, frozen=True):
    time_secs: int
    time_usecs: int
    type: int
    code: int
    value: int

    @property
    def is_terminator(self) -> bool:
        return self.type == EventType.EV_SYN

    def pack(self) -> bytes:
        return INPUT_EVENT.pack(self.time_secs, self.time_usecs, self.type, self.code, self.value)

    @classmethod
    def unpack(cls, record: bytes) -> RawEvent:
        return cls(*INPUT_EVENT.unpack(record))

    @classmethod
    def from_libevdev_event(cls, evt: libevdev.InputEvent) -> RawEvent:
        return cls(
            time_secs=evt.sec,
            time_usecs=evt.usec,
            type=evt.type.value,
            code=evt.code.value,
            value=evt.value,
        )

    @classmethod
    def from_log(cls, type: str, code: str | int, value: int, seconds: int = 0, microseconds: int = 0) -> RawEvent:
        event_type = EventType[type]
        if isinstance(code, str):
            code = CODES_BY_TYPE[event_type][code]
        return cls(time_secs=seconds, time_usecs=microseconds, type=event_type.value, code=int(code), value=value)


class EventSource(typing.Protocol):
    def __enter__(self): ...

    def __exit__(self, _exc_type, _exc_value, _traceback): ...

    def stream(self) -> collections.abc.AsyncIterator[RawEvent]: ...
