import contextlib
import logging

import pytest
import trio
from trio.lowlevel import checkpoint

from jogshuttle.device.eventsource import RawEvent
from jogshuttle.device.frames import FrameCombiner, ShuttleReader
from jogshuttle.device.hwtypes import CombinedEvent


class SimpleEventSource(contextlib.AbstractContextManager):
    def __init__(self, events: list[RawEvent]):
        self._events = events
        self.entered = False

    def __enter__(self):
        self.entered = True
        return self

    async def stream(self):
        while self._events:
            await checkpoint()
            yield self._events.pop(0)

    def __exit__(self, _exc_type, _exc_value, _traceback):
        self.entered = False
        return None


def combine(events):
    combiner = FrameCombiner()
    return [frame for frame in (combiner.feed(evt) for evt in events) if frame is not None]


# captured from a ShuttlePRO v2: shuttle turned a notch, jog held, then button 5 pressed and released
SHUTTLE_SESSION = [
    RawEvent.from_log("EV_REL", "REL_DIAL", value=3, seconds=1376, microseconds=100017),
    RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0, seconds=1376, microseconds=100017),
    RawEvent.from_log("EV_REL", "REL_DIAL", value=4, seconds=1376, microseconds=340012),
    RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0, seconds=1376, microseconds=340012),
    RawEvent.from_log("EV_REL", "REL_WHEEL", value=2, seconds=1377, microseconds=8013),
    RawEvent.from_log("EV_REL", "REL_DIAL", value=4, seconds=1377, microseconds=8013),
    RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0, seconds=1377, microseconds=8013),
    RawEvent.from_log("EV_MSC", "MSC_SCAN", value=0x90005, seconds=1378, microseconds=512000),
    RawEvent.from_log("EV_KEY", "BTN_4", value=1, seconds=1378, microseconds=512000),
    RawEvent.from_log("EV_REL", "REL_DIAL", value=4, seconds=1378, microseconds=512000),
    RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0, seconds=1378, microseconds=512000),
    RawEvent.from_log("EV_MSC", "MSC_SCAN", value=0x90005, seconds=1378, microseconds=640000),
    RawEvent.from_log("EV_KEY", "BTN_4", value=0, seconds=1378, microseconds=640000),
    RawEvent.from_log("EV_REL", "REL_DIAL", value=4, seconds=1378, microseconds=640000),
    RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0, seconds=1378, microseconds=640000),
]


def test_one_frame_per_terminator():
    frames = combine(SHUTTLE_SESSION)
    assert frames == [
        CombinedEvent(time_secs=1376, time_usecs=100017, jog_state=0, shuttle_state=3),
        CombinedEvent(time_secs=1376, time_usecs=340012, jog_state=0, shuttle_state=4),
        CombinedEvent(time_secs=1377, time_usecs=8013, jog_state=2, shuttle_state=4),
        CombinedEvent(time_secs=1378, time_usecs=512000, shuttle_state=4, key_code=260, key_value=1),
        CombinedEvent(time_secs=1378, time_usecs=640000, shuttle_state=4, key_code=260, key_value=0),
    ]


def test_last_write_wins():
    frames = combine(
        [
            RawEvent.from_log("EV_REL", "REL_WHEEL", value=3),
            RawEvent.from_log("EV_REL", "REL_WHEEL", value=-4),
            RawEvent.from_log("EV_REL", "REL_DIAL", value=10),
            RawEvent.from_log("EV_REL", "REL_DIAL", value=12),
            RawEvent.from_log("EV_KEY", "BTN_0", value=1),
            RawEvent.from_log("EV_KEY", "BTN_1", value=0),
            RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0, seconds=5, microseconds=6),
        ]
    )
    assert frames == [CombinedEvent(time_secs=5, time_usecs=6, jog_state=-4, shuttle_state=12, key_code=257, key_value=0)]


def test_fields_do_not_leak_between_frames():
    frames = combine(
        [
            RawEvent.from_log("EV_REL", "REL_WHEEL", value=7),
            RawEvent.from_log("EV_REL", "REL_DIAL", value=200),
            RawEvent.from_log("EV_KEY", "BTN_2", value=1),
            RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0, seconds=1),
            RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0, seconds=2),
        ]
    )
    assert frames[1] == CombinedEvent(time_secs=2, time_usecs=0)
    assert frames[1].jog_state == 0
    assert frames[1].shuttle_state == 0
    assert (frames[1].key_code, frames[1].key_value) == (0, 0)


def test_no_frame_without_terminator():
    assert combine([RawEvent.from_log("EV_REL", "REL_WHEEL", value=3), RawEvent.from_log("EV_KEY", "BTN_0", value=1)]) == []


def test_unrecognized_events_are_logged(caplog: pytest.LogCaptureFixture):
    combiner = FrameCombiner()
    combiner.feed(RawEvent.from_log("EV_REL", "REL_WHEEL", value=5))
    with caplog.at_level(logging.WARNING):
        assert combiner.feed(RawEvent.from_log("EV_ABS", "ABS_X", value=99, seconds=12, microseconds=34)) is None
        assert combiner.feed(RawEvent(time_secs=12, time_usecs=35, type=0x1F, code=3, value=-1)) is None
        assert combiner.feed(RawEvent.from_log("EV_REL", "REL_X", value=1)) is None
    messages = [r.getMessage() for r in caplog.records]
    assert len(messages) == 3
    assert messages[0] == "Unrecognized event 12.000034 -> ABS(3),0,99"
    assert "???(31),3,-1" in messages[1]
    # the pending jog value survives the unknown events
    frame = combiner.feed(RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0))
    assert frame.jog_state == 5


def test_scancodes_are_ignored(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING):
        frames = combine([RawEvent.from_log("EV_MSC", "MSC_SCAN", value=0x90001), RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0)])
    assert frames == [CombinedEvent(time_secs=0, time_usecs=0)]
    assert caplog.records == []


def test_custom_axis_codes():
    combiner = FrameCombiner(shuttle_code=6, jog_code=9)
    combiner.feed(RawEvent.from_log("EV_REL", "REL_HWHEEL", value=42))
    combiner.feed(RawEvent.from_log("EV_REL", "REL_MISC", value=-3))
    frame = combiner.feed(RawEvent.from_log("EV_SYN", "SYN_REPORT", value=0))
    assert (frame.shuttle_state, frame.jog_state) == (42, -3)


async def test_reader_sends_frames_and_closes(nursery: trio.Nursery):
    source = SimpleEventSource(list(SHUTTLE_SESSION))
    send_channel, receive_channel = trio.open_memory_channel(100)
    reader = ShuttleReader(source, send_channel, FrameCombiner())
    await nursery.start(reader.run)
    with trio.fail_after(1):
        received = [frame async for frame in receive_channel]
    assert len(received) == 5
    assert received[-1].key_value == 0
    assert not source.entered
