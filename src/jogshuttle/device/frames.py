# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing
from contextlib import aclosing

import msgspec
import trio

from .eventsource import EventSource, EventType, RawEvent, RelCode, type_string
from .hwtypes import CombinedEvent

logger = logging.getLogger(__name__)


class WipFrame(msgspec.Struct, kw_only=True):
    jog_state: typing.Optional[int] = None
    shuttle_state: typing.Optional[int] = None
    key_code: int = 0
    key_value: int = 0

    def finalize(self, terminator: RawEvent):
        return CombinedEvent(
            time_secs=terminator.time_secs,
            time_usecs=terminator.time_usecs,
            jog_state=0 if self.jog_state is None else self.jog_state,
            shuttle_state=0 if self.shuttle_state is None else self.shuttle_state,
            key_code=self.key_code,
            key_value=self.key_value,
        )

    def clear(self):
        self.jog_state = None
        self.shuttle_state = None
        self.key_code = 0
        self.key_value = 0


class FrameCombiner:
    """Folds each run of raw events ending in a SYN into one CombinedEvent.

    The ShuttlePRO v2 re-sends the jog and shuttle positions with every
    report while they are non-zero, so a frame holds the whole device state.
    Axes missing from a frame read as 0.
    """

    def __init__(self, shuttle_code: int = RelCode.REL_DIAL, jog_code: int = RelCode.REL_WHEEL):
        self.shuttle_code = shuttle_code
        self.jog_code = jog_code
        self.wip = WipFrame()

    def feed(self, evt: RawEvent) -> typing.Optional[CombinedEvent]:
        match evt:
            case RawEvent(type=EventType.EV_MSC):
                # scancodes duplicate the key events
                pass
            case RawEvent(type=EventType.EV_REL, code=self.shuttle_code):
                self.wip.shuttle_state = evt.value
            case RawEvent(type=EventType.EV_REL, code=self.jog_code):
                self.wip.jog_state = evt.value
            case RawEvent(type=EventType.EV_KEY):
                self.wip.key_code = evt.code
                self.wip.key_value = evt.value
            case RawEvent(is_terminator=True):
                combined = self.wip.finalize(evt)
                self.wip.clear()
                return combined
            case _:
                logger.warning(
                    "Unrecognized event %d.%06d -> %s(%d),%d,%d",
                    evt.time_secs,
                    evt.time_usecs,
                    type_string(evt.type),
                    evt.type,
                    evt.code,
                    evt.value,
                )
        return None


class ShuttleReader:
    def __init__(self, event_source: EventSource, channel: trio.abc.SendChannel[CombinedEvent], combiner: FrameCombiner):
        self.event_source = event_source
        self.channel = channel
        self.combiner = combiner

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        async with self.channel:
            with self.event_source:
                task_status.started()
                async with aclosing(self.event_source.stream()) as events:
                    async for evt in events:
                        combined = self.combiner.feed(evt)
                        if combined is not None:
                            await self.channel.send(combined)
        logger.debug("Event source exhausted")
