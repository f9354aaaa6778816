# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import datetime
import logging
import typing

import msgspec
import trio

from .hwtypes import (
    JOG_BACKWARD,
    JOG_FORWARD,
    SHUTTLE_BACKWARD,
    SHUTTLE_FORWARD,
    CombinedEvent,
    key_down,
    key_up,
)

if typing.TYPE_CHECKING:
    from ..output import Sink
    from ..settings import Settings

logger = logging.getLogger(__name__)

UNKNOWN_SHUTTLE_STATE = -1
# The shuttle ring counts 1..255 and never reports 0, so these two are neighbours.
SHUTTLE_LOW = 1
SHUTTLE_HIGH = 255


class DecoderState(msgspec.Struct, kw_only=True):
    jog_state: int = 0
    shuttle_state: int = UNKNOWN_SHUTTLE_STATE
    # trio clock reading of the last jog tick
    last_jog_trigger_time: typing.Optional[float] = None
    poll_delay: datetime.timedelta = datetime.timedelta(seconds=60)


def shuttle_direction(prior: int, new: int) -> typing.Optional[str]:
    if prior == SHUTTLE_LOW and new == SHUTTLE_HIGH:
        return SHUTTLE_BACKWARD
    if (prior == SHUTTLE_HIGH and new == SHUTTLE_LOW) or new > prior:
        return SHUTTLE_FORWARD
    if new < prior:
        return SHUTTLE_BACKWARD
    return None


class ActionDecoder:
    """Turns CombinedEvents into action names.

    Keys and the shuttle ring map directly onto frames. The jog dial only
    reports its position, so while it is held off-center the decoder keeps
    producing jog ticks from the elapsed time alone, at a rate proportional to
    how far the dial is turned.
    """

    def __init__(self, settings: Settings):
        self.idle_poll_delay = settings.idle_poll_delay
        self.active_poll_delay = settings.active_poll_delay
        self.jog_base_interval = settings.jog_base_interval
        self.jog_dead_zone = settings.jog_dead_zone
        self.state = DecoderState(poll_delay=self.idle_poll_delay)

    def is_centered(self, jog_state: int):
        return -self.jog_dead_zone <= jog_state <= self.jog_dead_zone

    def on_frame(self, ev: CombinedEvent) -> list[str]:
        actions = []
        state = self.state
        if ev.key_code != 0:
            # a key in the same frame as a dial movement wins; the movement is still recorded below
            actions.append(key_down(ev.key_code) if ev.key_value == 1 else key_up(ev.key_code))
        elif ev.jog_state != state.jog_state:
            new_delay = self.idle_poll_delay if self.is_centered(ev.jog_state) else self.active_poll_delay
            if new_delay != state.poll_delay:
                logger.debug("Jog at %d, polling every %s", ev.jog_state, new_delay)
            state.poll_delay = new_delay
        elif ev.shuttle_state != state.shuttle_state and state.shuttle_state != UNKNOWN_SHUTTLE_STATE:
            direction = shuttle_direction(state.shuttle_state, ev.shuttle_state)
            if direction is not None:
                actions.append(direction)
        state.jog_state = ev.jog_state
        state.shuttle_state = ev.shuttle_state
        actions.extend(self.trigger_jog(state.jog_state))
        return actions

    def on_timeout(self) -> list[str]:
        if self.is_centered(self.state.jog_state):
            return []
        return self.trigger_jog(self.state.jog_state)

    def trigger_jog(self, jog_state: int) -> list[str]:
        if self.is_centered(jog_state):
            return []
        now = trio.current_time()
        wait = self.jog_base_interval.total_seconds() / abs(jog_state)
        if self.state.last_jog_trigger_time is None:
            # nothing to measure against yet, so fire straight away
            elapsed = 1.0
        else:
            elapsed = now - self.state.last_jog_trigger_time
        if elapsed < wait:
            return []
        self.state.last_jog_trigger_time = now
        return [JOG_FORWARD if jog_state > 0 else JOG_BACKWARD]

    async def run(self, source: trio.abc.ReceiveChannel[CombinedEvent], sink: Sink, *, task_status=trio.TASK_STATUS_IGNORED):
        async with source:
            task_status.started()
            while True:
                actions = None
                with trio.move_on_after(self.state.poll_delay.total_seconds()):
                    try:
                        ev = await source.receive()
                    except trio.EndOfChannel:
                        logger.debug("Frame channel closed; decoder stopping")
                        return
                    actions = self.on_frame(ev)
                if actions is None:
                    actions = self.on_timeout()
                for action in actions:
                    await sink.emit(action)
