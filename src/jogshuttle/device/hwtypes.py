from __future__ import annotations

import msgspec

from ..commontypes import JogShuttleError


class HardwareError(JogShuttleError):
    pass


class DeviceDisconnectedError(HardwareError):
    pass


class DeviceGrabError(HardwareError):
    pass


class CombinedEvent(msgspec.Struct, frozen=True, kw_only=True):
    """Everything the device reported between two SYN_REPORTs."""

    time_secs: int
    time_usecs: int
    jog_state: int = 0
    shuttle_state: int = 0
    key_code: int = 0
    key_value: int = 0


JOG_FORWARD = "jog_forward"
JOG_BACKWARD = "jog_backward"
SHUTTLE_FORWARD = "shuttle_forward"
SHUTTLE_BACKWARD = "shuttle_backward"


def key_down(code: int) -> str:
    return f"key_down_{code}"


def key_up(code: int) -> str:
    return f"key_up_{code}"
