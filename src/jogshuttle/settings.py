import dataclasses
import datetime
import json
import pathlib
import typing

import cattrs

from .device.deviceutil import DEFAULT_DEVICE_PATH
from .device.eventsource import RelCode
from .durations import format_duration, parse_duration


def timedelta_seconds(seconds: datetime.timedelta | int | float | str):
    if isinstance(seconds, datetime.timedelta):
        return seconds
    if isinstance(seconds, (int, float)):
        return datetime.timedelta(seconds=seconds)
    return parse_duration(seconds)


settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(datetime.timedelta, format_duration)
settings_converter.register_structure_hook(datetime.timedelta, lambda d, _: timedelta_seconds(d))
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v))


@dataclasses.dataclass(frozen=True, kw_only=True)
class Settings:
    device_path: pathlib.Path = DEFAULT_DEVICE_PATH
    command: typing.Optional[str] = None
    verbose: bool = False
    grab: bool = False
    shuttle_code: int = RelCode.REL_DIAL.value
    jog_code: int = RelCode.REL_WHEEL.value
    # how long the decoder sleeps when the jog dial is at rest
    idle_poll_delay: datetime.timedelta = datetime.timedelta(seconds=60)
    # and how often it wakes while the dial is held off-center
    active_poll_delay: datetime.timedelta = datetime.timedelta(milliseconds=25)
    # interval between jog ticks at a jog magnitude of 1; divided by the magnitude
    jog_base_interval: datetime.timedelta = datetime.timedelta(milliseconds=575)
    # jog values within +/- this are treated as centered
    jog_dead_zone: int = 1

    def __post_init__(self):
        if self.jog_dead_zone < 0:
            raise ValueError(f"jog_dead_zone must not be negative, got {self.jog_dead_zone}")
        for name in ("idle_poll_delay", "active_poll_delay", "jog_base_interval"):
            if getattr(self, name) <= datetime.timedelta():
                raise ValueError(f"{name} must be positive, got {format_duration(getattr(self, name))}")

    def replace(self, **changes):
        return dataclasses.replace(self, **changes)

    def save(self, dest: pathlib.Path):
        raw = settings_converter.unstructure(self)
        with dest.open("w") as outfile:
            json.dump(raw, outfile, indent=2)

    @classmethod
    def load(cls, src: pathlib.Path):
        with src.open() as infile:
            raw = json.load(infile)
        return settings_converter.structure(raw, cls)

    @classmethod
    def defaults(cls):
        return cls()
