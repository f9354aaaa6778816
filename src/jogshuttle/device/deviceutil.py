from __future__ import annotations

import collections.abc
import contextlib
import errno
import fcntl
import logging
import os
import pathlib

import trio

from ..commontypes import NotInContextError
from .eventsource import RECORD_SIZE, RawEvent
from .hwtypes import DeviceDisconnectedError, DeviceGrabError

logger = logging.getLogger(__name__)

DEFAULT_DEVICE_PATH = pathlib.Path("/dev/input/by-id/usb-Contour_Design_ShuttlePRO_v2-event-if00")


class EventDevice(contextlib.AbstractContextManager):
    # libevdev hands back whatever is queued and then stops; this is how long to wait before asking again.
    poll_interval = 1 / 120

    def __init__(self, device_path: str | pathlib.Path, grab=False):
        self.grab_device = grab
        if not isinstance(device_path, pathlib.Path):
            device_path = pathlib.Path(device_path)
        if not device_path.is_absolute():
            raise ValueError("Device path must be absolute")
        self.device_path = device_path
        self._f = None
        self._d = None

    def open(self):
        import libevdev

        self._f = self.device_path.open("rb", buffering=0)
        fcntl.fcntl(self._f, fcntl.F_SETFL, os.O_NONBLOCK)
        self._d = libevdev.Device(self._f)
        if not self.grab_device:
            return
        try:
            self._d.grab()
        except libevdev.device.DeviceGrabError as exc:
            self.close()
            raise DeviceGrabError(f"{self.device_path} is already grabbed") from exc
        except OSError as exc:
            self.close()
            if exc.errno == errno.ENODEV:
                raise DeviceDisconnectedError() from exc
            raise

    def close(self):
        # closing the file also releases any grab
        if self._f is not None:
            self._f.close()
        self._d = None
        self._f = None

    def __enter__(self):
        self.open()
        logger.debug("Opened %s (grabbed: %r)", self.device_path, self.grab_device)
        return self

    def events(self) -> collections.abc.Iterator[RawEvent]:
        if self._d is None:
            raise NotInContextError()

        import libevdev

        resyncing = False
        events = self._d.events()
        while True:
            if resyncing:
                # everything up to and including the next SYN_REPORT is stale
                for evt in events:
                    if evt.code == libevdev.EV_SYN.SYN_REPORT:
                        break
                logger.debug("Resynced %s after dropped events", self.device_path)
                resyncing = False
            else:
                try:
                    evt = next(events)
                except StopIteration:
                    return
                except libevdev.EventsDroppedException:
                    resyncing = True
                except OSError as exc:
                    if exc.errno == errno.ENODEV:
                        raise DeviceDisconnectedError() from exc
                    raise
                else:
                    yield RawEvent.from_libevdev_event(evt)

    async def stream(self) -> collections.abc.AsyncIterator[RawEvent]:
        while True:
            for evt in self.events():
                await trio.lowlevel.checkpoint()
                yield evt
            await trio.sleep(self.poll_interval)

    def __exit__(self, _exc_type, _exc_value, _traceback):
        self.close()
        return False  # to reraise exceptions if needed


class RecordFile(contextlib.AbstractContextManager):
    """Reads native input_event records straight from a file.

    Works on a device node as well as on a capture made with
    ``cat /dev/input/eventN > capture``. The stream ends at EOF.
    """

    def __init__(self, path: str | pathlib.Path):
        self.path = pathlib.Path(path)
        self._f = None

    def __enter__(self):
        self._f = self.path.open("rb", buffering=0)
        return self

    async def stream(self) -> collections.abc.AsyncIterator[RawEvent]:
        if self._f is None:
            raise NotInContextError()
        while True:
            record = await trio.to_thread.run_sync(self._f.read, RECORD_SIZE, abandon_on_cancel=True)
            if not record:
                return
            if len(record) < RECORD_SIZE:
                logger.warning("Discarding truncated %d-byte record at the end of %s", len(record), self.path)
                return
            yield RawEvent.unpack(record)

    def __exit__(self, _exc_type, _exc_value, _traceback):
        self._f.close()
        self._f = None
        return False


def open_event_source(path: pathlib.Path, grab=False):
    if path.is_char_device():
        return EventDevice(path.absolute(), grab=grab)
    if grab:
        logger.warning("%s is not a character device; ignoring --grab", path)
    return RecordFile(path)
