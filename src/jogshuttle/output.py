from __future__ import annotations

import abc
import logging
import subprocess
import sys
import typing

import trio

if typing.TYPE_CHECKING:
    from .settings import Settings

logger = logging.getLogger(__name__)


class Sink(abc.ABC):
    @abc.abstractmethod
    async def emit(self, action: str): ...


class PrintSink(Sink):
    def __init__(self, stream: typing.Optional[typing.TextIO] = None):
        self.stream = stream

    async def emit(self, action: str):
        # flush every line so a pipe reader sees each action as it happens
        print(action, file=self.stream or sys.stdout, flush=True)


class CommandSink(Sink):
    """Runs ``<command> <action>`` through the shell for every action.

    A failing command is logged and otherwise ignored. The command runs to
    completion before the next action, so a slow command holds up jog ticks.
    """

    def __init__(self, command: str, verbose: bool = False):
        self.command = command
        self.verbose = verbose

    async def emit(self, action: str):
        cmdline = f"{self.command} {action}"
        if self.verbose:
            logger.info("Calling %r", cmdline)
        result = await trio.run_process(cmdline, shell=True, check=False, capture_stdout=True, stderr=subprocess.STDOUT)
        output = result.stdout.decode(errors="replace")
        if result.returncode != 0:
            logger.warning("%r exited with %d: %s", cmdline, result.returncode, output)
        elif self.verbose and output:
            logger.info("%s", output.rstrip("\n"))


def make_sink(settings: Settings) -> Sink:
    if settings.command:
        return CommandSink(settings.command, verbose=settings.verbose)
    return PrintSink()
