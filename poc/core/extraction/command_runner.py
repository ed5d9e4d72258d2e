"""
Command runner module for WifiScout

Runs one platform diagnostic command through the host shell and captures its
standard output. Failures (missing tool, non-zero exit, timeout) come back as
a typed CommandResult instead of an exception so every extraction step can
degrade to an absent field.
"""

import asyncio
import logging
import os
import signal
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .identity import Outcome


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

# Upper bound on reaping a killed command tree
KILL_GRACE = 2.0

IS_WINDOWS = sys.platform.startswith('win')

# Exit codes the shell uses for "command not found" (sh/bash, cmd.exe)
NOT_FOUND_EXIT_CODES = (127, 9009)


class CommandFailure(str, Enum):
    NOT_FOUND = 'not_found'
    NON_ZERO_EXIT = 'non_zero_exit'
    TIMEOUT = 'timeout'

    @property
    def outcome(self) -> Outcome:
        if self is CommandFailure.TIMEOUT:
            return Outcome.COMMAND_TIMEOUT
        return Outcome.COMMAND_UNAVAILABLE


class CommandError(Exception):
    """Raised by CommandResult.text() when the command did not succeed"""

    def __init__(self, command: str, failure: CommandFailure, detail: str = ''):
        self.command = command
        self.failure = failure
        self.detail = detail
        super().__init__(f"{command!r} failed ({failure.value}){': ' + detail if detail else ''}")


@dataclass(frozen=True)
class CommandResult:
    command: str
    stdout: str = ''
    failure: Optional[CommandFailure] = None
    returncode: Optional[int] = None
    detail: str = ''

    @property
    def ok(self) -> bool:
        return self.failure is None

    def text(self) -> str:
        if self.failure is not None:
            raise CommandError(self.command, self.failure, self.detail)
        return self.stdout


class CommandRunner:
    """Runs a command line and reports the outcome. Subclassed by fakes in tests."""

    async def run(self, command_line: str, timeout: Optional[float] = None) -> CommandResult:  # pragma: no cover - interface
        raise NotImplementedError


class ShellCommandRunner(CommandRunner):
    """Execute command lines through the host shell without blocking the event loop"""

    def __init__(self, default_timeout: float = DEFAULT_TIMEOUT, encoding: str = 'utf-8'):
        self.default_timeout = default_timeout
        self.encoding = encoding

    async def run(self, command_line: str, timeout: Optional[float] = None) -> CommandResult:
        timeout = self.default_timeout if timeout is None else timeout
        try:
            proc = await asyncio.create_subprocess_shell(
                command_line,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                **self._group_options(),
            )
        except OSError as e:
            return self._finish(CommandResult(command_line, failure=CommandFailure.NOT_FOUND, detail=str(e)))

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            await self._kill(proc)
            return self._finish(CommandResult(
                command_line, failure=CommandFailure.TIMEOUT, detail=f'no exit after {timeout}s'
            ))

        out = stdout.decode(self.encoding, errors='replace')
        err = stderr.decode(self.encoding, errors='replace').strip()
        code = proc.returncode
        if code in NOT_FOUND_EXIT_CODES:
            result = CommandResult(command_line, out, CommandFailure.NOT_FOUND, code, err)
        elif code != 0:
            result = CommandResult(command_line, out, CommandFailure.NON_ZERO_EXIT, code, err)
        else:
            result = CommandResult(command_line, out, None, code)
        return self._finish(result)

    @staticmethod
    def _group_options() -> dict:
        """Start the shell as leader of its own process group so a timeout can kill the whole pipeline"""
        if IS_WINDOWS:
            return {'creationflags': subprocess.CREATE_NEW_PROCESS_GROUP}
        return {'start_new_session': True}

    @staticmethod
    async def _kill(proc) -> None:
        if IS_WINDOWS:
            await ShellCommandRunner._kill_tree_windows(proc)
        else:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
        try:
            await asyncio.wait_for(proc.wait(), timeout=KILL_GRACE)
        except asyncio.TimeoutError:
            logger.warning("pid %s still not reaped %.1fs after kill", proc.pid, KILL_GRACE)

    @staticmethod
    async def _kill_tree_windows(proc) -> None:
        try:
            killer = await asyncio.create_subprocess_exec(
                'taskkill', '/T', '/F', '/PID', str(proc.pid),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            await asyncio.wait_for(killer.wait(), timeout=KILL_GRACE)
        except (OSError, asyncio.TimeoutError) as e:
            logger.debug("taskkill for pid %s failed: %s", proc.pid, e)
        try:
            proc.kill()
        except ProcessLookupError:
            pass

    @staticmethod
    def _finish(result: CommandResult) -> CommandResult:
        if result.ok:
            logger.debug("command %r ok (%d bytes)", result.command, len(result.stdout))
        else:
            logger.debug("command %r failed: %s %s", result.command, result.failure.value, result.detail)
        return result
