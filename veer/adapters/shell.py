"""
Adapter for running OS shell commands.

The system agent never calls subprocess directly; it goes through a
ShellRunner so the dispatch tables can be tested with a fake runner.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from veer.exceptions import CommandError

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Outcome of a finished shell command."""

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout when present, otherwise stderr."""
        return self.stdout or self.stderr

    def check(self) -> "CommandResult":
        """Raise CommandError unless the command exited with status 0."""
        if not self.ok:
            raise CommandError(self.command, self.returncode, stderr=self.stderr, stdout=self.stdout)
        return self


class ShellRunner:
    """Runs commands through the platform shell using asyncio subprocesses."""

    def __init__(self, timeout: Optional[float] = 30.0):
        self.timeout = timeout

    async def run(self, command: str) -> CommandResult:
        """
        Run a command line and capture its output.

        A command that cannot be started, or that outlives the timeout, is
        reported as a failed result rather than raised.
        """
        logger.debug("Executing shell command", extra={"command": command})
        try:
            proc = await asyncio.create_subprocess_shell(
                command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(f"Failed to start command: {command}: {e}")
            return CommandResult(command, 127, "", str(e))

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.warning(f"Command timed out after {self.timeout}s: {command}")
            return CommandResult(command, -1, "", "Command timed out")

        return CommandResult(
            command,
            proc.returncode,
            stdout.decode(errors="replace"),
            stderr.decode(errors="replace"),
        )
