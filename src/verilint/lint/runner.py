"""Child process execution for verilator."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import structlog

from verilint.core.errors import LintError
from verilint.lint.models import LintInvocation

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ProcessOutput:
    """Captured output of a finished child process."""

    returncode: int
    stdout: str
    stderr: str


class ProcessRunner:
    """Runs one invocation and captures its output.

    Verilator exits non-zero whenever it finds issues, so the exit code only
    gets logged. Only failing to start the process is an error; a bad
    argument (such as an embedded NUL) counts as failing to start.
    """

    def __init__(self, *, timeout_sec: float | None = None) -> None:
        self._timeout_sec = timeout_sec

    async def run(self, invocation: LintInvocation) -> ProcessOutput:
        try:
            proc = await asyncio.create_subprocess_exec(
                *invocation.argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=invocation.cwd,
            )
        except (OSError, ValueError) as e:
            log.error("linter launch failed", command=invocation.command, error=str(e))
            raise LintError.launch_failed(invocation.command, str(e)) from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(), timeout=self._timeout_sec
            )
        except TimeoutError as e:
            proc.kill()
            await proc.wait()
            log.error("linter timed out", command=invocation.command, timeout_sec=self._timeout_sec)
            raise LintError.timeout(invocation.command, self._timeout_sec or 0.0) from e

        returncode = proc.returncode if proc.returncode is not None else -1
        if returncode != 0:
            log.error(
                "linter exited with non-zero status",
                command=invocation.command,
                returncode=returncode,
            )

        return ProcessOutput(
            returncode=returncode,
            stdout=stdout_bytes.decode(errors="replace"),
            stderr=stderr_bytes.decode(errors="replace"),
        )
