"""Local rustfmt invocation."""

import asyncio
import logging

from .errors import FormatToolError
from .models import Edition, ToolResult

logger = logging.getLogger("playbot.playground.rustfmt")


class RustFormatter:
    """Runs rustfmt as a subprocess: source on stdin, result on stdout/stderr.

    A rustfmt that runs but rejects the code gives a ToolResult with
    success=False. A rustfmt that can't run at all raises FormatToolError.
    """

    def __init__(self, executable: str = "rustfmt", timeout: float = 10.0):
        self.executable = executable
        self.timeout = timeout

    async def format(self, text: str, edition: Edition) -> ToolResult:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.executable, "--edition", edition.value, "--color", "never",
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise FormatToolError(f"couldn't run {self.executable}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(text.encode("utf-8")), timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise FormatToolError(f"{self.executable} timed out after {self.timeout}s") from None

        return ToolResult(
            success=proc.returncode == 0,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
