"""
Asynchronous external process primitive.

Runs an executable with an argument list and a working directory, forwards
stdout/stderr line-by-line to an output sink and reports the exit code.
Waiting for the process suspends the calling coroutine; no thread is held
for the lifetime of the process.

Classes:
    OutputSink: Protocol for receiving human-readable output lines
    LoggingSink: OutputSink that writes to a logger
    ProcessInvocationResult: Outcome of one process invocation
    ProcessOutput: Async context manager wrapping a running process

Example:
    async with ProcessOutput("npm", ["--version"], cwd=Path.cwd(), sink=sink) as proc:
        if proc.is_started:
            exit_code = await proc.wait()
"""

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from typingskit.core.exceptions import ProcessStartError

logger = logging.getLogger(__name__)

# Stream buffer limit; longer lines are forwarded in pieces
STREAM_LIMIT = 1024 * 1024


class OutputSink(Protocol):
    """Receives human-readable progress and error lines."""

    def write_line(self, line: str) -> None: ...

    def write_error_line(self, line: str) -> None: ...


class LoggingSink:
    """
    OutputSink that forwards lines to a logger.

    Regular lines are logged at INFO, error lines at ERROR.
    """

    def __init__(self, target: Optional[logging.Logger] = None):
        self.logger = target or logger

    def write_line(self, line: str) -> None:
        self.logger.info(line)

    def write_error_line(self, line: str) -> None:
        self.logger.error(line)


@dataclass(frozen=True)
class ProcessInvocationResult:
    """
    Outcome of one process invocation.

    Attributes:
        started: Whether the process could be launched
        exit_code: Exit code once the process completed, None otherwise
    """

    started: bool
    exit_code: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.started and self.exit_code == 0


def quote_arg(arg: str) -> str:
    """
    Quote a single command-line argument if it needs quoting.

    Args:
        arg: Argument to quote

    Returns:
        The argument, wrapped in double quotes when it is empty or contains
        whitespace or quote characters

    Example:
        >>> quote_arg("dt~lodash")
        'dt~lodash'
        >>> quote_arg("C:/Program Files/x")
        '"C:/Program Files/x"'
    """
    if not arg:
        return '""'
    if any(c.isspace() for c in arg) or '"' in arg:
        return '"' + arg.replace('"', '\\"') + '"'
    return arg


class ProcessOutput:
    """
    A single run of an external process with forwarded output.

    Use as an async context manager: entering starts the process, leaving
    kills it if it is still running. A failure to launch is not raised;
    it is written to the sink and leaves `is_started` False.

    Attributes:
        executable: Program to run
        args: Arguments passed to the program
        cwd: Working directory
        sink: Optional receiver of stdout (write_line) and stderr
              (write_error_line) lines
        quote_args: Quote each argument individually when building the
                    command line
    """

    def __init__(
        self,
        executable,
        args: Sequence[str],
        cwd: Path,
        sink: Optional[OutputSink] = None,
        env: Optional[Dict[str, str]] = None,
        quote_args: bool = True,
    ):
        self.executable = str(executable)
        self.args: List[str] = [str(a) for a in args]
        self.cwd = Path(cwd)
        self.sink = sink
        self.env = env
        self.quote_args = quote_args

        self._process: Optional[asyncio.subprocess.Process] = None
        self._pumps: List[asyncio.Task] = []
        self._exit_code: Optional[int] = None

    @property
    def command_line(self) -> str:
        """The full command line, as shown to users and run on Windows."""
        parts = [self.executable] + self.args
        if self.quote_args:
            parts = [quote_arg(p) for p in parts]
        return " ".join(parts)

    @property
    def is_started(self) -> bool:
        return self._process is not None

    @property
    def exit_code(self) -> Optional[int]:
        return self._exit_code

    @property
    def result(self) -> ProcessInvocationResult:
        return ProcessInvocationResult(started=self.is_started, exit_code=self._exit_code)

    async def start(self) -> bool:
        """
        Launch the process.

        Returns:
            True if the process started, False otherwise (the reason is
            written to the sink as an error line)
        """
        if self._process is not None:
            return True

        logger.debug(f"Starting process: {self.command_line} (cwd={self.cwd})")

        try:
            self._process = await self._spawn()
        except OSError as e:
            error = ProcessStartError(self.executable, str(e))
            logger.warning(str(error))
            if self.sink is not None:
                self.sink.write_error_line(str(error))
            return False

        self._pumps = [
            asyncio.create_task(
                self._pump(self._process.stdout, self._forward(is_error=False))
            ),
            asyncio.create_task(
                self._pump(self._process.stderr, self._forward(is_error=True))
            ),
        ]
        return True

    async def _spawn(self) -> asyncio.subprocess.Process:
        if os.name == "nt":
            # .cmd scripts have to go through cmd.exe, which does not report
            # a missing program as a launch failure
            if not Path(self.executable).exists() and not shutil.which(
                self.executable
            ):
                raise FileNotFoundError(f"No such file: {self.executable}")
            return await asyncio.create_subprocess_shell(
                self.command_line,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
                env=self.env,
                limit=STREAM_LIMIT,
            )

        return await asyncio.create_subprocess_exec(
            self.executable,
            *self.args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=self.cwd,
            env=self.env,
            limit=STREAM_LIMIT,
        )

    def _forward(self, is_error: bool) -> Optional[Callable[[str], None]]:
        if self.sink is None:
            return None
        return self.sink.write_error_line if is_error else self.sink.write_line

    @staticmethod
    async def _pump(stream, write: Optional[Callable[[str], None]]) -> None:
        """
        Forward a stream line by line until EOF.

        A line longer than STREAM_LIMIT is forwarded in STREAM_LIMIT-sized
        pieces instead of failing the read.
        """
        split_line = False
        while True:
            try:
                raw = await stream.readuntil(b"\n")
            except asyncio.IncompleteReadError as e:
                # EOF; the last line may lack a newline
                raw = e.partial
                if raw and write is not None:
                    write(raw.decode(errors="replace").rstrip("\r\n"))
                break
            except asyncio.LimitOverrunError as e:
                piece = await stream.read(min(max(e.consumed, 1), STREAM_LIMIT))
                if not piece:
                    break
                split_line = True
                if write is not None:
                    write(piece.decode(errors="replace"))
                continue

            line = raw.decode(errors="replace").rstrip("\r\n")
            if split_line and not line:
                # Only the newline of an already forwarded long line was left
                split_line = False
                continue
            split_line = False
            if write is not None:
                write(line)

    async def wait(self) -> int:
        """
        Wait for the process to exit and its output to be forwarded.

        Returns:
            Process exit code

        Raises:
            ProcessStartError: If the process was never started
        """
        if self._process is None:
            raise ProcessStartError(self.executable, "process was not started")

        if self._pumps:
            await asyncio.gather(*self._pumps)
        self._exit_code = await self._process.wait()
        logger.debug(f"Process exited with code {self._exit_code}: {self.executable}")
        return self._exit_code

    def kill(self) -> None:
        """Forcibly terminate the process; a no-op once it has exited."""
        if self._process is None:
            return
        try:
            self._process.kill()
        except ProcessLookupError:
            logger.debug(f"Process already exited: {self.executable}")

    async def __aenter__(self) -> "ProcessOutput":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._process is None:
            return
        if self._process.returncode is None:
            self.kill()
            await self._process.wait()
        for pump in self._pumps:
            if not pump.done():
                pump.cancel()
