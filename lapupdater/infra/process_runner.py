"""
External process runner for lapupdater.

Spawns an executable in a working directory and captures stdout/stderr
in chunks while the process runs, so large outputs never fill a pipe
and stall the child. The exit code is read only after the process has
terminated.

The runner is awaitable and never blocks the event loop. It does not
serialize callers; workflows must await one invocation before starting
the next against the same working tree.
"""

import asyncio
import codecs
import logging
import shlex
from typing import List, Optional, Sequence, Union

from ..domain.command import CommandResult

logger = logging.getLogger(__name__)

Arguments = Union[str, Sequence[str]]


def _split_args(args: Arguments) -> List[str]:
    if isinstance(args, str):
        return shlex.split(args)
    return list(args)


# Bytes per read; no per-line limit applies
READ_CHUNK_SIZE = 65536


async def _drain(stream: Optional[asyncio.StreamReader], sink: List[str]) -> None:
    """Read a stream to EOF, appending decoded lines without terminators."""
    if stream is None:
        return
    decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
    parts: List[str] = []
    while True:
        chunk = await stream.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        parts.append(decoder.decode(chunk))
    parts.append(decoder.decode(b'', final=True))
    lines = ''.join(parts).split('\n')
    if lines[-1] == '':
        lines.pop()
    sink.extend(line.rstrip('\r') for line in lines)


class ProcessRunner:
    """
    Runs external commands and returns CommandResult objects.

    Example:
        runner = ProcessRunner()
        result = await runner.run("git", ["status", "-sb"], "/path/to/repo")
        if result.ok:
            print(result.stdout)
    """

    async def run(self, executable: str, args: Arguments, cwd: str) -> CommandResult:
        """
        Run `executable` with `args` in `cwd`.

        Args:
            executable: Program name or path
            args: Argument list, or a single string split shell-style
            cwd: Working directory

        Returns:
            CommandResult. A process that cannot be started yields exit
            code -1 with the error text on stderr.
        """
        argv = [executable] + _split_args(args)
        logger.debug(f"Running {shlex.join(argv)} in {cwd}")

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd or None,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(f"Failed to start {executable}: {e}")
            return CommandResult(stdout="", stderr=str(e), exit_code=-1)

        out_lines: List[str] = []
        err_lines: List[str] = []
        try:
            await asyncio.gather(
                _drain(process.stdout, out_lines),
                _drain(process.stderr, err_lines),
            )
            exit_code = await process.wait()
        finally:
            # Never leave the child running or unreaped
            if process.returncode is None:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
                await process.wait()

        logger.debug(f"{executable} exited with {exit_code}")
        return CommandResult.from_lines(out_lines, err_lines, exit_code)

    def run_sync(self, executable: str, args: Arguments, cwd: str) -> CommandResult:
        """Blocking convenience wrapper for scripts and tests."""
        return asyncio.run(self.run(executable, args, cwd))
