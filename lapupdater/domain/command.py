"""
Command result domain object for lapupdater.

A CommandResult is the outcome of one external process invocation.
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable


@dataclass(frozen=True)
class CommandResult:
    """Captured output and exit code of a finished process."""
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0

    @classmethod
    def from_lines(
        cls,
        stdout_lines: Iterable[str],
        stderr_lines: Iterable[str],
        exit_code: int
    ) -> 'CommandResult':
        """Build a result, joining captured lines with the platform newline."""
        return cls(
            stdout=os.linesep.join(stdout_lines),
            stderr=os.linesep.join(stderr_lines),
            exit_code=exit_code,
        )

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def contains(self, phrase: str) -> bool:
        """Case-insensitive search over both captured streams."""
        needle = phrase.lower()
        return needle in self.stdout.lower() or needle in self.stderr.lower()

    def log_lines(self) -> list:
        """Lines to append to an observation log, in display order."""
        lines = []
        if self.stdout.strip():
            lines.append(self.stdout)
        if self.stderr.strip():
            lines.append(self.stderr)
        lines.append(f"Exit code: {self.exit_code}")
        lines.append("")
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stdout': self.stdout,
            'stderr': self.stderr,
            'exit_code': self.exit_code,
        }
