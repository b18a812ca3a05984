"""
Repository state domain object for lapupdater.

RepositoryState is derived from `git status -sb` output and never stored.
The classification rules live here so that detection and presentation
share them.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List

# `git status -sb` may be produced with either newline convention.
_LINE_SPLIT = re.compile(r'\r\n|\n')

AHEAD_TOKEN = "ahead"


def split_status_lines(output: str) -> List[str]:
    """Split status output on any newline convention, dropping empty lines."""
    if not output:
        return []
    return [line for line in _LINE_SPLIT.split(output) if line]


def is_ahead_summary(summary_line: str) -> bool:
    """
    True when a branch-summary line reports the branch ahead of upstream.

    Matches the English token only, e.g. "## main...origin/main [ahead 2]".
    """
    return AHEAD_TOKEN in summary_line.lower()


@dataclass(frozen=True)
class RepositoryState:
    """Classification of one status check."""
    has_uncommitted_changes: bool = False
    is_ahead_of_remote: bool = False

    @property
    def has_changes(self) -> bool:
        return self.has_uncommitted_changes or self.is_ahead_of_remote

    @classmethod
    def from_status_output(cls, output: str) -> 'RepositoryState':
        """
        Classify short/branch status output.

        The first line is the branch summary; any further line is a
        working-tree or index entry. Empty output classifies as clean.
        """
        lines = split_status_lines(output)
        if not lines:
            return cls()

        return cls(
            has_uncommitted_changes=len(lines) > 1,
            is_ahead_of_remote=is_ahead_summary(lines[0]),
        )

    @property
    def label(self) -> str:
        """Short human-readable status, as shown next to the actions."""
        if not self.has_changes:
            return "No changes"
        if self.has_uncommitted_changes:
            return "Changes found"
        return "Commits pending push"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'has_uncommitted_changes': self.has_uncommitted_changes,
            'is_ahead_of_remote': self.is_ahead_of_remote,
            'has_changes': self.has_changes,
            'label': self.label,
        }
