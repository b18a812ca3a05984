"""
Publish operation domain objects for lapupdater.

Provides the persisted PublishOutcome and the per-step results of one
add/commit/push sequence.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .command import CommandResult


class PublishOutcome(Enum):
    """Last publish outcome, persisted across sessions."""
    NONE = "none"
    SUCCESS = "success"
    FAILURE = "failure"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'PublishOutcome':
        """Parse a stored value, tolerating case and unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "none").strip().lower())
        except ValueError:
            return cls.NONE

    @property
    def label(self) -> str:
        if self is PublishOutcome.SUCCESS:
            return "Changes sent"
        if self is PublishOutcome.FAILURE:
            return "An error occurred!"
        return "No changes"


@dataclass
class PublishStep:
    """One git invocation within a publish sequence."""
    name: str  # "add", "commit", "push"
    result: CommandResult
    succeeded: bool
    noop: bool = False

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'step': self.name,
            'succeeded': self.succeeded,
        }
        if self.noop:
            d['noop'] = True
        d.update(self.result.to_dict())
        return d


@dataclass
class PublishResult:
    """Result of a full add/commit/push sequence."""
    success: bool = False
    outcome: PublishOutcome = PublishOutcome.NONE
    steps: List[PublishStep] = field(default_factory=list)

    def step(self, name: str) -> Optional[PublishStep]:
        for s in self.steps:
            if s.name == name:
                return s
        return None

    @property
    def errors(self) -> List[str]:
        errors = []
        for s in self.steps:
            if not s.succeeded:
                text = s.result.stderr.strip() or s.result.stdout.strip()
                errors.append(f"{s.name}: {text or f'exit code {s.result.exit_code}'}")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'type': 'publish',
            'success': self.success,
            'outcome': self.outcome.value,
            'steps': [s.to_dict() for s in self.steps],
            'errors': self.errors,
        }
