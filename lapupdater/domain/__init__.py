"""
Domain layer for lapupdater.

Contains pure domain objects with no I/O or side effects:
- CommandResult: Outcome of one external process invocation
- RepositoryState: Classification of a `git status -sb` report
- PublishOutcome / PublishResult: Outcome of an add/commit/push sequence
- WebsiteConfig: The website's editable `src/data/config.json`
"""

from .command import CommandResult
from .repository import RepositoryState, split_status_lines, is_ahead_summary
from .operation import PublishOutcome, PublishStep, PublishResult
from .website import WebsiteConfig, EDITABLE_FIELDS

__all__ = [
    'CommandResult',
    'RepositoryState',
    'split_status_lines',
    'is_ahead_summary',
    'PublishOutcome',
    'PublishStep',
    'PublishResult',
    'WebsiteConfig',
    'EDITABLE_FIELDS',
]
