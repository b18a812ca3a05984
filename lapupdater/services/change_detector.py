"""
Change detection for lapupdater.

Decides whether the website repository has anything to publish: either
uncommitted changes in the working tree/index, or local commits that the
remote does not have yet.
"""

import logging
from typing import Callable, Optional

from ..domain.command import CommandResult
from ..domain.repository import RepositoryState
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

LogSink = Callable[[str], None]


def append_command_result(log: LogSink, result: CommandResult) -> None:
    """Append captured output and exit code to an observation log."""
    for line in result.log_lines():
        log(line)


class ChangeDetector:
    """
    Classifies repository state after refreshing remote-tracking refs.

    Example:
        detector = ChangeDetector(log=print)
        state = await detector.detect("/path/to/website")
        if state.has_changes:
            ...
    """

    def __init__(self, git_client: Optional[GitClient] = None, log: Optional[LogSink] = None):
        """
        Initialize ChangeDetector.

        Args:
            git_client: GitClient instance (creates new if None)
            log: Observation log sink (logs at INFO if None)
        """
        self.git = git_client or GitClient()
        self.log = log or logger.info
        self.last_state: Optional[RepositoryState] = None

    async def detect(self, working_dir: str) -> RepositoryState:
        """
        Fetch, then classify `git status -sb` output.

        The fetch result is logged but never gates the status read; a failed
        fetch still allows a best-effort local classification.
        """
        self.log("Running git fetch (compare with remote)...")
        fetch_result = await self.git.fetch(working_dir)
        append_command_result(self.log, fetch_result)
        if not fetch_result.ok:
            logger.warning(f"git fetch failed in {working_dir} (exit {fetch_result.exit_code})")

        self.log("Running git status...")
        status_result = await self.git.status(working_dir)
        append_command_result(self.log, status_result)

        state = RepositoryState.from_status_output(status_result.stdout)
        self.last_state = state

        if not state.has_changes:
            self.log("No changes detected (local + remote).")
        elif not state.has_uncommitted_changes:
            self.log("Local branch is ahead of remote: push required.")

        return state
