"""
Publish sequencing for lapupdater.

Runs `git add .`, `git commit`, `git push` strictly one after another and
decides whether the publish succeeded. A commit that fails only because
there was nothing to commit is not a failure: the remote may simply be
behind an earlier local commit.
"""

import logging
from typing import Optional

from ..domain.command import CommandResult
from ..domain.operation import PublishOutcome, PublishResult, PublishStep
from ..infra.git_client import COMMIT_MESSAGE, GitClient
from .change_detector import LogSink, append_command_result

logger = logging.getLogger(__name__)

NOTHING_TO_COMMIT = "nothing to commit"


def is_noop_commit(result: CommandResult) -> bool:
    """
    True when a commit failed only because nothing was staged.

    Relies on git's English "nothing to commit" message in either stream.
    Swap this predicate for a tree-hash comparison to drop the text match.
    """
    return result.exit_code != 0 and result.contains(NOTHING_TO_COMMIT)


def commit_succeeded(result: CommandResult) -> bool:
    return result.exit_code == 0 or is_noop_commit(result)


class PublishSequencer:
    """
    Stages, commits and pushes the website repository.

    Example:
        sequencer = PublishSequencer(log=print)
        result = await sequencer.publish("/path/to/website")
        print(result.outcome)
    """

    def __init__(
        self,
        git_client: Optional[GitClient] = None,
        log: Optional[LogSink] = None
    ):
        """
        Initialize PublishSequencer.

        Args:
            git_client: GitClient instance (creates new if None)
            log: Observation log sink (logs at INFO if None)
        """
        self.git = git_client or GitClient()
        self.log = log or logger.info
        self.last_result: Optional[PublishResult] = None

    async def publish(self, working_dir: str) -> PublishResult:
        """
        Run add, commit and push, in that order, without short-circuiting.

        Returns:
            PublishResult with success flag, outcome and per-step results
        """
        result = PublishResult()
        self.last_result = result

        self.log("Running git add .")
        add = await self.git.add_all(working_dir)
        append_command_result(self.log, add)
        result.steps.append(PublishStep("add", add, succeeded=add.ok))

        self.log("Running git commit...")
        commit = await self.git.commit(working_dir, COMMIT_MESSAGE)
        append_command_result(self.log, commit)
        noop = is_noop_commit(commit)
        if noop:
            logger.debug("Nothing to commit; continuing with push")
        result.steps.append(PublishStep("commit", commit, succeeded=commit_succeeded(commit), noop=noop))

        self.log("Running git push...")
        push = await self.git.push(working_dir)
        append_command_result(self.log, push)
        result.steps.append(PublishStep("push", push, succeeded=push.ok))

        result.success = all(step.succeeded for step in result.steps)
        result.outcome = PublishOutcome.SUCCESS if result.success else PublishOutcome.FAILURE

        if not result.success:
            logger.warning(f"Publish failed in {working_dir}: {'; '.join(result.errors)}")

        return result
