"""
Git client infrastructure for lapupdater.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Only the handful of operations the publish workflow needs are exposed;
this is not a general git client.
"""

import logging
from pathlib import Path
from typing import Optional

from ..domain.command import CommandResult
from .process_runner import ProcessRunner

logger = logging.getLogger(__name__)

COMMIT_MESSAGE = "Updated: Laptime"


class GitClient:
    """
    Abstraction over the git commands used by lapupdater.

    Every method returns the raw CommandResult; interpreting it is the
    caller's job.

    Example:
        client = GitClient()
        result = await client.status("/path/to/repo")
        print(result.stdout)
    """

    def __init__(self, runner: Optional[ProcessRunner] = None, executable: str = "git"):
        """
        Initialize GitClient.

        Args:
            runner: ProcessRunner instance (creates new if None)
            executable: git executable name or path
        """
        self.runner = runner or ProcessRunner()
        self.executable = executable

    async def _run(self, args: list, cwd: str) -> CommandResult:
        result = await self.runner.run(self.executable, args, cwd)
        if not result.ok:
            logger.debug(f"git {' '.join(args)} exited with {result.exit_code}")
        return result

    def is_git_repo(self, path: str) -> bool:
        """Check if path is a git repository."""
        git_dir = Path(path) / ".git"
        return git_dir.exists()

    async def fetch(self, path: str) -> CommandResult:
        """Update remote-tracking refs without touching the working tree."""
        return await self._run(["fetch", "--quiet"], cwd=path)

    async def status(self, path: str) -> CommandResult:
        """Short status with branch summary (`git status -sb`)."""
        return await self._run(["status", "-sb"], cwd=path)

    async def add_all(self, path: str) -> CommandResult:
        """Stage every change in the working tree."""
        return await self._run(["add", "."], cwd=path)

    async def commit(self, path: str, message: str = COMMIT_MESSAGE) -> CommandResult:
        """Commit staged changes."""
        return await self._run(["commit", "-m", message], cwd=path)

    async def push(self, path: str) -> CommandResult:
        """Push the current branch to its upstream."""
        return await self._run(["push"], cwd=path)
