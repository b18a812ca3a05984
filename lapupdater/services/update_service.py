"""
Update workflow service for lapupdater.

Ties the pieces together the way a user drives them:

    check:  preconditions -> connectivity -> copy lap file -> detect
    update: preconditions -> connectivity -> add/commit/push -> persist outcome

Only one workflow runs at a time. The `busy` flag guards that, and
`publish_available` tracks whether an update may be started: it opens
when a check finds changes or a publish fails, and closes after a
successful publish or a check that finds nothing.
"""

import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Tuple

from ..config import (
    SettingsStore,
    get_repo_data_target,
    get_repo_root,
    get_source_ini_path,
    load_config,
)
from ..domain.operation import PublishOutcome, PublishResult
from ..domain.repository import RepositoryState
from ..exit_codes import (
    ConnectivityError,
    CopyError,
    PreconditionError,
    WorkflowBusyError,
)
from ..infra.git_client import GitClient
from ..infra.network import DEFAULT_CHECK_URL, DEFAULT_TIMEOUT_SECONDS, check_connectivity
from .change_detector import ChangeDetector, LogSink
from .publish_service import PublishSequencer

logger = logging.getLogger(__name__)


class UpdateService:
    """
    Service for checking and publishing lap-time updates.

    Example:
        service = UpdateService(log=print)
        state = await service.check_changes()
        if state.has_changes:
            result = await service.update()
            print(result.outcome.label)
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        settings: Optional[SettingsStore] = None,
        git_client: Optional[GitClient] = None,
        log: Optional[LogSink] = None,
        connectivity_check: Callable[..., bool] = check_connectivity
    ):
        """
        Initialize UpdateService.

        Args:
            config: Configuration dict (loads default if None)
            settings: Settings store for the last outcome (wraps config if None)
            git_client: GitClient instance (creates new if None)
            log: Observation log sink (logs at INFO if None)
            connectivity_check: Callable(url, timeout) -> bool
        """
        if settings is not None:
            self.settings = settings
            self.config = settings.config
        else:
            self.config = config if config is not None else load_config()
            self.settings = SettingsStore(self.config)
        self.log = log or logger.info
        git = git_client or GitClient()
        self.detector = ChangeDetector(git_client=git, log=self.log)
        self.sequencer = PublishSequencer(git_client=git, log=self.log)
        self.connectivity_check = connectivity_check

        self.busy = False
        self.publish_available = False
        self.last_state: Optional[RepositoryState] = None
        self.last_result: Optional[PublishResult] = None

    # -- preconditions -----------------------------------------------------

    @property
    def source_path(self) -> str:
        return get_source_ini_path(self.config)

    @property
    def repo_root(self) -> str:
        return get_repo_root(self.config)

    def repo_root_ready(self) -> bool:
        return bool(self.repo_root) and Path(self.repo_root).is_dir()

    def paths_ready(self) -> bool:
        return bool(self.source_path) and Path(self.source_path).is_file() and self.repo_root_ready()

    def ensure_paths(self) -> Tuple[Path, Path]:
        """
        Validate the source file and repository root.

        Raises:
            PreconditionError: If either is missing or invalid
        """
        if not self.source_path or not Path(self.source_path).is_file():
            raise PreconditionError("Select a valid personalbest.ini first.", title="Missing file")
        if not self.repo_root_ready():
            raise PreconditionError("Select a valid repository root folder.", title="Missing folder")
        return Path(self.source_path), Path(self.repo_root)

    def ensure_connectivity(self) -> None:
        """
        Raises:
            ConnectivityError: If the reachability check fails
        """
        network = self.config.get('network', {})
        url = network.get('check_url') or DEFAULT_CHECK_URL
        timeout = network.get('timeout_seconds') or DEFAULT_TIMEOUT_SECONDS
        if not self.connectivity_check(url, timeout):
            raise ConnectivityError()

    def copy_source_file(self) -> Path:
        """
        Copy the lap-time file into `<repo>/data/`, overwriting.

        Raises:
            CopyError: On any I/O failure
        """
        source, repo_root = self.ensure_paths()
        target = get_repo_data_target(str(repo_root))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as e:
            logger.error(f"Copy of {source} to {target} failed: {e}")
            raise CopyError(f"Failed to copy personalbest.ini: {e}") from e
        self.log(f"Copied personalbest.ini to {target}")
        return target

    # -- workflows ---------------------------------------------------------

    @contextmanager
    def _busy(self) -> Iterator[None]:
        if self.busy:
            raise WorkflowBusyError()
        self.busy = True
        try:
            yield
        finally:
            self.busy = False

    async def check_changes(self, check_network: bool = True) -> RepositoryState:
        """
        Copy the lap-time file and classify the repository.

        Raises:
            PreconditionError, ConnectivityError, CopyError, WorkflowBusyError
        """
        with self._busy():
            self.ensure_paths()
            if check_network:
                self.ensure_connectivity()
            self.copy_source_file()

            self.publish_available = False
            state = await self.detector.detect(self.repo_root)
            self.last_state = state
            self.publish_available = state.has_changes
            return state

    async def update(self, check_network: bool = True, force: bool = False) -> PublishResult:
        """
        Stage, commit and push, then persist the outcome.

        Args:
            check_network: Run the reachability pre-check first
            force: Publish even if no check has found changes

        Raises:
            PreconditionError, ConnectivityError, WorkflowBusyError
        """
        with self._busy():
            if not force and not self.publish_available:
                raise PreconditionError("No changes to publish. Check changes first.", title="Nothing to publish")
            self.ensure_paths()
            if check_network:
                self.ensure_connectivity()

            self.publish_available = False
            result = await self.sequencer.publish(self.repo_root)
            self.last_result = result

            # Failed publishes stay retryable
            self.publish_available = not result.success
            self.settings.save_last_outcome(result.outcome)
            return result

    @property
    def last_outcome(self) -> PublishOutcome:
        return self.settings.load_last_outcome()
