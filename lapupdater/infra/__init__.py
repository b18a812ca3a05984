"""
Infrastructure layer for lapupdater.

Contains abstractions for external systems:
- ProcessRunner: External process execution with incremental capture
- GitClient: The git commands used by the publish workflow
- FileStore: JSON file persistence with atomic writes
- check_connectivity: Network reachability pre-check

These provide clean interfaces that can be mocked for testing.
"""

from .process_runner import ProcessRunner
from .git_client import GitClient, COMMIT_MESSAGE
from .file_store import FileStore
from .network import check_connectivity

__all__ = [
    'ProcessRunner',
    'GitClient',
    'COMMIT_MESSAGE',
    'FileStore',
    'check_connectivity',
]
