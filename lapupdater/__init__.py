"""
lapupdater - Publish lap times to a git-hosted website.

Copies the simulator's personalbest.ini into a website repository, detects
local or unpushed changes, and publishes them with git add/commit/push.

Quick Start:
    import asyncio
    from lapupdater import UpdateService

    service = UpdateService(log=print)
    state = asyncio.run(service.check_changes())
    if state.has_changes:
        result = asyncio.run(service.update())
        print(result.outcome.label)

Domain Objects:
    CommandResult - Output and exit code of one git invocation
    RepositoryState - Uncommitted / ahead-of-remote classification
    PublishResult - Per-step outcome of add/commit/push
    WebsiteConfig - The website's editable src/data/config.json

Services:
    ChangeDetector - git fetch + git status -sb
    PublishSequencer - git add/commit/push
    UpdateService - The check/update workflow
"""

__version__ = "0.1.0"

# Domain objects
from .domain import (
    CommandResult,
    RepositoryState,
    PublishOutcome,
    PublishStep,
    PublishResult,
    WebsiteConfig,
)

# Services
from .services import (
    ChangeDetector,
    PublishSequencer,
    UpdateService,
    WebsiteConfigService,
    SideImageService,
)

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # Domain objects
    "CommandResult",
    "RepositoryState",
    "PublishOutcome",
    "PublishStep",
    "PublishResult",
    "WebsiteConfig",
    # Services
    "ChangeDetector",
    "PublishSequencer",
    "UpdateService",
    "WebsiteConfigService",
    "SideImageService",
    # Configuration
    "load_config",
    "save_config",
]
