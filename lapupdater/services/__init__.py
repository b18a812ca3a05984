"""
Service layer for lapupdater.

Services orchestrate domain objects and infrastructure:
- ChangeDetector: fetch + `git status -sb` classification
- PublishSequencer: add/commit/push with no-op commit tolerance
- UpdateService: the user-facing check/update workflow
- WebsiteConfigService: the website's `src/data/config.json`
- SideImageService: decorative side image selection
"""

from .change_detector import ChangeDetector
from .publish_service import PublishSequencer, is_noop_commit, commit_succeeded
from .update_service import UpdateService
from .website_config_service import WebsiteConfigService
from .side_image_service import SideImageService, SideImageSelection

__all__ = [
    'ChangeDetector',
    'PublishSequencer',
    'is_noop_commit',
    'commit_succeeded',
    'UpdateService',
    'WebsiteConfigService',
    'SideImageService',
    'SideImageSelection',
]
