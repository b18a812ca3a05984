"""
Website configuration service for lapupdater.

Reads and writes the website repository's `src/data/config.json`.
"""

import logging
from pathlib import Path
from typing import Any

from ..domain.website import WebsiteConfig
from ..exit_codes import ConfigError
from ..infra.file_store import FileStore

logger = logging.getLogger(__name__)

WEBSITE_CONFIG_RELATIVE_PATH = Path("src") / "data" / "config.json"


class WebsiteConfigService:
    """
    Load, edit and save the website configuration.

    Example:
        service = WebsiteConfigService("/path/to/website")
        config = service.load()
        config.set_field("driverProfile.name", "Jane")
        service.save(config)
    """

    def __init__(self, repo_root: str):
        self.repo_root = Path(repo_root)
        self.store = FileStore(self.path)

    @property
    def path(self) -> Path:
        return self.repo_root / WEBSITE_CONFIG_RELATIVE_PATH

    def load(self) -> WebsiteConfig:
        """
        Raises:
            ConfigError: If the file is missing or not valid JSON
        """
        if not self.store.exists():
            raise ConfigError(f"File not found: {self.path}")
        try:
            data = self.store.load()
        except (ValueError, OSError) as e:
            raise ConfigError(f"Failed to load config.json: {e}") from e

        return WebsiteConfig.from_dict(data)

    def save(self, config: WebsiteConfig) -> Path:
        """
        Raises:
            ConfigError: If the file cannot be written
        """
        try:
            self.store.write(config.to_dict())
        except OSError as e:
            raise ConfigError(f"Failed to save config.json: {e}") from e
        logger.info(f"Saved {self.path}")
        return self.path

    def set_field(self, field_path: str, value: Any) -> WebsiteConfig:
        """
        Load, update one field, and save.

        Raises:
            ConfigError: On unknown field, invalid value, or I/O failure
        """
        config = self.load()
        try:
            config.set_field(field_path, value)
        except KeyError:
            raise ConfigError(f"Unknown field: {field_path}")
        except ValueError as e:
            raise ConfigError(str(e)) from e
        self.save(config)
        return config
