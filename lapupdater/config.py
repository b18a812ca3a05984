#!/usr/bin/env python3

import copy
import os
import json
import tomllib
from pathlib import Path
from typing import Any, Dict, Optional

import logging
import sys

from .domain.operation import PublishOutcome
from .infra.file_store import FileStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr) # Default to stderr
    ]
)
logger = logging.getLogger("lapupdater")

CONFIG_DIR_NAME = '.lapupdater'
CONFIG_FILENAMES = ['config.json', 'config.toml', 'config.yaml', 'config.yml']
LEGACY_SETTINGS_FILENAME = 'settings.json'

# Fixed location of the lap-time file inside the website repository
DATA_DIR_NAME = 'data'
SOURCE_FILE_NAME = 'personalbest.ini'


def configure_logging(config: Optional[Dict[str, Any]] = None, debug: bool = False) -> None:
    """(Re)configure root logging from the `logging` config section."""
    section = (config or {}).get('logging', {})
    if debug:
        level = logging.DEBUG
        fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    else:
        level = getattr(logging, str(section.get('level', 'INFO')).upper(), logging.INFO)
        fmt = section.get('format', '%(levelname)s: %(message)s')

    logging.basicConfig(
        level=level,
        format=fmt,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def get_config_dir() -> Path:
    return Path.home() / CONFIG_DIR_NAME


def get_config_path():
    """Get the path to the configuration file.

    Checks in order:
    1. LAPUPDATER_CONFIG environment variable
    2. ~/.lapupdater/ directory (json, toml, yaml)
    """
    # Check for environment variable override
    if 'LAPUPDATER_CONFIG' in os.environ:
        path = Path(os.environ['LAPUPDATER_CONFIG'])
        if path.exists():
            return path

    config_dir = get_config_dir()
    for filename in CONFIG_FILENAMES:
        path = config_dir / filename
        if path.exists() and path.stat().st_size > 10:  # Not empty/trivial
            return path

    # If no file exists, return default path for saving
    return config_dir / 'config.json'


def get_legacy_settings_path() -> Path:
    """Settings file written by older releases."""
    return get_config_dir() / LEGACY_SETTINGS_FILENAME


def get_default_config():
    """Get default configuration."""
    return {
        "paths": {
            "source_ini": "",
            "repo_root": ""
        },
        "side_image": {
            "directory": "",  # Empty means ~/.lapupdater/img
            "file_name": "shiroko-vert.bmp",
            "width": 224,
            "based_on_picture": True,
            "area_height": 480
        },
        "last_push_status": PublishOutcome.NONE.value,
        "network": {
            "check_url": "https://www.google.com/generate_204",
            "timeout_seconds": 3
        },
        "logging": {
            "level": "INFO",
            "format": "%(levelname)s: %(message)s"
        }
    }


# Older releases stored enum values by ordinal
_LEGACY_PUSH_STATUS = {0: "none", 1: "success", 2: "failure"}


def migrate_legacy_settings(legacy: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert the flat camelCase settings of older releases.

    Old structure:
        {"sourceIniPath": "...", "repoRootPath": "...",
         "sideImageFileName": "...", "sideImageWidth": 224,
         "sideImageBasedOnPicture": true, "lastPushStatus": 1}

    Missing fields are left to the defaults.
    """
    config: Dict[str, Any] = {}

    paths = {}
    if legacy.get("sourceIniPath") is not None:
        paths["source_ini"] = legacy["sourceIniPath"]
    if legacy.get("repoRootPath") is not None:
        paths["repo_root"] = legacy["repoRootPath"]
    if paths:
        config["paths"] = paths

    side_image = {}
    if legacy.get("sideImageFileName") is not None:
        side_image["file_name"] = legacy["sideImageFileName"]
    if legacy.get("sideImageWidth") is not None:
        side_image["width"] = legacy["sideImageWidth"]
    if "sideImageBasedOnPicture" in legacy:
        side_image["based_on_picture"] = bool(legacy["sideImageBasedOnPicture"])
    if side_image:
        config["side_image"] = side_image

    status = legacy.get("lastPushStatus")
    if isinstance(status, int):
        status = _LEGACY_PUSH_STATUS.get(status, "none")
    if status is not None:
        config["last_push_status"] = PublishOutcome.parse(status).value

    return config


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    if config_path.suffix.lower() in ['.toml']:
        with open(config_path, 'rb') as f:
            return tomllib.load(f)
    elif config_path.suffix.lower() in ['.yaml', '.yml']:
        import yaml
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    else:
        # Default to JSON format
        with open(config_path, 'r', encoding='utf-8-sig') as f:
            return json.load(f)


def load_config(create_if_missing: bool = True):
    """Load configuration from file.

    On first run (no config and no legacy settings) a default config file is
    written. Legacy settings are migrated to the new location.
    """
    config_path = get_config_path()

    # Start with default config
    config = get_default_config()

    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
            if isinstance(file_config, dict):
                # Merge file config with defaults
                config = merge_configs(config, file_config)
        except Exception as e:
            logger.error(f"Error loading config from {config_path}: {e}")
    else:
        legacy_path = get_legacy_settings_path()
        if legacy_path.exists():
            try:
                legacy = FileStore(legacy_path).load()
                config = merge_configs(config, migrate_legacy_settings(legacy))
                logger.info(f"Migrated legacy settings from {legacy_path}")
            except Exception as e:
                logger.error(f"Error migrating legacy settings from {legacy_path}: {e}")
            save_config(config)
        elif create_if_missing:
            # First run / cleared data: create a fresh config with defaults
            save_config(config)

    # Apply environment variable overrides
    config = apply_env_overrides(config)

    return config


def save_config(config):
    """Save configuration to file.

    Failures are logged, never raised: losing a settings write must not
    abort a publish.
    """
    config_path = get_config_path()
    # Environment overrides apply to this run only
    config = strip_env_overrides(config)

    try:
        if config_path.suffix.lower() in ['.toml']:
            # tomllib is read-only
            logger.warning("TOML config is read-only. Saving as JSON instead.")
            config_path = config_path.with_suffix('.json')
            FileStore(config_path).write(config)
        elif config_path.suffix.lower() in ['.yaml', '.yml']:
            import yaml
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(config, f, default_flow_style=False)
        else:
            # Default to JSON format
            FileStore(config_path).write(config)

        logger.debug(f"Configuration saved to {config_path}")
    except Exception as e:
        logger.error(f"Error saving config to {config_path}: {e}")


def merge_configs(base_config, override_config):
    """
    Recursively merge two configuration dictionaries.

    Args:
        base_config (dict): Base configuration
        override_config (dict): Configuration to merge/override with

    Returns:
        dict: Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            # Recursively merge nested dictionaries
            merged[key] = merge_configs(merged[key], value)
        else:
            # Override or add new key
            merged[key] = value

    return merged


def _typed_env_value(value: str):
    if value.lower() in ('true', 'yes', 'on'):
        return True
    elif value.lower() in ('false', 'no', 'off'):
        return False
    elif value.isdigit():
        return int(value)
    return value


def iter_env_overrides(config):
    """
    Yield (key_path, value) for each environment variable override.
    Environment variables follow the pattern: LAPUPDATER_SECTION_KEY
    For example: LAPUPDATER_NETWORK_TIMEOUT_SECONDS=5

    Variables that match no key in `config` are skipped.
    """
    env_prefix = "LAPUPDATER_"

    for env_key, value in os.environ.items():
        if not env_key.startswith(env_prefix) or env_key == "LAPUPDATER_CONFIG":
            continue

        key_parts = env_key[len(env_prefix):].lower().split('_')

        current_level = config
        key_path = []
        i = 0
        while i < len(key_parts):
            # Find the longest key in current_level that is a prefix of the remaining key_parts
            best_match_len = 0
            matched_key = None

            for config_key in current_level.keys():
                config_key_parts = config_key.split('_')
                if key_parts[i:i + len(config_key_parts)] == config_key_parts:
                    if len(config_key_parts) > best_match_len:
                        best_match_len = len(config_key_parts)
                        matched_key = config_key

            if not matched_key:
                break
            key_path.append(matched_key)

            # At the end of the env var: this is the key to set
            if i + best_match_len == len(key_parts):
                yield tuple(key_path), _typed_env_value(value)
                break

            # Otherwise descend into the dictionary
            if not isinstance(current_level[matched_key], dict):
                break
            current_level = current_level[matched_key]
            i += best_match_len


def _get_in(config, key_path):
    for key in key_path:
        if not isinstance(config, dict) or key not in config:
            return None
        config = config[key]
    return config


def _set_in(config, key_path, value):
    for key in key_path[:-1]:
        config = config[key]
    config[key_path[-1]] = value


def apply_env_overrides(config):
    """Apply environment variable overrides to configuration in place."""
    for key_path, value in list(iter_env_overrides(config)):
        _set_in(config, key_path, value)
    return config


def strip_env_overrides(config):
    """
    Return a copy of `config` fit for writing to disk.

    Keys still holding their environment override value are reset to the
    stored value (config file merged over defaults). Keys changed since
    loading are kept.
    """
    overrides = list(iter_env_overrides(config))
    if not overrides:
        return config

    stored = get_default_config()
    config_path = get_config_path()
    if config_path.exists():
        try:
            file_config = _read_config_file(config_path)
            if isinstance(file_config, dict):
                stored = merge_configs(stored, file_config)
        except Exception as e:
            logger.debug(f"Could not re-read {config_path}: {e}")

    cleaned = copy.deepcopy(config)
    for key_path, value in overrides:
        if _get_in(cleaned, key_path) == value:
            _set_in(cleaned, key_path, _get_in(stored, key_path))
    return cleaned


def get_source_ini_path(config) -> str:
    return str(config.get('paths', {}).get('source_ini') or '').strip()


def get_repo_root(config) -> str:
    return str(config.get('paths', {}).get('repo_root') or '').strip()


def get_repo_data_target(repo_root: str) -> Path:
    """Destination of the lap-time file inside the website repository."""
    return Path(repo_root) / DATA_DIR_NAME / SOURCE_FILE_NAME


class SettingsStore:
    """
    Persists application settings and the last publish outcome.

    Example:
        store = SettingsStore()
        store.save_last_outcome(PublishOutcome.SUCCESS)
        print(store.load_last_outcome())
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, persist: bool = True):
        """
        Initialize SettingsStore.

        Args:
            config: Configuration dict (loads default if None)
            persist: Write changes to the config file
        """
        self.config = config if config is not None else load_config()
        self.persist = persist

    def save(self) -> None:
        if self.persist:
            save_config(self.config)

    def load_last_outcome(self) -> PublishOutcome:
        return PublishOutcome.parse(self.config.get('last_push_status'))

    def save_last_outcome(self, outcome: PublishOutcome) -> None:
        self.config['last_push_status'] = outcome.value
        self.save()

    def set_path(self, key: str, value: str) -> None:
        """Set `paths.source_ini` or `paths.repo_root`."""
        self.config.setdefault('paths', {})[key] = value
        self.save()
