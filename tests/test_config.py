"""
Unit tests for lapupdater.config module
"""
import unittest
import tempfile
import os
import shutil
import json
from pathlib import Path
from unittest.mock import patch

import yaml

from lapupdater.config import (
    SettingsStore,
    apply_env_overrides,
    get_config_path,
    get_default_config,
    get_repo_data_target,
    load_config,
    merge_configs,
    migrate_legacy_settings,
    save_config,
)
from lapupdater.domain.operation import PublishOutcome


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.original_home = os.environ.get('HOME')
        os.environ['HOME'] = self.temp_dir
        self.config_dir = Path(self.temp_dir) / '.lapupdater'

    def tearDown(self):
        """Clean up test environment"""
        if self.original_home:
            os.environ['HOME'] = self.original_home
        else:
            del os.environ['HOME']
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        self.assertEqual(config['paths'], {'source_ini': '', 'repo_root': ''})
        self.assertEqual(config['last_push_status'], 'none')
        self.assertEqual(config['network']['timeout_seconds'], 3)
        self.assertEqual(config['side_image']['width'], 224)
        self.assertTrue(config['side_image']['based_on_picture'])
        self.assertIn('level', config['logging'])
        self.assertIn('format', config['logging'])

    def test_first_run_writes_defaults(self):
        """Test loading config when no file exists"""
        config = load_config()

        self.assertEqual(config, get_default_config())
        config_path = self.config_dir / 'config.json'
        self.assertTrue(config_path.exists())
        with open(config_path) as f:
            self.assertEqual(json.load(f), get_default_config())

    def test_load_without_create(self):
        load_config(create_if_missing=False)
        self.assertFalse((self.config_dir / 'config.json').exists())

    def test_load_config_json_file(self):
        """Test loading config from JSON file"""
        self.config_dir.mkdir()
        with open(self.config_dir / 'config.json', 'w') as f:
            json.dump({'paths': {'repo_root': '/srv/site'}, 'logging': {'level': 'DEBUG'}}, f)

        config = load_config()

        self.assertEqual(config['paths']['repo_root'], '/srv/site')
        # Merged with defaults
        self.assertEqual(config['paths']['source_ini'], '')
        self.assertEqual(config['logging']['level'], 'DEBUG')
        self.assertIn('format', config['logging'])

    def test_load_config_yaml_file(self):
        """Test loading config from YAML file"""
        self.config_dir.mkdir()
        with open(self.config_dir / 'config.yaml', 'w') as f:
            yaml.safe_dump({'last_push_status': 'failure', 'network': {'timeout_seconds': 7}}, f)

        config = load_config()

        self.assertEqual(config['last_push_status'], 'failure')
        self.assertEqual(config['network']['timeout_seconds'], 7)

    def test_load_config_toml_file(self):
        """Test loading config from TOML file"""
        self.config_dir.mkdir()
        (self.config_dir / 'config.toml').write_text(
            '[paths]\nrepo_root = "/srv/site"\nsource_ini = "/games/personalbest.ini"\n',
            encoding='utf-8'
        )

        config = load_config()

        self.assertEqual(config['paths']['source_ini'], '/games/personalbest.ini')

    def test_config_env_var(self):
        """LAPUPDATER_CONFIG points at an explicit file"""
        custom = Path(self.temp_dir) / 'custom.json'
        custom.write_text(json.dumps({'paths': {'repo_root': '/custom'}}), encoding='utf-8')

        with patch.dict(os.environ, {'LAPUPDATER_CONFIG': str(custom)}):
            self.assertEqual(get_config_path(), custom)
            config = load_config()

        self.assertEqual(config['paths']['repo_root'], '/custom')

    def test_invalid_json_falls_back_to_defaults(self):
        self.config_dir.mkdir()
        (self.config_dir / 'config.json').write_text('{"paths": ', encoding='utf-8')

        config = load_config()

        self.assertEqual(config['paths'], get_default_config()['paths'])

    def test_legacy_settings_migrated(self):
        """Older settings.json is converted and saved to config.json"""
        self.config_dir.mkdir()
        legacy = {
            'sourceIniPath': '/games/personalbest.ini',
            'repoRootPath': '/srv/site',
            'sideImageFileName': 'car.bmp',
            'sideImageWidth': 300,
            'sideImageBasedOnPicture': False,
            'lastPushStatus': 2,
        }
        (self.config_dir / 'settings.json').write_text(json.dumps(legacy), encoding='utf-8')

        config = load_config()

        self.assertEqual(config['paths']['source_ini'], '/games/personalbest.ini')
        self.assertEqual(config['paths']['repo_root'], '/srv/site')
        self.assertEqual(config['side_image']['file_name'], 'car.bmp')
        self.assertEqual(config['side_image']['width'], 300)
        self.assertFalse(config['side_image']['based_on_picture'])
        self.assertEqual(config['last_push_status'], 'failure')
        self.assertTrue((self.config_dir / 'config.json').exists())

    def test_save_config_roundtrip(self):
        config = get_default_config()
        config['paths']['repo_root'] = '/srv/site'

        save_config(config)

        self.assertEqual(load_config()['paths']['repo_root'], '/srv/site')
        # No temp files left behind
        leftovers = [p.name for p in self.config_dir.iterdir() if p.name.endswith('.tmp')]
        self.assertEqual(leftovers, [])

    def test_env_override_not_persisted(self):
        """One-off environment overrides never reach the config file"""
        load_config()
        with patch.dict(os.environ, {'LAPUPDATER_PATHS_REPO_ROOT': '/tmp/oneoff'}):
            store = SettingsStore()
            self.assertEqual(store.config['paths']['repo_root'], '/tmp/oneoff')
            store.save_last_outcome(PublishOutcome.SUCCESS)

        with open(self.config_dir / 'config.json', 'r', encoding='utf-8') as f:
            saved = json.load(f)
        self.assertEqual(saved['paths']['repo_root'], '')
        self.assertEqual(saved['last_push_status'], 'success')

    def test_env_override_keeps_stored_value(self):
        config = get_default_config()
        config['paths']['repo_root'] = '/srv/site'
        save_config(config)

        with patch.dict(os.environ, {'LAPUPDATER_PATHS_REPO_ROOT': '/tmp/oneoff'}):
            store = SettingsStore()
            store.set_path('source_ini', '/data/personalbest.ini')

        saved = load_config()
        self.assertEqual(saved['paths']['repo_root'], '/srv/site')
        self.assertEqual(saved['paths']['source_ini'], '/data/personalbest.ini')

    def test_explicit_change_over_env_override_persisted(self):
        load_config()
        with patch.dict(os.environ, {'LAPUPDATER_PATHS_REPO_ROOT': '/tmp/oneoff'}):
            SettingsStore().set_path('repo_root', '/srv/site')

        self.assertEqual(load_config()['paths']['repo_root'], '/srv/site')

    def test_repo_data_target(self):
        self.assertEqual(
            get_repo_data_target('/srv/site'),
            Path('/srv/site') / 'data' / 'personalbest.ini'
        )


class TestMigration(unittest.TestCase):
    """Test legacy settings conversion"""

    def test_string_status(self):
        self.assertEqual(migrate_legacy_settings({'lastPushStatus': 'Success'}),
                         {'last_push_status': 'success'})

    def test_ordinal_status(self):
        self.assertEqual(migrate_legacy_settings({'lastPushStatus': 1})['last_push_status'], 'success')
        self.assertEqual(migrate_legacy_settings({'lastPushStatus': 9})['last_push_status'], 'none')

    def test_missing_fields_left_to_defaults(self):
        self.assertEqual(migrate_legacy_settings({}), {})


class TestMergeAndOverrides(unittest.TestCase):
    """Test merge_configs and apply_env_overrides"""

    def test_merge_configs_recursive(self):
        base = {'a': {'x': 1, 'y': 2}, 'b': 1}
        merged = merge_configs(base, {'a': {'y': 3}, 'c': 4})
        self.assertEqual(merged, {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4})

    def test_env_override_nested_int(self):
        config = get_default_config()
        with patch.dict(os.environ, {'LAPUPDATER_NETWORK_TIMEOUT_SECONDS': '1'}):
            apply_env_overrides(config)
        self.assertEqual(config['network']['timeout_seconds'], 1)

    def test_env_override_bool(self):
        config = get_default_config()
        with patch.dict(os.environ, {'LAPUPDATER_SIDE_IMAGE_BASED_ON_PICTURE': 'false'}):
            apply_env_overrides(config)
        self.assertIs(config['side_image']['based_on_picture'], False)

    def test_env_override_top_level_key_with_underscores(self):
        config = get_default_config()
        with patch.dict(os.environ, {'LAPUPDATER_LAST_PUSH_STATUS': 'success'}):
            apply_env_overrides(config)
        self.assertEqual(config['last_push_status'], 'success')

    def test_env_override_path(self):
        config = get_default_config()
        with patch.dict(os.environ, {'LAPUPDATER_PATHS_REPO_ROOT': '/srv/site'}):
            apply_env_overrides(config)
        self.assertEqual(config['paths']['repo_root'], '/srv/site')

    def test_unknown_env_key_ignored(self):
        config = get_default_config()
        with patch.dict(os.environ, {'LAPUPDATER_NOPE_THING': 'x'}):
            apply_env_overrides(config)
        self.assertEqual(config, get_default_config())


class TestSettingsStore(unittest.TestCase):
    """Test SettingsStore"""

    def test_last_outcome_roundtrip(self):
        store = SettingsStore(get_default_config(), persist=False)
        self.assertIs(store.load_last_outcome(), PublishOutcome.NONE)

        store.save_last_outcome(PublishOutcome.FAILURE)

        self.assertIs(store.load_last_outcome(), PublishOutcome.FAILURE)
        self.assertEqual(store.config['last_push_status'], 'failure')

    def test_persist_flag(self):
        store = SettingsStore(get_default_config(), persist=False)
        with patch('lapupdater.config.save_config') as mock_save:
            store.set_path('repo_root', '/srv/site')
            mock_save.assert_not_called()

        store = SettingsStore(get_default_config(), persist=True)
        with patch('lapupdater.config.save_config') as mock_save:
            store.save_last_outcome(PublishOutcome.SUCCESS)
            mock_save.assert_called_once_with(store.config)


if __name__ == '__main__':
    unittest.main()
