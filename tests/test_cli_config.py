"""Tests for CLI configuration module."""

import json
from cli.config import Config


def test_config_creates_default_file(tmp_path):
    """Test that config file is created with defaults if missing."""
    config_path = tmp_path / '.mediavault' / 'config.json'
    config = Config(config_path)

    assert config_path.exists()

    assert config.data['server_host'] == 'localhost'
    assert config.data['server_port'] == 3000
    assert config.data['timeout'] == 30
    assert config.data['max_retries'] == 3
    assert config.data['retry_backoff_multiplier'] == 2
    assert config.data['user'] is None


def test_config_loads_existing_file(tmp_path):
    """Test loading existing config file."""
    config_path = tmp_path / '.mediavault' / 'config.json'
    config_path.parent.mkdir(parents=True)

    with open(config_path, 'w') as f:
        json.dump({'user': 'alice', 'server_host': 'vault.example.com', 'server_port': 8080}, f)

    config = Config(config_path)

    assert config.get_user() == 'alice'
    assert config.get_base_url() == 'http://vault.example.com:8080'
    assert config.data['timeout'] == 30


def test_config_save_and_get_user(temp_config):
    """Test selecting a namespace persists it."""
    assert temp_config.get_user() is None

    temp_config.set_user('alice')

    assert temp_config.get_user() == 'alice'
    with open(temp_config.config_path, 'r') as f:
        assert json.load(f)['user'] == 'alice'


def test_config_handles_corrupted_file(tmp_path):
    """Test recovery from corrupted config file."""
    config_path = tmp_path / '.mediavault' / 'config.json'
    config_path.parent.mkdir(parents=True)
    config_path.write_text('{ invalid json content')

    config = Config(config_path)

    assert config.data['server_host'] == 'localhost'
    assert config_path.read_text() == '{ invalid json content'


def test_config_ignores_non_object_file(tmp_path):
    config_path = tmp_path / 'config.json'
    config_path.write_text('["alice"]')

    assert Config(config_path).get_user() is None


def test_config_host_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv('VAULT_SERVER_HOST', 'vault.internal')
    monkeypatch.setenv('VAULT_SERVER_PORT', '8443')

    config = Config(tmp_path / 'config.json')

    assert config.get_base_url() == 'http://vault.internal:8443'


def test_config_save_failure_keeps_settings_in_memory(tmp_path):
    blocker = tmp_path / 'not-a-dir'
    blocker.write_text('')

    config = Config(blocker / 'config.json')
    config.set_user('alice')

    assert config.get_user() == 'alice'
    assert not (blocker / 'config.json').exists()


def test_config_get_base_url(temp_config):
    """Test base URL construction."""
    assert temp_config.get_base_url() == 'http://localhost:3000'

    temp_config.data['server_host'] = 'example.com'
    temp_config.data['server_port'] = 9000
    assert temp_config.get_base_url() == 'http://example.com:9000'


def test_config_get_retry_config(temp_config):
    """Test retry configuration retrieval."""
    assert temp_config.get_retry_config() == {'max_retries': 3, 'retry_backoff_multiplier': 2}

    temp_config.data['max_retries'] = 5
    assert temp_config.get_retry_config()['max_retries'] == 5
