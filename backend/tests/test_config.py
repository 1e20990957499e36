"""Tests for configuration precedence and persisted settings."""

import json

import pytest

from passbridge.broker import Broker
from passbridge.clipboard import MemoryClipboard
from passbridge.config import (
    DEFAULT_BINARY_PATH,
    DEFAULT_EXEC_TIMEOUT_MS,
    DEFAULT_PORT,
    BrokerConfig,
    PluginSettings,
    clamp_timeout,
    load_settings,
    save_settings,
)
from passbridge.vault.providers import PasswordManager


class TestClampTimeout:
    @pytest.mark.parametrize(
        "value,expected",
        [(10000, 10000), (1000, 5000), (99999, 25000), (12345, 12000), (12600, 13000)],
    )
    def test_clamp(self, value: int, expected: int) -> None:
        assert clamp_timeout(value) == expected


class TestSettingsPersistence:
    def test_missing_file_gives_defaults(self, settings_path) -> None:
        settings = load_settings(settings_path)
        assert settings == PluginSettings()
        assert settings.binary_path == DEFAULT_BINARY_PATH
        assert settings.exec_timeout_ms == DEFAULT_EXEC_TIMEOUT_MS

    def test_round_trip(self, settings_path) -> None:
        save_settings(PluginSettings(binary_path="/opt/bw", exec_timeout_ms=15000), settings_path)
        assert load_settings(settings_path) == PluginSettings(
            binary_path="/opt/bw", exec_timeout_ms=15000
        )

    def test_unknown_keys_are_ignored(self, settings_path) -> None:
        settings_path.write_text(json.dumps({"binary_path": "/opt/bw", "theme": "dark"}))
        assert load_settings(settings_path).binary_path == "/opt/bw"

    def test_malformed_file_gives_defaults(self, settings_path) -> None:
        settings_path.write_text("{not json")
        assert load_settings(settings_path) == PluginSettings()

    def test_non_string_binary_path_falls_back(self, settings_path) -> None:
        settings_path.write_text(json.dumps({"binary_path": 5, "exec_timeout_ms": 7000}))
        settings = load_settings(settings_path)
        assert settings.binary_path == DEFAULT_BINARY_PATH
        assert settings.exec_timeout_ms == 7000

    @pytest.mark.parametrize("manager", ["KeePass", 1, None, ""])
    def test_unsupported_password_manager_falls_back(self, settings_path, manager) -> None:
        settings_path.write_text(json.dumps({"password_manager": manager}))
        assert load_settings(settings_path).password_manager == "Bitwarden"

    @pytest.mark.parametrize("timeout", ["abc", [1], True, 12.5])
    def test_non_integer_timeout_falls_back(self, settings_path, timeout) -> None:
        settings_path.write_text(json.dumps({"exec_timeout_ms": timeout}))
        assert load_settings(settings_path).exec_timeout_ms == DEFAULT_EXEC_TIMEOUT_MS

    def test_non_object_gives_defaults(self, settings_path) -> None:
        settings_path.write_text("[1, 2]")
        assert load_settings(settings_path) == PluginSettings()

    def test_saved_file_holds_only_settings(self, settings_path) -> None:
        save_settings(PluginSettings(), settings_path)
        assert set(json.loads(settings_path.read_text())) == {
            "password_manager", "binary_path", "exec_timeout_ms",
        }


class TestBrokerConfig:
    def test_defaults(self, settings_path) -> None:
        config = BrokerConfig(settings_path=settings_path)
        assert config.password_manager == "Bitwarden"
        assert config.binary_path == "/usr/bin/bw"
        assert config.exec_timeout_ms == 10000
        assert config.port == 8200

    def test_persisted_settings_beat_defaults(self, settings_path) -> None:
        save_settings(PluginSettings(binary_path="/opt/bw", exec_timeout_ms=7000), settings_path)
        config = BrokerConfig(settings_path=settings_path)
        assert config.binary_path == "/opt/bw"
        assert config.exec_timeout_ms == 7000

    def test_env_beats_persisted_settings(self, settings_path, monkeypatch) -> None:
        save_settings(PluginSettings(binary_path="/opt/bw"), settings_path)
        monkeypatch.setenv("PASSBRIDGE_BW_BINARY", "/env/bw")
        monkeypatch.setenv("PASSBRIDGE_EXEC_TIMEOUT", "20000")
        monkeypatch.setenv("PASSBRIDGE_PORT", "9000")
        config = BrokerConfig(settings_path=settings_path)
        assert config.binary_path == "/env/bw"
        assert config.exec_timeout_ms == 20000
        assert config.port == 9000

    def test_explicit_values_beat_env(self, settings_path, monkeypatch) -> None:
        monkeypatch.setenv("PASSBRIDGE_BW_BINARY", "/env/bw")
        config = BrokerConfig(binary_path="/cli/bw", exec_timeout_ms=30000, settings_path=settings_path)
        assert config.binary_path == "/cli/bw"
        assert config.exec_timeout_ms == 25000

    def test_apply(self, settings_path) -> None:
        config = BrokerConfig(settings_path=settings_path)
        config.apply(PluginSettings(binary_path="/opt/bw", exec_timeout_ms=6000))
        assert config.settings == PluginSettings(binary_path="/opt/bw", exec_timeout_ms=6000)

    def test_unsupported_persisted_manager_still_builds_broker(self, settings_path) -> None:
        settings_path.write_text(json.dumps({"password_manager": "KeePass"}))
        broker = Broker(BrokerConfig(settings_path=settings_path), clipboard=MemoryClipboard())
        assert broker.config.password_manager == "Bitwarden"
        assert broker.provider.kind is PasswordManager.BITWARDEN

    def test_unparsable_env_values_are_ignored(self, settings_path, monkeypatch) -> None:
        monkeypatch.setenv("PASSBRIDGE_EXEC_TIMEOUT", "ten seconds")
        monkeypatch.setenv("PASSBRIDGE_PORT", "http")
        config = BrokerConfig(settings_path=settings_path)
        assert config.exec_timeout_ms == DEFAULT_EXEC_TIMEOUT_MS
        assert config.port == DEFAULT_PORT

    def test_explicit_default_port_beats_env(self, settings_path, monkeypatch) -> None:
        monkeypatch.setenv("PASSBRIDGE_PORT", "9000")
        config = BrokerConfig(port=8200, settings_path=settings_path)
        assert config.port == 8200
