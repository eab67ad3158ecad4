"""Unit tests for configuration loading and saving."""

import tomllib
from pathlib import Path

import pytest
from pydantic import ValidationError
from spmctl.core.config import (
    DEFAULT_MANIFEST_URL,
    SpmConfig,
    load_config,
    save_config,
)
from spmctl.core.paths import get_config_path
from spmctl.errors import ConfigError, ConfigParseError


class TestSpmConfig:
    """Tests for the SpmConfig model."""

    def test_default_values(self) -> None:
        """SpmConfig has the documented defaults."""
        config = SpmConfig()
        assert config.manifest_url == DEFAULT_MANIFEST_URL
        assert config.operation_timeout_seconds == 60.0
        assert config.poll_interval_seconds == 0.1

    def test_rejects_unknown_keys(self) -> None:
        """Unknown settings are rejected."""
        with pytest.raises(ValidationError):
            SpmConfig(manifest_uri="https://x")  # type: ignore[call-arg]

    def test_rejects_non_positive_timeout(self) -> None:
        """The operation timeout must be positive."""
        with pytest.raises(ValidationError):
            SpmConfig(operation_timeout_seconds=0)


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """A missing config file yields the defaults."""
        assert load_config(tmp_path / "missing.toml") == SpmConfig()

    def test_reads_values(self, tmp_path: Path) -> None:
        """Values from the TOML file are applied."""
        path = tmp_path / "config.toml"
        path.write_text(
            'manifest_url = "https://example.com/packages.json"\n'
            "operation_timeout_seconds = 30\n"
        )

        config = load_config(path)

        assert config.manifest_url == "https://example.com/packages.json"
        assert config.operation_timeout_seconds == 30

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises ConfigParseError."""
        path = tmp_path / "config.toml"
        path.write_text("manifest_url = ")

        with pytest.raises(ConfigParseError, match="Invalid TOML"):
            load_config(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise ConfigError."""
        path = tmp_path / "config.toml"
        path.write_text("operation_timeout_seconds = -5\n")

        with pytest.raises(ConfigError, match="Invalid config content"):
            load_config(path)

    def test_env_overrides_manifest_url(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """SPMCTL_MANIFEST_URL takes precedence over the file."""
        path = tmp_path / "config.toml"
        path.write_text('manifest_url = "https://file.example/packages.json"\n')
        monkeypatch.setenv("SPMCTL_MANIFEST_URL", "https://env.example/packages.json")

        assert load_config(path).manifest_url == "https://env.example/packages.json"

    def test_default_path_uses_xdg(self, isolated_config_home: Path) -> None:
        """The default config path lives under XDG_CONFIG_HOME."""
        assert get_config_path() == isolated_config_home / "spmctl" / "config.toml"


class TestSaveConfig:
    """Tests for save_config."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """A saved config loads back unchanged."""
        config = SpmConfig(manifest_url="https://example.com/p.json", operation_timeout_seconds=5)
        path = save_config(config, tmp_path / "nested" / "config.toml")

        assert load_config(path) == config

    def test_writes_toml(self, tmp_path: Path) -> None:
        """The file is valid TOML with every setting."""
        path = save_config(SpmConfig(), tmp_path / "config.toml")

        with open(path, "rb") as f:
            data = tomllib.load(f)
        assert data["manifest_url"] == DEFAULT_MANIFEST_URL
        assert set(data) == set(SpmConfig.model_fields)

    def test_defaults_to_xdg_path(self) -> None:
        """Without a path the config is written to the default location."""
        path = save_config(SpmConfig())
        assert path == get_config_path()
        assert path.exists()

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        """The atomic write leaves no temporary files behind."""
        save_config(SpmConfig(), tmp_path / "config.toml")
        assert [p.name for p in tmp_path.iterdir()] == ["config.toml"]
