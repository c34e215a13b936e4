"""Tests for settings file I/O."""

from pathlib import Path

import pytest

from sphinx_manager.domain.config import ManagerConfig
from sphinx_manager.shared.config_io import (
    config_to_settings_data,
    get_settings_path,
    load_settings,
    load_settings_data,
    save_settings,
    settings_data_to_config,
)


class TestGetSettingsPath:
    """Tests for get_settings_path."""

    def test_respects_xdg_config_home(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_settings_path() == tmp_path / "sphinx-manager" / "config.toml"

    def test_falls_back_to_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert get_settings_path() == tmp_path / ".config" / "sphinx-manager" / "config.toml"


class TestLoadSettings:
    """Tests for reading settings files."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings_data(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[manager\n")

        with pytest.raises(ValueError, match="Invalid TOML"):
            load_settings_data(path)

    def test_manager_must_be_a_table(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('manager = "yes"\n')

        with pytest.raises(ValueError, match="must be a table"):
            load_settings_data(path)

    def test_unknown_keys_are_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[manager]\ntimeout = 5\n")

        with pytest.raises(ValueError, match="Unknown settings.*timeout"):
            load_settings_data(path)

    def test_file_without_manager_table_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[other]\nkey = 1\n")

        assert load_settings(path) == ManagerConfig()

    def test_loads_every_field(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            "[manager]\n"
            'config_file = "/etc/sphinx.conf"\n'
            'pid_file = "/run/searchd.pid"\n'
            'bindir = "/opt/sphinx/bin"\n'
            'searchd_args = ["--port", "9312"]\n'
            'indexer_args = ["--rotate"]\n'
            "process_timeout = 5\n"
            "debug = 2\n"
        )

        config = load_settings(path)

        assert config == ManagerConfig(
            config_file=Path("/etc/sphinx.conf"),
            pid_file=Path("/run/searchd.pid"),
            bindir=Path("/opt/sphinx/bin"),
            searchd_args=("--port", "9312"),
            indexer_args=("--rotate",),
            process_timeout=5,
            debug=2,
        )


class TestSettingsDataToConfig:
    """Tests for applying settings over a base config."""

    def test_missing_keys_keep_base_values(self) -> None:
        base = ManagerConfig(process_timeout=3, debug=1)

        config = settings_data_to_config({"debug": 0}, base)

        assert config.process_timeout == 3
        assert config.debug == 0

    def test_empty_path_clears_optional_setting(self) -> None:
        base = ManagerConfig(bindir=Path("/opt/sphinx/bin"))

        assert settings_data_to_config({"bindir": ""}, base).bindir is None

    def test_empty_config_file_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="config_file must not be empty"):
            settings_data_to_config({"config_file": ""})

    def test_args_must_be_a_list(self) -> None:
        with pytest.raises(ValueError, match="searchd_args must be a list"):
            settings_data_to_config({"searchd_args": "--port 9312"})

    def test_invalid_timeout_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="process_timeout"):
            settings_data_to_config({"process_timeout": 0})

    @pytest.mark.parametrize("value", ["fast", True, [5]])
    def test_non_numeric_timeout_is_rejected(self, value: object) -> None:
        with pytest.raises(ValueError, match="process_timeout must be a number"):
            settings_data_to_config({"process_timeout": value})

    def test_fractional_timeout_is_accepted(self) -> None:
        assert settings_data_to_config({"process_timeout": 2.5}).process_timeout == 2.5

    @pytest.mark.parametrize("value", ["2", 1.5, [1]])
    def test_non_integer_debug_is_rejected(self, value: object) -> None:
        with pytest.raises(ValueError, match="debug must be an integer"):
            settings_data_to_config({"debug": value})

    def test_non_string_path_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="bindir must be a string"):
            settings_data_to_config({"bindir": 5})


class TestSaveSettings:
    """Tests for writing settings files."""

    def test_unset_paths_are_omitted(self) -> None:
        data = config_to_settings_data(ManagerConfig())

        assert "pid_file" not in data
        assert "bindir" not in data
        assert data["config_file"] == "sphinx.conf"

    def test_saved_settings_load_back(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.toml"
        config = ManagerConfig(
            config_file=Path("/etc/sphinx.conf"),
            bindir=Path("/opt/sphinx/bin"),
            indexer_args=("--rotate",),
            process_timeout=2.5,
        )

        save_settings(config, path)

        assert path.read_text().startswith("[manager]")
        assert load_settings(path) == config
