"""Unit tests for the SphinxManager facade."""

from dataclasses import replace
from pathlib import Path

from sphinx_manager.core.manager import SphinxManager
from sphinx_manager.domain.entities import DaemonState
from tests.helpers.fakes import FakeConfigLookup, FakeProcessTable


class TestStatus:
    """Tests for status()."""

    def test_not_running(self, manager: SphinxManager, pid_file: Path, sphinx_conf: Path) -> None:
        status = manager.status()

        assert status.state is DaemonState.NOT_RUNNING
        assert not status.running
        assert status.pids == set()
        assert status.pid_file == pid_file
        assert status.pid_file_exists is False
        assert status.config_file == sphinx_conf
        assert status.message == "searchd is not running"

    def test_running(
        self,
        manager: SphinxManager,
        process_table: FakeProcessTable,
        pid_file: Path,
        sphinx_conf: Path,
    ) -> None:
        process_table.add(4242, f"searchd --config {sphinx_conf}")
        pid_file.write_text("4242\n")

        status = manager.status()

        assert status.state is DaemonState.RUNNING
        assert status.running
        assert status.pids == {4242}
        assert status.pid_file_exists is True
        assert status.pid_file_pid == 4242
        assert status.message == "searchd is running (PID 4242)"

    def test_running_with_stale_pid_file(
        self,
        manager: SphinxManager,
        process_table: FakeProcessTable,
        pid_file: Path,
        sphinx_conf: Path,
    ) -> None:
        process_table.add(4300, f"searchd --config {sphinx_conf}")
        pid_file.write_text("999\n")

        status = manager.status()

        assert status.state is DaemonState.RUNNING
        assert "PID file is stale (names 999)" in status.message

    def test_pid_file_without_process_is_indeterminate(
        self, manager: SphinxManager, pid_file: Path
    ) -> None:
        pid_file.write_text("999\n")

        status = manager.status()

        assert status.state is DaemonState.INDETERMINATE
        assert not status.running
        assert "names 999" in status.message


class TestConfigSwitch:
    """Tests for replacing the configuration on a live manager."""

    def test_new_config_reaches_every_component(
        self, manager: SphinxManager, tmp_path: Path
    ) -> None:
        new_config = replace(manager.config, bindir=tmp_path / "other", process_timeout=7)

        manager.config = new_config

        assert manager.resolver.config is new_config
        assert manager.controller.config is new_config
        assert manager.indexer.config is new_config
        assert manager.locator.bindir == tmp_path / "other"

    def test_new_config_file_is_parsed(
        self,
        manager: SphinxManager,
        config_lookup: FakeConfigLookup,
        process_table: FakeProcessTable,
        tmp_path: Path,
    ) -> None:
        other_conf = tmp_path / "other.conf"
        other_pid = tmp_path / "other.pid"
        config_lookup.configs[other_conf] = {"searchd": {"pid_file": str(other_pid)}}
        process_table.add(4300, f"searchd --config {other_conf}")
        other_pid.write_text("4300\n")

        assert manager.get_searchd_pids() == set()
        manager.config = replace(manager.config, config_file=other_conf)

        assert manager.get_searchd_pids() == {4300}
