"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from sphinx_manager.core.manager import SphinxManager
from sphinx_manager.core.waiter import ProcessWaiter
from sphinx_manager.domain.config import ManagerConfig
from tests.helpers.fakes import (
    FakeClock,
    FakeConfigLookup,
    FakeLauncher,
    FakeProcessTable,
)

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def sphinx_conf(tmp_path: Path) -> Path:
    """Path used as the Sphinx config file."""
    return tmp_path / "sphinx.conf"


@pytest.fixture
def pid_file(tmp_path: Path) -> Path:
    """Path searchd writes its PID to."""
    return tmp_path / "searchd.pid"


@pytest.fixture
def process_table() -> FakeProcessTable:
    return FakeProcessTable({1: "/sbin/init", 200: "/usr/sbin/sshd -D"})


@pytest.fixture
def config_lookup(sphinx_conf: Path, pid_file: Path) -> FakeConfigLookup:
    return FakeConfigLookup({sphinx_conf: {"searchd": {"pid_file": str(pid_file)}}})


@pytest.fixture
def launcher(process_table: FakeProcessTable) -> FakeLauncher:
    return FakeLauncher(process_table)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def bindir(tmp_path: Path) -> Path:
    """Directory holding executable searchd and indexer stubs."""
    directory = tmp_path / "bin"
    directory.mkdir()
    for name in ("searchd", "indexer"):
        binary = directory / name
        binary.write_text("#!/bin/sh\nexit 0\n")
        binary.chmod(0o755)
    return directory


@pytest.fixture
def manager_config(sphinx_conf: Path, bindir: Path) -> ManagerConfig:
    return ManagerConfig(config_file=sphinx_conf, bindir=bindir, process_timeout=3)


@pytest.fixture
def waiter(process_table: FakeProcessTable, clock: FakeClock) -> ProcessWaiter:
    return ProcessWaiter(process_table, clock=clock, sleep=clock.sleep)


@pytest.fixture
def manager(
    manager_config: ManagerConfig,
    config_lookup: FakeConfigLookup,
    process_table: FakeProcessTable,
    launcher: FakeLauncher,
    waiter: ProcessWaiter,
) -> SphinxManager:
    """SphinxManager wired to in-memory fakes."""
    return SphinxManager(
        config=manager_config,
        config_lookup=config_lookup,
        process_table=process_table,
        launcher=launcher,
        waiter=waiter,
    )
