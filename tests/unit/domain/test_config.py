"""Tests for the ManagerConfig domain model."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from sphinx_manager.domain.config import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_PROCESS_TIMEOUT,
    ManagerConfig,
)


def test_defaults() -> None:
    config = ManagerConfig()

    assert config.config_file == DEFAULT_CONFIG_FILE == Path("sphinx.conf")
    assert config.pid_file is None
    assert config.bindir is None
    assert config.searchd_args == ()
    assert config.indexer_args == ()
    assert config.process_timeout == DEFAULT_PROCESS_TIMEOUT == 10
    assert config.debug == 0


def test_coerces_paths_and_argument_lists() -> None:
    config = ManagerConfig(
        config_file="/etc/sphinx.conf",  # type: ignore[arg-type]
        pid_file="/run/searchd.pid",  # type: ignore[arg-type]
        bindir="/opt/sphinx/bin",  # type: ignore[arg-type]
        searchd_args=["--port", 9312],  # type: ignore[list-item]
        indexer_args=["--rotate"],  # type: ignore[arg-type]
    )

    assert config.config_file == Path("/etc/sphinx.conf")
    assert config.pid_file == Path("/run/searchd.pid")
    assert config.bindir == Path("/opt/sphinx/bin")
    assert config.searchd_args == ("--port", "9312")
    assert config.indexer_args == ("--rotate",)


def test_is_immutable() -> None:
    config = ManagerConfig()

    with pytest.raises(FrozenInstanceError):
        config.debug = 1  # type: ignore[misc]


@pytest.mark.parametrize("timeout", [0, -1, -0.5])
def test_rejects_non_positive_timeout(timeout: float) -> None:
    with pytest.raises(ValueError, match="process_timeout must be positive"):
        ManagerConfig(process_timeout=timeout)


def test_rejects_negative_debug() -> None:
    with pytest.raises(ValueError, match="debug cannot be negative"):
        ManagerConfig(debug=-1)


def test_fractional_timeout_is_allowed() -> None:
    assert ManagerConfig(process_timeout=0.5).process_timeout == 0.5
