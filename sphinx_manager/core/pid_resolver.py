"""searchd process discovery.

Answers "is searchd running, and which PID is it" from two uncertain sources:
the PID file searchd writes (which may be absent, empty, stale or name a
reused PID) and the OS process table.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from sphinx_manager.domain.config import ManagerConfig
from sphinx_manager.domain.entities import ProcessMatch
from sphinx_manager.domain.exceptions import ConfigError
from sphinx_manager.ports.config import ConfigLookup
from sphinx_manager.ports.process import ProcessTable

logger = logging.getLogger(__name__)

DAEMON_NAME = "searchd"


def command_line_matches(command_line: str, pattern: re.Pattern[str] | str) -> bool:
    """Check whether a process command line matches a pattern.

    Args:
        command_line: Full command line of a process
        pattern: Compiled regex or regex source

    Returns:
        True if the pattern is found anywhere in the command line
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    return pattern.search(command_line) is not None


def build_daemon_pattern(config_file: Path | str, name: str = DAEMON_NAME) -> re.Pattern[str]:
    """Build the regex matching a daemon started with a given config file.

    The config path must appear as a whole argument (after whitespace or "=")
    so daemons running from other config files are not conflated.

    Args:
        config_file: Config file path as passed on the daemon's command line
        name: Daemon executable name

    Returns:
        Compiled pattern
    """
    config = re.escape(str(config_file))
    return re.compile(rf"{re.escape(name)}.*(?:\s|=){config}(?:$|\s)")


@dataclass(frozen=True)
class ResolvedConfigState:
    """PID file path parsed from a config file.

    Attributes:
        config_file: The config file that was parsed
        pid_file: searchd.pid_file from that file, or None if it sets none
    """

    config_file: Path
    pid_file: Path | None


class PidResolver:
    """Resolves the PID file path and the PIDs of running searchd processes."""

    def __init__(
        self,
        config: ManagerConfig,
        config_lookup: ConfigLookup,
        process_table: ProcessTable,
    ) -> None:
        self.config = config
        self.config_lookup = config_lookup
        self.process_table = process_table
        self._cache: ResolvedConfigState | None = None

    def resolve_pid_file_path(self) -> Path | None:
        """Determine the searchd PID file.

        An explicit pid_file in the manager config wins. Otherwise the value
        is read from the Sphinx config file, parsing it only when the config
        file path differs from the one last parsed.

        Returns:
            PID file path, or None if the config file does not name one

        Raises:
            ConfigError: If the config file cannot be parsed
        """
        if self.config.pid_file is not None:
            return self.config.pid_file

        if self._cache is not None and self._cache.config_file == self.config.config_file:
            return self._cache.pid_file

        self._cache = self._load_config_file()
        return self._cache.pid_file

    def _load_config_file(self) -> ResolvedConfigState:
        config_file = self.config.config_file
        try:
            sections = self.config_lookup.parse(config_file)
        except (OSError, ValueError) as e:
            raise ConfigError(config_file, str(e)) from e

        value = sections.get("searchd", {}).get("pid_file")
        if isinstance(value, list):
            # last assignment wins for a repeated scalar key
            value = value[-1] if value else None

        pid_file = Path(value) if value else None
        if self.config.debug:
            logger.debug("Loaded %s: pid_file=%s", config_file, pid_file)
        return ResolvedConfigState(config_file=config_file, pid_file=pid_file)

    def read_pid_file(self) -> int | None:
        """Read the PID recorded in the PID file.

        Returns:
            PID if the file exists and holds a positive integer, else None

        Raises:
            ConfigError: If the config file cannot be parsed
        """
        pid_file = self.resolve_pid_file_path()
        if pid_file is None or not pid_file.is_file():
            return None

        try:
            content = pid_file.read_text(encoding="utf-8").strip()
        except UnicodeDecodeError:
            logger.warning("Ignoring malformed PID file %s: not valid text", pid_file)
            return None
        except OSError as e:
            logger.warning("Cannot read PID file %s: %s", pid_file, e)
            return None

        try:
            pid = int(content.split()[0]) if content else 0
        except ValueError:
            logger.warning("Ignoring malformed PID file %s: %r", pid_file, content)
            return None
        return pid if pid > 0 else None

    def daemon_pattern(self) -> re.Pattern[str]:
        """Pattern matching searchd running with the configured config file."""
        return build_daemon_pattern(self.config.config_file)

    def verify_pid(self, pid: int, name: str = DAEMON_NAME) -> bool:
        """Check that a live process has this PID and its command line names the daemon.

        Args:
            pid: Candidate PID
            name: Daemon name that must appear in the command line

        Returns:
            True if the PID is a live daemon process
        """
        match = self.process_table.lookup(pid)
        if match is None:
            return False
        return name in match.command_line

    def find_matching(self, pattern: re.Pattern[str]) -> list[ProcessMatch]:
        """Scan the whole process table for command lines matching a pattern.

        Args:
            pattern: Compiled command line pattern

        Returns:
            Every matching process, in table order
        """
        matches = []
        for process in self.process_table.processes():
            if self.config.debug > 2:
                logger.debug("Checking %s against %s", process.command_line, pattern.pattern)
            if command_line_matches(process.command_line, pattern):
                matches.append(process)
        return matches

    def find_daemon_pids(self) -> set[int]:
        """Find the PIDs of searchd processes using the configured config file.

        The PID file is trusted only if the process table confirms it. If it
        is missing, empty or stale, the process table is scanned and every
        matching process is returned.

        Returns:
            Set of PIDs; empty if searchd is not running

        Raises:
            ConfigError: If the config file cannot be parsed
        """
        pids: set[int] = set()

        pid = self.read_pid_file()
        if pid is not None and self.verify_pid(pid):
            pids.add(pid)

        if not pids:
            # PID file missing, empty or stale
            if pid is not None and self.config.debug:
                logger.debug("PID file names %d but no searchd has that PID", pid)
            pids = {m.pid for m in self.find_matching(self.daemon_pattern())}

        if self.config.debug:
            logger.debug(
                "Found searchd pid %s", ", ".join(str(p) for p in sorted(pids)) or "none"
            )
        return pids
