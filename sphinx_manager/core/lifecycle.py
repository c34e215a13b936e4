"""searchd lifecycle management (start/stop/restart/reload).

State machine:

    NOT_RUNNING -> STARTING -> RUNNING -> STOPPING -> NOT_RUNNING

with FAILED reachable from STARTING (start timeout) and STOPPING (process
survived SIGTERM and SIGKILL). The state is recorded for observability only;
every decision is made from a fresh look at the PID file and process table.
"""

import logging
import signal
from pathlib import Path

from sphinx_manager.core.executable import ExecutableLocator
from sphinx_manager.core.pid_resolver import DAEMON_NAME, PidResolver
from sphinx_manager.core.waiter import ProcessWaiter
from sphinx_manager.domain.config import ManagerConfig
from sphinx_manager.domain.entities import LifecycleState
from sphinx_manager.domain.exceptions import (
    AlreadyRunning,
    ExecutableNotFound,
    SphinxManagerError,
    StartTimeout,
    StopFailed,
)
from sphinx_manager.ports.process import ProcessLauncher

logger = logging.getLogger(__name__)


class LifecycleController:
    """Starts, stops, restarts and reloads searchd."""

    def __init__(
        self,
        config: ManagerConfig,
        resolver: PidResolver,
        locator: ExecutableLocator,
        waiter: ProcessWaiter,
        launcher: ProcessLauncher,
    ) -> None:
        self.config = config
        self.resolver = resolver
        self.locator = locator
        self.waiter = waiter
        self.launcher = launcher
        self.state = LifecycleState.NOT_RUNNING

    def _transition(self, state: LifecycleState) -> None:
        if self.config.debug and state is not self.state:
            logger.debug("searchd lifecycle: %s -> %s", self.state.value, state.value)
        self.state = state

    def build_searchd_command(self, searchd: Path) -> list[str]:
        """Build the searchd argument vector.

        Args:
            searchd: Path to the searchd binary

        Returns:
            [searchd, "--config", <config file>, *searchd_args]
        """
        return [
            str(searchd),
            "--config",
            str(self.config.config_file),
            *self.config.searchd_args,
        ]

    def _check_not_running(self) -> None:
        """Raise AlreadyRunning if the PID file names a live searchd.

        Raises:
            AlreadyRunning: If the recorded PID is a live searchd process
        """
        pid_file = self.resolver.resolve_pid_file_path()
        if self.config.debug:
            logger.debug("start_searchd: Checking pidfile %s", pid_file)

        pid = self.resolver.read_pid_file()
        if pid is None:
            return
        if self.config.debug:
            logger.debug("start_searchd: Found PID %d", pid)
        if self.resolver.verify_pid(pid):
            raise AlreadyRunning(pid, pid_file)

    def _spawn(self, command: list[str]) -> int:
        try:
            return self.launcher.spawn_detached(command)
        except (FileNotFoundError, PermissionError) as e:
            self._transition(LifecycleState.FAILED)
            raise ExecutableNotFound(DAEMON_NAME, [Path(command[0])]) from e
        except OSError as e:
            self._transition(LifecycleState.FAILED)
            raise SphinxManagerError(f"Failed to launch {command[0]}: {e}") from e

    def start(self) -> None:
        """Start searchd detached and wait for it to appear.

        Raises:
            AlreadyRunning: If the PID file names a live searchd
            ConfigError: If the Sphinx config file cannot be parsed
            ExecutableNotFound: If searchd cannot be located or launched
            StartTimeout: If no matching process appears within process_timeout
        """
        self._check_not_running()

        searchd = self.locator.locate(DAEMON_NAME)
        command = self.build_searchd_command(searchd)
        logger.info("Starting searchd: %s", " ".join(command))

        self._transition(LifecycleState.STARTING)
        pid = self._spawn(command)
        if self.config.debug:
            logger.debug("Spawned searchd launcher PID %d", pid)

        pattern = self.resolver.daemon_pattern()
        if not self.waiter.wait_for_process(pattern, self.config.process_timeout):
            self._transition(LifecycleState.FAILED)
            raise StartTimeout(pattern.pattern, self.config.process_timeout)

        self._transition(LifecycleState.RUNNING)
        logger.info("searchd started")

    def _signal_all(self, pids: set[int], sig: signal.Signals) -> None:
        for pid in sorted(pids):
            if not self.launcher.send_signal(pid, sig):
                logger.debug("PID %d already gone before %s", pid, sig.name)

    def _stop_with_sigterm(self, pids: set[int]) -> bool:
        """Attempt graceful shutdown with SIGTERM.

        Returns:
            True if every PID exited within process_timeout
        """
        logger.info("Stopping searchd (PID %s)...", ", ".join(str(p) for p in sorted(pids)))
        self._signal_all(pids, signal.SIGTERM)
        return self.waiter.wait_for_death(pids, self.config.process_timeout)

    def _stop_with_sigkill(self, pids: set[int]) -> bool:
        """Force kill with SIGKILL as last resort.

        Returns:
            True if every PID exited within process_timeout
        """
        logger.warning("searchd did not stop gracefully, sending SIGKILL...")
        self._signal_all(pids, signal.SIGKILL)
        return self.waiter.wait_for_death(pids, self.config.process_timeout)

    def stop(self) -> None:
        """Stop searchd.

        Shutdown sequence:
        1. Resolve PIDs (nothing found means already stopped)
        2. SIGTERM every PID and wait up to process_timeout
        3. If any survive, SIGKILL the same set and wait again

        Raises:
            ConfigError: If the Sphinx config file cannot be parsed
            StopFailed: If any PID survives SIGKILL
        """
        pids = self.resolver.find_daemon_pids()
        if not pids:
            logger.info("searchd not running")
            self._transition(LifecycleState.NOT_RUNNING)
            return

        self._transition(LifecycleState.STOPPING)
        if self._stop_with_sigterm(pids):
            logger.info("searchd stopped gracefully")
            self._transition(LifecycleState.NOT_RUNNING)
            return

        if self._stop_with_sigkill(pids):
            logger.info("searchd force-killed")
            self._transition(LifecycleState.NOT_RUNNING)
            return

        survivors = {pid for pid in pids if self.resolver.process_table.lookup(pid) is not None}
        self._transition(LifecycleState.FAILED)
        raise StopFailed(survivors or pids)

    def restart(self) -> None:
        """Stop then start searchd.

        Not atomic: another manager may start searchd between the two phases.
        """
        logger.info("Restarting searchd...")
        self.stop()
        self.start()

    def reload(self) -> None:
        """Send SIGHUP to running searchd, or start it if none is running.

        The daemon completes the reload asynchronously; nothing is waited on.
        """
        pids = self.resolver.find_daemon_pids()
        if not pids:
            logger.info("searchd not running, starting it instead of reloading")
            self.start()
            return

        logger.info("Reloading searchd (PID %s)", ", ".join(str(p) for p in sorted(pids)))
        self._signal_all(pids, signal.SIGHUP)
