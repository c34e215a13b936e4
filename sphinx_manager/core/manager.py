"""Caller-facing facade over searchd supervision and indexer runs."""

from sphinx_manager.core.executable import ExecutableLocator
from sphinx_manager.core.indexer import IndexerRunner
from sphinx_manager.core.lifecycle import LifecycleController
from sphinx_manager.core.pid_resolver import PidResolver
from sphinx_manager.core.waiter import ProcessWaiter
from sphinx_manager.domain.config import ManagerConfig
from sphinx_manager.domain.entities import DaemonState, DaemonStatus, LifecycleState
from sphinx_manager.ports.config import ConfigLookup
from sphinx_manager.ports.process import ProcessLauncher, ProcessTable


class SphinxManager:
    """Sphinx search engine management (start/stop/reload, indexer runs).

    Example:
        manager = ManagerFactory().create_manager(
            ManagerConfig(config_file=Path("/etc/sphinx.conf"))
        )
        manager.start_searchd()
        manager.reload_searchd()
        manager.get_searchd_pids()
        manager.run_indexer("--all", "--rotate")
        manager.stop_searchd()
    """

    def __init__(
        self,
        config: ManagerConfig,
        config_lookup: ConfigLookup,
        process_table: ProcessTable,
        launcher: ProcessLauncher,
        waiter: ProcessWaiter | None = None,
    ) -> None:
        self._config = config
        self.resolver = PidResolver(config, config_lookup, process_table)
        self.waiter = waiter or ProcessWaiter(process_table)
        self.launcher = launcher
        self.locator = ExecutableLocator(config.bindir)
        self.controller = LifecycleController(
            config, self.resolver, self.locator, self.waiter, launcher
        )
        self.indexer = IndexerRunner(config, self.locator, launcher)

    @property
    def config(self) -> ManagerConfig:
        return self._config

    @config.setter
    def config(self, config: ManagerConfig) -> None:
        """Switch to a new configuration.

        The parsed PID file path is kept and reused only if the new config
        names the same config file.
        """
        self._config = config
        self.resolver.config = config
        self.controller.config = config
        self.indexer.config = config
        self.locator.bindir = config.bindir

    @property
    def lifecycle_state(self) -> LifecycleState:
        return self.controller.state

    def start_searchd(self) -> None:
        """Start searchd; fails if it is already running."""
        self.controller.start()

    def stop_searchd(self) -> None:
        """Stop searchd; succeeds if it is not running."""
        self.controller.stop()

    def restart_searchd(self) -> None:
        """Stop then start searchd."""
        self.controller.restart()

    def reload_searchd(self) -> None:
        """Send SIGHUP to searchd, or start it if it is not running."""
        self.controller.reload()

    def get_searchd_pids(self) -> set[int]:
        """Return the PIDs of running searchd processes (empty if none)."""
        return self.resolver.find_daemon_pids()

    def run_indexer(self, *extra_args: str) -> None:
        """Run indexer with --config, configured indexer_args, then extra_args."""
        self.indexer.run(extra_args)

    def status(self) -> DaemonStatus:
        """Get searchd status.

        Returns:
            DaemonStatus snapshot built from the PID file and process table
        """
        pid_file = self.resolver.resolve_pid_file_path()
        pid_file_exists = pid_file is not None and pid_file.is_file()
        file_pid = self.resolver.read_pid_file()
        pids = self.resolver.find_daemon_pids()

        status = DaemonStatus(
            state=DaemonState.NOT_RUNNING,
            pids=pids,
            pid_file=pid_file,
            pid_file_exists=pid_file_exists,
            pid_file_pid=file_pid,
            config_file=self.config.config_file,
        )

        listed = ", ".join(str(p) for p in sorted(pids))
        if pids:
            status.state = DaemonState.RUNNING
            status.message = f"searchd is running (PID {listed})"
            if file_pid is not None and file_pid not in pids:
                status.message += f"; PID file is stale (names {file_pid})"
        elif file_pid is not None:
            status.state = DaemonState.INDETERMINATE
            status.message = (
                f"PID file {pid_file} names {file_pid} but no searchd process was found"
            )
        else:
            status.message = "searchd is not running"
        return status
