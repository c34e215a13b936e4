"""POSIX spawn/signal/run primitives.

Uses subprocess for launching so that exec failures surface as OSError in
the caller, and os.waitpid for synchronous runs so the raw wait status
(including the core dump flag) is available.
"""

import logging
import os
import subprocess
from collections.abc import Sequence

from sphinx_manager.domain.entities import RunStatus

logger = logging.getLogger(__name__)


class PosixProcessLauncher:
    """Process primitives for POSIX systems."""

    def __init__(self) -> None:
        self._spawned: list[subprocess.Popen] = []

    def _reap_zombies(self) -> None:
        """Collect exit status of detached children that have exited.

        A daemon that forks into the background leaves its launcher process
        exited but unreaped until we poll it.
        """
        self._spawned = [p for p in self._spawned if p.poll() is None]

    def spawn_detached(self, argv: Sequence[str]) -> int:
        """Launch a program in its own session, not waited on.

        The child is placed in a new session so it neither receives the
        caller's terminal signals nor dies with it.

        Args:
            argv: Program path followed by its arguments

        Returns:
            PID of the spawned process

        Raises:
            OSError: If the program cannot be executed
        """
        self._reap_zombies()
        process = subprocess.Popen(
            list(argv),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,  # Detach from parent
            close_fds=True,
        )
        self._spawned.append(process)
        logger.debug("Spawned detached PID %d", process.pid)
        return process.pid

    def send_signal(self, pid: int, sig: int) -> bool:
        """Send a signal, tolerating a process that has already exited.

        Returns:
            True if delivered, False if no such process

        Raises:
            PermissionError: If the caller may not signal the process
        """
        self._reap_zombies()
        try:
            os.kill(pid, sig)
        except ProcessLookupError:
            return False
        return True

    def run(self, argv: Sequence[str]) -> RunStatus:
        """Run a program and wait for it.

        Args:
            argv: Program path followed by its arguments

        Returns:
            RunStatus with launch_error, no_child, term_signal or exit_code set
        """
        try:
            process = subprocess.Popen(list(argv))
        except OSError as e:
            return RunStatus(launch_error=e.strerror or str(e))

        try:
            _, status = os.waitpid(process.pid, 0)
        except ChildProcessError:
            # already reaped, e.g. SIGCHLD is ignored by the host process
            process.returncode = 0
            return RunStatus(no_child=True)

        process.returncode = os.waitstatus_to_exitcode(status)
        if os.WIFSIGNALED(status):
            return RunStatus(
                term_signal=os.WTERMSIG(status),
                core_dumped=os.WCOREDUMP(status),
            )
        return RunStatus(exit_code=os.WEXITSTATUS(status))
