"""Port interfaces for the operating system's process facilities.

Defines protocols for querying the process table and for spawning,
signalling and running programs.
"""

from collections.abc import Iterator, Sequence
from typing import Protocol

from sphinx_manager.domain.entities import ProcessMatch, RunStatus


class ProcessTable(Protocol):
    """Protocol for enumerating live processes."""

    def processes(self) -> Iterator[ProcessMatch]:
        """Iterate over every live process.

        Returns:
            Iterator of ProcessMatch, one per process, carrying its full
            command line (or executable name when the command line is unreadable)
        """
        ...

    def lookup(self, pid: int) -> ProcessMatch | None:
        """Find a live process by PID.

        Args:
            pid: Process ID

        Returns:
            ProcessMatch if a live process has that PID, else None
        """
        ...


class ProcessLauncher(Protocol):
    """Protocol for the raw spawn/signal/run primitives."""

    def spawn_detached(self, argv: Sequence[str]) -> int:
        """Launch a program that outlives the caller and is not waited on.

        Args:
            argv: Program path followed by its arguments

        Returns:
            PID of the spawned process

        Raises:
            OSError: If the program cannot be launched
        """
        ...

    def send_signal(self, pid: int, sig: int) -> bool:
        """Send a signal to a process.

        Args:
            pid: Process ID
            sig: Signal number

        Returns:
            True if delivered, False if the process no longer exists
        """
        ...

    def run(self, argv: Sequence[str]) -> RunStatus:
        """Run a program synchronously to completion.

        Args:
            argv: Program path followed by its arguments

        Returns:
            RunStatus describing how the program ended
        """
        ...
