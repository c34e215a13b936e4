"""Domain entities for process supervision.

These are pure dataclasses and enums with no infrastructure dependencies.
None of them is persisted: every value is recomputed from the PID file and
the process table on demand.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class DaemonState(str, Enum):
    """Observed state of searchd, derived from the PID file and process table.

    - NOT_RUNNING: nothing found
    - RUNNING: at least one searchd process found
    - INDETERMINATE: the PID file names a PID the process table does not confirm
    """

    NOT_RUNNING = "not_running"
    RUNNING = "running"
    INDETERMINATE = "indeterminate"


class LifecycleState(str, Enum):
    """States the lifecycle controller moves through during an operation."""

    NOT_RUNNING = "not_running"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    FAILED = "failed"


@dataclass(frozen=True)
class ProcessMatch:
    """A process selected from the process table.

    Attributes:
        pid: Process ID
        command_line: The command line that caused the process to be selected
    """

    pid: int
    command_line: str


@dataclass(frozen=True)
class RunStatus:
    """Raw outcome of a synchronous program run.

    Exactly one of the fields describes what happened:
    launch_error is set if the program never started; no_child is True if
    the child had already been reaped elsewhere; term_signal is set if it was
    killed by a signal; otherwise exit_code holds its exit status.
    """

    exit_code: int | None = None
    term_signal: int | None = None
    core_dumped: bool = False
    launch_error: str | None = None
    no_child: bool = False


@dataclass
class DaemonStatus:
    """Snapshot of searchd status for display.

    Attributes:
        state: Derived daemon state
        pids: PIDs of searchd processes found
        pid_file: Resolved PID file path (None if the config names none)
        pid_file_exists: Whether the PID file is present
        pid_file_pid: PID read from the PID file, if any
        config_file: Sphinx config file in use
        message: Human-readable summary
    """

    state: DaemonState
    pids: set[int] = field(default_factory=set)
    pid_file: Path | None = None
    pid_file_exists: bool = False
    pid_file_pid: int | None = None
    config_file: Path | None = None
    message: str = ""

    @property
    def running(self) -> bool:
        return self.state is DaemonState.RUNNING
