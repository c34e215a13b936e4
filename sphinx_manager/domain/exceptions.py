"""Domain exceptions for sphinx-manager.

Every failure a lifecycle or indexer operation can produce is one of these
types. They are raised to the immediate caller and converted to user-facing
messages at the application boundary (CLI).
"""

from pathlib import Path


class SphinxManagerError(Exception):
    """Base exception for all manager errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class ConfigError(SphinxManagerError):
    """Raised when the Sphinx config file cannot be read or parsed."""

    def __init__(self, config_file: Path | str, reason: str) -> None:
        super().__init__(
            f"Failed to load Sphinx config {config_file}: {reason}",
            hint="Check that the config file exists and is readable",
        )
        self.config_file = Path(config_file)
        self.reason = reason


class ExecutableNotFound(SphinxManagerError):
    """Raised when a Sphinx binary cannot be located or executed."""

    def __init__(self, name: str, searched: list[Path] | None = None) -> None:
        searched = searched or []
        locations = ", ".join(str(p) for p in searched) or "(nowhere)"
        super().__init__(
            f"Failed to find executable {name} (searched: {locations})",
            hint="Set bindir to the directory containing the Sphinx binaries",
        )
        self.name = name
        self.searched = searched


class AlreadyRunning(SphinxManagerError):
    """Raised when starting searchd while a live instance is recorded."""

    def __init__(self, pid: int, pid_file: Path) -> None:
        super().__init__(
            f"searchd is already running (PID {pid} from {pid_file})",
            hint="Use restart or reload instead of start",
        )
        self.pid = pid
        self.pid_file = pid_file


class StartTimeout(SphinxManagerError):
    """Raised when searchd never shows up in the process table after spawn."""

    def __init__(self, pattern: str, timeout: float) -> None:
        super().__init__(
            f"searchd not running after {timeout:g}s "
            f"(no process matching '{pattern}')",
            hint="Check the searchd log for startup errors",
        )
        self.pattern = pattern
        self.timeout = timeout


class StopFailed(SphinxManagerError):
    """Raised when searchd survives both SIGTERM and SIGKILL."""

    def __init__(self, pids: set[int]) -> None:
        listed = ", ".join(str(p) for p in sorted(pids))
        super().__init__(
            f"Failed to stop searchd PID {listed}, even with sure kill",
            hint="Manual cleanup required",
        )
        self.pids = set(pids)


class IndexerError(SphinxManagerError):
    """Base class for failed indexer runs.

    Attributes:
        command: The argument vector that was run.
    """

    def __init__(self, command: list[str], message: str) -> None:
        super().__init__(message)
        self.command = list(command)


class LaunchError(IndexerError):
    """The indexer process could not be launched at all."""

    def __init__(self, command: list[str], reason: str) -> None:
        super().__init__(command, f"{' '.join(command)} failed to execute: {reason}")
        self.reason = reason


class SignalError(IndexerError):
    """The indexer was terminated by a signal."""

    def __init__(self, command: list[str], signal: int, core_dumped: bool) -> None:
        super().__init__(
            command,
            f"{' '.join(command)} died with signal {signal}, "
            f"{'with' if core_dumped else 'without'} coredump",
        )
        self.signal = signal
        self.core_dumped = core_dumped


class ExitStatusError(IndexerError):
    """The indexer exited normally with a non-zero status."""

    def __init__(self, command: list[str], exit_code: int) -> None:
        super().__init__(command, f"{' '.join(command)} exited with value {exit_code}")
        self.exit_code = exit_code
