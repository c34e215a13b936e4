"""Config domain model for sphinx-manager.

ManagerConfig is the validated, immutable set of options a manager is built
with. It can be loaded from a TOML settings file (see shared.config_io) or
constructed directly.
"""

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CONFIG_FILE = Path("sphinx.conf")
DEFAULT_PROCESS_TIMEOUT = 10


@dataclass(frozen=True)
class ManagerConfig:
    """Complete manager configuration.

    Attributes:
        config_file: Sphinx config file (default: sphinx.conf in the cwd)
        pid_file: Explicit searchd PID file; overrides the config file value
        bindir: Directory holding the Sphinx binaries; PATH is searched if unset
        searchd_args: Extra arguments for searchd (excluding --config)
        indexer_args: Extra arguments for indexer (excluding --config)
        process_timeout: Seconds to wait for processes to start or stop
        debug: Diagnostic verbosity (0 = off, 1 = lifecycle, 3 = every process checked)

    Raises:
        ValueError: If process_timeout is not positive or debug is negative.
    """

    config_file: Path = DEFAULT_CONFIG_FILE
    pid_file: Path | None = None
    bindir: Path | None = None
    searchd_args: tuple[str, ...] = field(default_factory=tuple)
    indexer_args: tuple[str, ...] = field(default_factory=tuple)
    process_timeout: float = DEFAULT_PROCESS_TIMEOUT
    debug: int = 0

    def __post_init__(self) -> None:
        """Normalize path and argument types, then validate."""
        # frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, "config_file", Path(self.config_file))
        if self.pid_file is not None:
            object.__setattr__(self, "pid_file", Path(self.pid_file))
        if self.bindir is not None:
            object.__setattr__(self, "bindir", Path(self.bindir))
        object.__setattr__(self, "searchd_args", tuple(str(a) for a in self.searchd_args))
        object.__setattr__(self, "indexer_args", tuple(str(a) for a in self.indexer_args))

        if self.process_timeout <= 0:
            raise ValueError(
                f"process_timeout must be positive, got {self.process_timeout}"
            )
        if self.debug < 0:
            raise ValueError(f"debug cannot be negative, got {self.debug}")
