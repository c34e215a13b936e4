"""Locating the Sphinx binaries."""

import logging
import os
from pathlib import Path

from sphinx_manager.domain.exceptions import ExecutableNotFound

logger = logging.getLogger(__name__)


def is_executable(path: Path) -> bool:
    """Check that a path is a regular file the current user may execute."""
    return path.is_file() and os.access(path, os.X_OK)


class ExecutableLocator:
    """Finds searchd/indexer in the configured bindir or on PATH."""

    def __init__(self, bindir: Path | None = None, search_path: str | None = None) -> None:
        """Initialize locator.

        Args:
            bindir: Directory holding the binaries; trusted without checks if set
            search_path: PATH-style directory list (default: $PATH)
        """
        self.bindir = bindir
        self._search_path = search_path

    def search_dirs(self) -> list[Path]:
        path = self._search_path
        if path is None:
            path = os.environ.get("PATH", os.defpath)
        return [Path(d) for d in path.split(os.pathsep) if d]

    def locate(self, name: str) -> Path:
        """Resolve the path of a binary.

        Args:
            name: Binary name, e.g. "searchd"

        Returns:
            <bindir>/<name> if bindir is configured, else the first executable
            <dir>/<name> on the search path, made absolute against the
            current directory

        Raises:
            ExecutableNotFound: If no search path entry holds an executable of that name
        """
        if self.bindir is not None:
            return (self.bindir / name).absolute()

        dirs = self.search_dirs()
        for directory in dirs:
            candidate = directory / name
            if is_executable(candidate):
                logger.debug("Found %s in %s", name, directory)
                return candidate.absolute()
        raise ExecutableNotFound(name, dirs)
