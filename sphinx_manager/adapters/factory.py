"""Factory for building a SphinxManager with production adapters.

Keeps the CLI layer free from direct adapter imports; adapters are imported
lazily so psutil is only loaded when a manager is actually built.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sphinx_manager.domain.config import ManagerConfig

if TYPE_CHECKING:
    from sphinx_manager.core.manager import SphinxManager


class ManagerFactory:
    """Factory for manager instances and their settings."""

    def create_manager(self, config: ManagerConfig) -> SphinxManager:
        """Create a SphinxManager backed by psutil and POSIX process primitives.

        Args:
            config: Manager configuration

        Returns:
            SphinxManager instance
        """
        from sphinx_manager.adapters.config.sphinx_config import SphinxConfigParser
        from sphinx_manager.adapters.process.posix_launcher import PosixProcessLauncher
        from sphinx_manager.adapters.process.psutil_table import PsutilProcessTable
        from sphinx_manager.core.manager import SphinxManager

        return SphinxManager(
            config=config,
            config_lookup=SphinxConfigParser(),
            process_table=PsutilProcessTable(),
            launcher=PosixProcessLauncher(),
        )

    def load_config(self, settings_path: Path | None = None) -> ManagerConfig:
        """Load manager settings, falling back to built-in defaults.

        Args:
            settings_path: Explicit settings file; must exist if given.
                Otherwise the user settings file is used when present.

        Returns:
            ManagerConfig

        Raises:
            FileNotFoundError: If an explicit settings file is missing
            ValueError: If the settings file is malformed
        """
        from sphinx_manager.shared.config_io import get_settings_path, load_settings

        if settings_path is not None:
            return load_settings(settings_path)

        default_path = get_settings_path()
        if default_path.exists():
            return load_settings(default_path)
        return ManagerConfig()
