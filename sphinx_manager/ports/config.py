"""Sphinx config lookup port.

Defines the interface for reading settings out of a Sphinx config file.
"""

from pathlib import Path
from typing import Protocol

SettingValue = str | list[str]


class ConfigLookup(Protocol):
    """Protocol for parsing a Sphinx config file."""

    def parse(self, config_file: Path) -> dict[str, dict[str, SettingValue]]:
        """Parse a config file into sections.

        Args:
            config_file: Path to sphinx.conf

        Returns:
            Mapping of section name (e.g. "searchd", "index main") to its
            settings. Keys that repeat within a section map to a list.

        Raises:
            OSError: If the file cannot be read
            ValueError: If the file is malformed
        """
        ...
