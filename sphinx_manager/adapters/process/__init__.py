"""Operating system process adapters.

Architecture:
- psutil_table.py: process table enumeration (psutil)
- posix_launcher.py: detached spawn, signals and synchronous runs
"""

from sphinx_manager.adapters.process.posix_launcher import PosixProcessLauncher
from sphinx_manager.adapters.process.psutil_table import PsutilProcessTable

__all__ = ["PosixProcessLauncher", "PsutilProcessTable"]
