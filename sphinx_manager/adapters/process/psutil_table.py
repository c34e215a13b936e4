"""Process table adapter backed by psutil."""

import logging
from collections.abc import Iterator

import psutil

from sphinx_manager.domain.entities import ProcessMatch

logger = logging.getLogger(__name__)

_ATTRS = ["pid", "name", "cmdline", "status"]


def _command_line(cmdline: list[str] | None, name: str | None) -> str:
    # cmdline is empty for kernel threads and unreadable for other users' processes
    if cmdline:
        return " ".join(cmdline)
    return name or ""


class PsutilProcessTable:
    """Enumerates live processes with psutil.

    Zombies are skipped: a daemon that exited but has not been reaped yet is
    not running for supervision purposes.
    """

    def processes(self) -> Iterator[ProcessMatch]:
        """Iterate over every live, non-zombie process."""
        for proc in psutil.process_iter(_ATTRS, ad_value=None):
            info = proc.info
            if info.get("status") == psutil.STATUS_ZOMBIE:
                continue
            yield ProcessMatch(
                pid=info["pid"],
                command_line=_command_line(info.get("cmdline"), info.get("name")),
            )

    def lookup(self, pid: int) -> ProcessMatch | None:
        """Find a live, non-zombie process by PID.

        Args:
            pid: Process ID

        Returns:
            ProcessMatch, or None if no such process is alive. A process whose
            details are inaccessible is reported with an empty command line.
        """
        try:
            proc = psutil.Process(pid)
            with proc.oneshot():
                if proc.status() == psutil.STATUS_ZOMBIE:
                    return None
                try:
                    cmdline = proc.cmdline()
                except (psutil.AccessDenied, psutil.ZombieProcess):
                    cmdline = []
                return ProcessMatch(pid=pid, command_line=_command_line(cmdline, proc.name()))
        except psutil.NoSuchProcess:
            return None
        except psutil.AccessDenied:
            logger.debug("Access denied inspecting PID %d", pid)
            return ProcessMatch(pid=pid, command_line="")
