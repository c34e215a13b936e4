"""Polling waits on the process table.

The process table is the only signal available for "has searchd started" and
"has searchd exited", so waits poll it on a fixed interval until a predicate
holds or the window closes.
"""

import logging
import re
import time
from collections.abc import Callable, Iterable

from sphinx_manager.core.pid_resolver import command_line_matches
from sphinx_manager.core.timeouts import ProcessTimeouts
from sphinx_manager.ports.process import ProcessTable

logger = logging.getLogger(__name__)

Predicate = Callable[[], bool]


class ProcessWaiter:
    """Waits for a predicate over the process table to become true."""

    def __init__(
        self,
        process_table: ProcessTable,
        poll_interval: float = ProcessTimeouts.POLL_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.process_table = process_table
        self.poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep

    def wait_until(self, timeout: float, predicate: Predicate) -> bool:
        """Poll a predicate until it holds or the timeout elapses.

        The predicate is checked immediately, then once per poll interval.

        Args:
            timeout: Maximum seconds to wait
            predicate: Zero-argument check

        Returns:
            True if the predicate became true within the window, False on timeout
        """
        deadline = self._clock() + timeout
        while True:
            if predicate():
                return True
            if self._clock() >= deadline:
                logger.debug("Gave up waiting after %gs", timeout)
                return False
            self._sleep(self.poll_interval)

    def process_gone(self, pids: Iterable[int]) -> Predicate:
        """Predicate: none of the given PIDs is in the process table."""
        pids = frozenset(pids)

        def check() -> bool:
            return all(self.process_table.lookup(pid) is None for pid in pids)

        return check

    def process_appeared(self, pattern: re.Pattern[str]) -> Predicate:
        """Predicate: some process command line matches the pattern."""

        def check() -> bool:
            return any(
                command_line_matches(p.command_line, pattern)
                for p in self.process_table.processes()
            )

        return check

    def wait_for_death(self, pids: Iterable[int], timeout: float) -> bool:
        """Wait for all given PIDs to vanish.

        Returns:
            True if they all died, False if any survived the timeout
        """
        return self.wait_until(timeout, self.process_gone(pids))

    def wait_for_process(self, pattern: re.Pattern[str], timeout: float) -> bool:
        """Wait for a process matching the pattern to appear.

        Returns:
            True if one appeared, False on timeout
        """
        return self.wait_until(timeout, self.process_appeared(pattern))
