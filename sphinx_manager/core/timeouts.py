"""Centralized timing configuration for process supervision.

All values are in seconds.
"""


class ProcessTimeouts:
    """Timing constants for waiting on searchd.

    The per-operation wait window is ManagerConfig.process_timeout; the values
    here are the fixed parts of the polling protocol.
    """

    POLL_INTERVAL: float = 1.0
    """Interval between process table scans while waiting."""
