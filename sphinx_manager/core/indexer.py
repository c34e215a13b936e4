"""Running the Sphinx indexer."""

import logging
from collections.abc import Sequence

from sphinx_manager.core.executable import ExecutableLocator, is_executable
from sphinx_manager.domain.config import ManagerConfig
from sphinx_manager.domain.entities import RunStatus
from sphinx_manager.domain.exceptions import (
    ExecutableNotFound,
    ExitStatusError,
    IndexerError,
    LaunchError,
    SignalError,
)
from sphinx_manager.ports.process import ProcessLauncher

logger = logging.getLogger(__name__)

INDEXER_NAME = "indexer"


def classify_run_status(command: list[str], status: RunStatus) -> IndexerError | None:
    """Translate a run outcome into an indexer error.

    Args:
        command: Argument vector that was run
        status: How the run ended

    Returns:
        None on success (including a child that was already reaped),
        otherwise exactly one of LaunchError, SignalError or ExitStatusError
    """
    if status.launch_error is not None:
        return LaunchError(command, status.launch_error)
    if status.no_child:
        return None
    if status.term_signal is not None:
        return SignalError(command, status.term_signal, status.core_dumped)
    if status.exit_code:
        return ExitStatusError(command, status.exit_code)
    return None


class IndexerRunner:
    """Runs indexer synchronously with the configured arguments."""

    def __init__(
        self,
        config: ManagerConfig,
        locator: ExecutableLocator,
        launcher: ProcessLauncher,
    ) -> None:
        self.config = config
        self.locator = locator
        self.launcher = launcher

    def build_command(self, extra_args: Sequence[str] = ()) -> list[str]:
        """Build the indexer argument vector.

        Returns:
            [indexer, "--config", <config file>, *indexer_args, *extra_args]

        Raises:
            ExecutableNotFound: If indexer cannot be located
        """
        indexer = self.locator.locate(INDEXER_NAME)
        logger.debug("Using indexer %s", indexer)
        if not is_executable(indexer):
            raise ExecutableNotFound(INDEXER_NAME, [indexer])
        return [
            str(indexer),
            "--config",
            str(self.config.config_file),
            *self.config.indexer_args,
            *(str(a) for a in extra_args),
        ]

    def run(self, extra_args: Sequence[str] = ()) -> None:
        """Run indexer to completion.

        Args:
            extra_args: Arguments appended after the configured indexer_args

        Raises:
            ExecutableNotFound: If indexer is missing or not executable
            LaunchError: If indexer could not be launched
            SignalError: If indexer was killed by a signal
            ExitStatusError: If indexer exited with a non-zero status
        """
        command = self.build_command(extra_args)
        logger.info("Running %s", " ".join(command))

        status = self.launcher.run(command)
        error = classify_run_status(command, status)
        if error is not None:
            raise error
        if status.no_child:
            logger.debug("indexer was reaped before its status could be collected")
