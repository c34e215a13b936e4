"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all sphinx-manager commands.
"""

from pathlib import Path
from typing import NoReturn

import click


class SphinxCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise SphinxCliError(
            "searchd is already running (PID 4242 from /var/run/searchd.pid)",
            hint="Use restart or reload instead of start",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present.

        Returns:
            Formatted error message, with hint on a new line if provided.
        """
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def settings_error(path: Path | None, reason: str) -> NoReturn:
    """Raise error when the settings file cannot be loaded.

    Raises:
        SphinxCliError: Always raises with settings context.
    """
    where = f" {path}" if path else ""
    raise SphinxCliError(
        f"Invalid settings{where}: {reason}",
        hint="Run 'sphinx-manager config show' to inspect the effective settings",
    )


def settings_exist_error(path: Path) -> NoReturn:
    """Raise error when refusing to overwrite a settings file.

    Raises:
        SphinxCliError: Always raises with overwrite hint.
    """
    raise SphinxCliError(
        f"Settings file already exists: {path}",
        hint="Use --force to overwrite it",
    )
