"""sphinx-manager CLI entrypoint.

Command-line interface for supervising searchd and running indexer.
"""

from __future__ import annotations

import functools
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from sphinx_manager.core.manager import SphinxManager

from sphinx_manager.core.errors import SphinxCliError, settings_error, settings_exist_error
from sphinx_manager.domain.config import ManagerConfig
from sphinx_manager.domain.exceptions import SphinxManagerError
from sphinx_manager.version import __version__

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    SphinxManagerError is converted to SphinxCliError carrying its hint;
    anything unexpected becomes a generic error, with a traceback in
    verbose mode.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SphinxCliError:
                raise
            except SphinxManagerError as e:
                raise SphinxCliError(e.message, hint=e.hint) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise SphinxCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool, debug: int) -> None:
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _load_config(ctx: click.Context) -> ManagerConfig:
    """Build the effective config: settings file, then command line overrides.

    Raises:
        SphinxCliError: If the settings file is missing or invalid
    """
    from sphinx_manager.adapters.factory import ManagerFactory

    settings_path = ctx.obj.get("settings")
    try:
        config = ManagerFactory().load_config(settings_path)
        overrides = {k: v for k, v in ctx.obj.get("overrides", {}).items() if v is not None}
        config = replace(config, **overrides)
    except (FileNotFoundError, ValueError) as e:
        settings_error(settings_path, str(e))

    # debug may come from the settings file, not only from --debug
    _configure_logging(ctx.obj.get("verbose", False), config.debug)
    return config


def _create_manager(ctx: click.Context) -> SphinxManager:
    from sphinx_manager.adapters.factory import ManagerFactory

    return ManagerFactory().create_manager(_load_config(ctx))


def _echo(ctx: click.Context, message: str) -> None:
    if not ctx.obj.get("quiet", False):
        click.echo(message)


@click.group()
@click.version_option(version=__version__, prog_name="sphinx-manager")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option(
    "--settings",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Manager settings file (default: ~/.config/sphinx-manager/config.toml).",
)
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Sphinx config file (default: sphinx.conf).",
)
@click.option(
    "--pid-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="searchd PID file; overrides the value in the Sphinx config.",
)
@click.option(
    "--bindir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory containing searchd and indexer.",
)
@click.option(
    "--timeout",
    "process_timeout",
    type=click.FloatRange(min=0, min_open=True),
    help="Seconds to wait for searchd to start or stop.",
)
@click.option("--debug", "-d", count=True, help="Increase diagnostic output (repeatable).")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    settings: Path | None,
    config_file: Path | None,
    pid_file: Path | None,
    bindir: Path | None,
    process_timeout: float | None,
    debug: int,
) -> None:
    """sphinx-manager - Sphinx searchd supervision and indexer runs."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["settings"] = settings
    ctx.obj["overrides"] = {
        "config_file": config_file,
        "pid_file": pid_file,
        "bindir": bindir,
        "process_timeout": process_timeout,
        "debug": debug or None,
    }


@cli.command()
@click.pass_context
@handle_cli_errors("start")
def start(ctx: click.Context) -> None:
    """Start searchd in the background."""
    manager = _create_manager(ctx)
    manager.start_searchd()
    _echo(ctx, "✓ searchd started")


@cli.command()
@click.pass_context
@handle_cli_errors("stop")
def stop(ctx: click.Context) -> None:
    """Stop searchd (SIGTERM, then SIGKILL)."""
    manager = _create_manager(ctx)
    if not manager.get_searchd_pids():
        _echo(ctx, "searchd is not running")
        return
    manager.stop_searchd()
    _echo(ctx, "✓ searchd stopped")


@cli.command()
@click.pass_context
@handle_cli_errors("restart")
def restart(ctx: click.Context) -> None:
    """Stop and then start searchd."""
    manager = _create_manager(ctx)
    manager.restart_searchd()
    _echo(ctx, "✓ searchd restarted")


@cli.command()
@click.pass_context
@handle_cli_errors("reload")
def reload(ctx: click.Context) -> None:
    """Send SIGHUP to searchd, starting it if it is not running."""
    manager = _create_manager(ctx)
    manager.reload_searchd()
    _echo(ctx, "✓ searchd reloaded")


@cli.command()
@click.pass_context
@handle_cli_errors("pids")
def pids(ctx: click.Context) -> None:
    """Print the PIDs of running searchd processes, one per line."""
    manager = _create_manager(ctx)
    for pid in sorted(manager.get_searchd_pids()):
        click.echo(pid)


@cli.command()
@click.pass_context
@handle_cli_errors("status")
def status(ctx: click.Context) -> None:
    """Show searchd status."""
    manager = _create_manager(ctx)
    report = manager.status()

    if report.running:
        click.echo(f"✓ searchd is running (PID {', '.join(str(p) for p in sorted(report.pids))})")
    else:
        click.echo("✗ searchd is not running")

    click.echo("\nDetails:")
    click.echo(f"  Status: {report.state.value}")
    click.echo(f"  Config: {report.config_file}")
    if report.pid_file is None:
        click.echo("  PID file: (not configured)")
    else:
        missing = "" if report.pid_file_exists else " (missing)"
        click.echo(f"  PID file: {report.pid_file}{missing}")

    if report.message and not report.running:
        click.echo(f"\n{report.message}")


@cli.command(context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
@handle_cli_errors("index")
def index(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Run indexer; ARGS are passed after the configured indexer_args.

    Example: sphinx-manager index -- --all --rotate
    """
    manager = _create_manager(ctx)
    manager.run_indexer(*args)
    _echo(ctx, "✓ indexer finished")


@cli.group()
def config() -> None:
    """Manage sphinx-manager settings."""
    pass


@config.command(name="show")
@click.pass_context
@handle_cli_errors("config show")
def config_show(ctx: click.Context) -> None:
    """Show the effective settings."""
    from sphinx_manager.shared.config_io import config_to_settings_data, get_settings_path

    settings_path = ctx.obj.get("settings") or get_settings_path()
    exists = "exists" if settings_path.exists() else "not found"
    click.echo(f"Settings file: {settings_path} ({exists})")

    config = _load_config(ctx)
    click.echo("\nEffective settings:")
    for key, value in config_to_settings_data(config).items():
        click.echo(f"  {key} = {value}")


@config.command(name="init")
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing settings file.")
@click.pass_context
@handle_cli_errors("config init")
def config_init(ctx: click.Context, force: bool) -> None:
    """Write the effective settings to the settings file."""
    from sphinx_manager.shared.config_io import get_settings_path, save_settings

    settings_path = ctx.obj.get("settings") or get_settings_path()
    if settings_path.exists() and not force:
        settings_exist_error(settings_path)

    # an explicit --settings file may not exist yet: start from defaults
    ctx.obj["settings"] = settings_path if settings_path.exists() else None
    config = _load_config(ctx)
    save_settings(config, settings_path)
    _echo(ctx, f"✓ Wrote settings to {settings_path}")


def main() -> int:
    """Main entrypoint for the CLI."""
    try:
        cli(obj={})
        return 0
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
