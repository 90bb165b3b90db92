# src/catchrun/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from catchrun.cli.utils import apply_config_logging
from catchrun.config import load_config
from catchrun.exceptions import ConfigurationError
from catchrun.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")

DEFAULT_CONFIG_PATH = Path("catchrun.toml")


def config_path_option(f):
    """Decorator adding the shared --config-path option."""
    return click.option(
        "-c",
        "--config-path",
        type=click.Path(file_okay=True, dir_okay=False, path_type=Path),
        default=DEFAULT_CONFIG_PATH,
        show_default=True,
        envvar="CATCHRUN_CONF",
        help="Path to the catchrun configuration file (env var CATCHRUN_CONF).",
        show_envvar=True,
    )(f)


# Create a command group for config-related commands
@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""
    pass


@config_cli.command(name="show")
@config_path_option
@click.pass_context
def show_config(ctx: click.Context, config_path: Path):
    """Load, validate, and display the configuration."""
    log.info("Executing 'config show' command", config_path=str(config_path))

    try:
        config = load_config(config_path)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: Configuration problem in '{config_path}':\n{e}", err=True)
        ctx.exit(1)

    apply_config_logging(ctx, config)
    if config.config_file_path is None:
        click.echo(f"No configuration file at '{config_path}', showing defaults.", err=True)
    click.echo(pretty_repr(config, expand_all=True))

# 🔼⚙️
