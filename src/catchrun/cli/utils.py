# src/catchrun/cli/utils.py

import logging

import click
from rich.console import Console

from catchrun.config import CatchRunConfig
from catchrun.telemetry.logger import setup_logging

DEFAULT_LOG_LEVEL = "WARNING"

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)


def logging_options(f):
    """Decorator adding the logging options of the top-level group."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="CATCHRUN_LOG_LEVEL",
        help=f"Logging level (overrides the config file). Default: {DEFAULT_LOG_LEVEL}.",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="CATCHRUN_LOG_FILE",
        help="Also write logs to this file, as JSON lines.",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=False,
        envvar="CATCHRUN_JSON_LOGS",
        help="Render console logs as JSON.",
    )(f)
    return f


def setup_logging_from_context(ctx: click.Context, config_log_level: str | None = None) -> None:
    """
    (Re)configures logging from the options stored on the context.

    --log-level (or its env var) wins over 'config_log_level', the level from
    a loaded configuration file, which wins over DEFAULT_LOG_LEVEL.
    """
    options = ctx.ensure_object(dict)
    level_name = (options.get("LOG_LEVEL") or config_log_level or DEFAULT_LOG_LEVEL).upper()
    setup_logging(
        level=logging.getLevelName(level_name),
        json_logs=options.get("JSON_LOGS", False),
        log_file=options.get("LOG_FILE"),
        console=Console(stderr=True),
    )


def apply_config_logging(ctx: click.Context, config: CatchRunConfig) -> None:
    """Re-applies logging with the log level of a loaded configuration file."""
    if config.config_file_path is not None:
        setup_logging_from_context(ctx, config.global_config.log_level)

# ⚙️🛠️
