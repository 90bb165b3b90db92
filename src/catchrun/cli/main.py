# src/catchrun/cli/main.py

"""
Entry point of the catchrun command line.
"""

from importlib.metadata import PackageNotFoundError, version

import click

from catchrun.cli.config_cmds import config_cli
from catchrun.cli.run_cmds import list_cli, run_cli
from catchrun.cli.utils import logging_options, setup_logging_from_context

try:
    __version__ = version("catchrun")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="catchrun")
@logging_options
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_file: str | None, json_logs: bool):
    """
    Catchrun: run Catch C++ unit tests and report their results.

    Each test case runs in its own process, optionally under a debugger, and
    failures are mapped back to source file and line.
    Settings precedence: CLI options > environment variables > config file > defaults.
    """
    ctx.ensure_object(dict).update(LOG_LEVEL=log_level, LOG_FILE=log_file, JSON_LOGS=json_logs)
    setup_logging_from_context(ctx)


cli.add_command(config_cli)
cli.add_command(list_cli)
cli.add_command(run_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
