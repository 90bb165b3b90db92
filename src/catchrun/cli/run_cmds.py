# src/catchrun/cli/run_cmds.py

import asyncio
import logging
import signal
import sys
from collections.abc import Sequence
from pathlib import Path

import click
import structlog
from rich.console import Console

from catchrun.cli.config_cmds import config_path_option
from catchrun.cli.utils import apply_config_logging
from catchrun.config import CatchRunConfig, load_config
from catchrun.discovery import ListingTestDiscoverer
from catchrun.exceptions import ConfigurationError, DiscoveryError, ExecutorBusyError
from catchrun.execution import CatchTestExecutor, ProcessRunner
from catchrun.launchers import CommandDebuggerLauncher
from catchrun.models import ExecutionContext, TestCaseDescriptor
from catchrun.reporting import ConsoleReporter
from catchrun.state import ExecutorState
from catchrun.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.run")

EXIT_OK = 0
EXIT_TESTS_FAILED = 1
EXIT_ERROR = 2
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT


def _load_config_or_exit(ctx: click.Context, config_path: Path) -> CatchRunConfig:
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: Configuration problem in '{config_path}':\n{e}", err=True)
        ctx.exit(EXIT_ERROR)


def _selected_test_cases(binaries: Sequence[str], test_names: Sequence[str]) -> list[TestCaseDescriptor]:
    return [
        TestCaseDescriptor(fully_qualified_name=name, source=binary)
        for binary in binaries
        for name in test_names
    ]


def _run_with_interrupt_handling(
    executor: CatchTestExecutor,
    test_cases: Sequence[TestCaseDescriptor],
    context: ExecutionContext,
    reporter: ConsoleReporter,
) -> int:
    """
    Runs the batch, turning the first CTRL-C into a cancellation request.

    The test case in flight is allowed to finish. A second CTRL-C interrupts
    immediately.
    """
    previous_handler = signal.getsignal(signal.SIGINT)

    def _handle_sigint(signum, frame):
        if context.cancellation.is_set():
            raise KeyboardInterrupt
        log.warning("Interrupt received, cancelling after the current test case (CTRL-C again to abort).")
        context.cancellation.set()
        executor.cancel()

    signal.signal(signal.SIGINT, _handle_sigint)
    try:
        asyncio.run(executor.run_all(test_cases, context, reporter))
    except KeyboardInterrupt:
        log.warning("Test run aborted by KeyboardInterrupt (CTRL-C).")
        return EXIT_INTERRUPTED
    except ExecutorBusyError:
        log.critical("Executor refused to start the test run.", exc_info=True)
        return EXIT_ERROR
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if executor.state is ExecutorState.CANCELLED:
        return EXIT_INTERRUPTED
    return EXIT_OK if reporter.all_passed else EXIT_TESTS_FAILED


@click.command(name="run")
@click.argument("binaries", nargs=-1, required=True)
@click.option(
    "-t",
    "--test",
    "test_names",
    multiple=True,
    help="Fully-qualified name of a test case to run (repeatable). Default: every test case in each binary.",
)
@click.option("--debug", is_flag=True, default=False, help="Run each test case under the configured debugger.")
@config_path_option
@click.pass_context
def run_cli(
    ctx: click.Context,
    binaries: tuple[str, ...],
    test_names: tuple[str, ...],
    debug: bool,
    config_path: Path,
):
    """Run the test cases of Catch test binaries and report their results."""
    config = _load_config_or_exit(ctx, config_path)
    apply_config_logging(ctx, config)
    working_dir = config.runner.working_dir

    if test_names:
        test_cases = _selected_test_cases(binaries, test_names)
    else:
        try:
            test_cases = ListingTestDiscoverer(working_dir=working_dir).discover(binaries)
        except DiscoveryError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(EXIT_ERROR)

    if not test_cases:
        click.echo("No test cases found.", err=True)
        ctx.exit(EXIT_OK)

    context = ExecutionContext(
        is_being_debugged=debug,
        launcher=CommandDebuggerLauncher(config.debugger.command) if debug else None,
        working_dir=working_dir,
    )
    executor = CatchTestExecutor(ProcessRunner(config.runner, config.debugger))
    reporter = ConsoleReporter(console=Console())

    log.info("Running test cases", count=len(test_cases), debug=debug)
    exit_code = _run_with_interrupt_handling(executor, test_cases, context, reporter)
    reporter.print_summary()
    logging.shutdown()

    if exit_code != EXIT_OK:
        sys.exit(exit_code)


@click.command(name="list")
@click.argument("binaries", nargs=-1, required=True)
@config_path_option
@click.pass_context
def list_cli(ctx: click.Context, binaries: tuple[str, ...], config_path: Path):
    """List the test cases of Catch test binaries."""
    config = _load_config_or_exit(ctx, config_path)
    apply_config_logging(ctx, config)
    try:
        test_cases = ListingTestDiscoverer(working_dir=config.runner.working_dir).discover(binaries)
    except DiscoveryError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_ERROR)

    for test_case in test_cases:
        click.echo(f"{test_case.source}\t{test_case.fully_qualified_name}")

# 🔼⚙️
