#
# src/catchrun/execution/runner.py
#
"""
Invokes Catch test binaries, directly or under a debugger, and captures the
XML reporter output of exactly one test case.
"""
import asyncio
import contextlib
import os
import tempfile
from collections.abc import Iterator, Mapping
from pathlib import Path

import psutil
import structlog

from catchrun.config import DebuggerConfig, RunnerConfig
from catchrun.exceptions import (
    DebuggerLaunchError,
    ProcessLaunchError,
    ProcessOutputError,
    ProcessTimeoutError,
)
from catchrun.execution.arguments import escape_arguments
from catchrun.models import ExecutionContext, TestCaseDescriptor
from catchrun.protocols import Launcher
from catchrun.telemetry import StructLogger

log: StructLogger = structlog.get_logger("execution.runner")

OUTPUT_FILE_PREFIX = "catchrun-"
OUTPUT_FILE_SUFFIX = ".xml"


def build_arguments(
    test_name: str,
    reporter: str = "xml",
    break_on_failure: bool = False,
    output_path: Path | None = None,
) -> list[str]:
    """Returns the Catch command line selecting one test case and the reporter."""
    arguments = [test_name, "--reporter", reporter]
    if break_on_failure:
        arguments.append("--break")
    if output_path is not None:
        arguments.extend(["--out", str(output_path)])
    return arguments


def resolve_executable(source: str, working_dir: Path) -> Path:
    """Resolves a test binary path against the working directory."""
    path = Path(source).expanduser()
    if not path.is_absolute():
        path = working_dir / path
    return path


@contextlib.contextmanager
def temporary_output_file() -> Iterator[Path]:
    """
    Creates a uniquely named, empty file for a test binary to write its report to.

    The file is removed when the block exits, however it exits. A failure to
    remove it is logged and otherwise ignored.
    """
    fd, name = tempfile.mkstemp(prefix=OUTPUT_FILE_PREFIX, suffix=OUTPUT_FILE_SUFFIX)
    os.close(fd)
    path = Path(name)
    try:
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            log.warning("Failed to delete temporary output file", path=str(path), error=str(e))


def _read_output_file(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _wait_for_exit(pid: int) -> None:
    """Blocks until process 'pid' has exited."""
    try:
        psutil.Process(pid).wait()
    except psutil.NoSuchProcess:
        # Already gone.
        pass


class ProcessRunner:
    """
    Runs one Catch test case and returns the raw XML reporter output.
    """

    def __init__(
        self,
        runner_config: RunnerConfig | None = None,
        debugger_config: DebuggerConfig | None = None,
    ):
        self.runner_config = runner_config or RunnerConfig()
        self.debugger_config = debugger_config or DebuggerConfig()

    async def run(self, test_case: TestCaseDescriptor, context: ExecutionContext) -> str:
        """
        Runs 'test_case' in the mode selected by the context.

        Raises:
            ProcessLaunchError: The binary could not be started (direct mode).
            DebuggerLaunchError: The binary could not be started under the debugger,
                or its process could not be waited on.
            ProcessOutputError: The output could not be captured or read.
        """
        if context.is_being_debugged:
            return await self.run_under_debugger(test_case, context)
        return await self.run_direct(test_case, context)

    async def run_direct(self, test_case: TestCaseDescriptor, context: ExecutionContext) -> str:
        """Runs the binary as a child process and captures its standard output."""
        executable = resolve_executable(test_case.source, context.working_dir)
        arguments = build_arguments(test_case.fully_qualified_name, reporter=self.runner_config.reporter)
        runner_log = log.bind(test=test_case.fully_qualified_name, source=test_case.source)
        runner_log.debug("Launching test binary", executable=str(executable), arguments=arguments, emoji_key="launch")

        try:
            process = await asyncio.create_subprocess_exec(
                str(executable),
                *arguments,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=context.working_dir,
                env=_environment(context.environment),
            )
        except OSError as e:
            runner_log.error("Test binary could not be started", error=str(e))
            raise ProcessLaunchError(
                "Could not start test binary",
                source=test_case.source,
                test_name=test_case.fully_qualified_name,
                details=e,
            ) from e

        timeout = self.runner_config.timeout
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except TimeoutError as e:
            runner_log.warning("Test binary timed out, killing it", timeout=timeout)
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise ProcessTimeoutError(
                f"Test binary did not exit within {timeout} seconds",
                source=test_case.source,
                test_name=test_case.fully_qualified_name,
            ) from e
        except OSError as e:
            raise ProcessOutputError(
                "Could not read test binary output",
                source=test_case.source,
                test_name=test_case.fully_qualified_name,
                details=e,
            ) from e

        # Catch exits non-zero when tests fail, which is not an error here.
        runner_log.debug(
            "Test binary finished",
            exit_code=process.returncode,
            stdout_len=len(stdout_bytes),
            stderr_len=len(stderr_bytes),
        )
        return stdout_bytes.decode("utf-8", errors="replace")

    async def run_under_debugger(self, test_case: TestCaseDescriptor, context: ExecutionContext) -> str:
        """
        Launches the binary through the context's launcher with a debugger attached.

        The report is written to a temporary file which is read once the
        debuggee exits and is always deleted before this method returns.
        """
        runner_log = log.bind(test=test_case.fully_qualified_name, source=test_case.source)
        if context.launcher is None:
            raise DebuggerLaunchError(
                "Debugging was requested but no debugger launcher is available",
                source=test_case.source,
                test_name=test_case.fully_qualified_name,
            )

        executable = resolve_executable(test_case.source, context.working_dir)
        with temporary_output_file() as output_path:
            arguments = escape_arguments(
                build_arguments(
                    test_case.fully_qualified_name,
                    reporter=self.runner_config.reporter,
                    break_on_failure=self.debugger_config.break_on_failure,
                    output_path=output_path,
                )
            )
            runner_log.info("Launching test binary under debugger", executable=str(executable), emoji_key="debug")
            try:
                pid = context.launcher.launch_with_debugger_attached(
                    executable, context.working_dir, arguments, context.environment
                )
            except Exception as e:
                runner_log.error("Debugger launch failed", error=str(e))
                raise DebuggerLaunchError(
                    "Could not launch test binary with debugger attached",
                    source=test_case.source,
                    test_name=test_case.fully_qualified_name,
                    details=e,
                ) from e

            runner_log.debug("Waiting for debuggee to exit", pid=pid)
            try:
                await asyncio.to_thread(_wait_for_exit, pid)
            except (psutil.Error, ValueError) as e:
                runner_log.error("Could not wait for debuggee", pid=pid, error=str(e))
                raise DebuggerLaunchError(
                    f"Could not wait for debuggee process {pid}",
                    source=test_case.source,
                    test_name=test_case.fully_qualified_name,
                    details=e,
                ) from e
            finally:
                _release(context.launcher, pid)

            try:
                output = _read_output_file(output_path)
            except OSError as e:
                runner_log.error("Could not read debuggee output file", path=str(output_path), error=str(e))
                raise ProcessOutputError(
                    f"Could not read test output file '{output_path}'",
                    source=test_case.source,
                    test_name=test_case.fully_qualified_name,
                    details=e,
                ) from e

        runner_log.debug("Debuggee finished", output_len=len(output))
        return output


def _release(launcher: Launcher, pid: int) -> None:
    # Launchers that hold on to process handles expose release(pid).
    release = getattr(launcher, "release", None)
    if release is not None:
        release(pid)


def _environment(overrides: Mapping[str, str] | None) -> dict[str, str] | None:
    # A None environment inherits ours.
    if overrides is None:
        return None
    return dict(overrides)

# 🔼⚙️
