#
# src/catchrun/launchers.py
#
"""
Debugger launchers for running a test binary with a debugger attached.
"""
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from catchrun.config.models import DEFAULT_DEBUGGER_COMMAND
from catchrun.execution.arguments import split_arguments
from catchrun.protocols import Launcher
from catchrun.telemetry import StructLogger

log: StructLogger = structlog.get_logger("launchers")


class CommandDebuggerLauncher(Launcher):
    """
    Implements the Launcher protocol by prefixing the program with a debugger
    command line, e.g. 'gdb -q -ex run --args'.

    The debugger shares the terminal of the calling process.
    """

    def __init__(self, command: Sequence[str] = DEFAULT_DEBUGGER_COMMAND):
        if not command:
            raise ValueError("A debugger command is required")
        self.command = tuple(command)
        # Popen handles of debuggers still in flight, dropped again by release().
        self.processes: dict[int, subprocess.Popen] = {}

    def launch_with_debugger_attached(
        self,
        executable: Path,
        working_dir: Path,
        arguments: str,
        environment: Mapping[str, str] | None,
    ) -> int:
        argv = [*self.command, str(executable), *split_arguments(arguments)]
        log.info("Starting debugger", argv=argv, working_dir=str(working_dir), emoji_key="debug")
        process = subprocess.Popen(
            argv,
            cwd=working_dir,
            env=dict(environment) if environment is not None else None,
        )
        self.processes[process.pid] = process
        log.debug("Debugger started", pid=process.pid)
        return process.pid

    def release(self, pid: int) -> None:
        """
        Forgets the debugger process 'pid' once it has exited.

        A pid already reaped elsewhere counts as exited. A debugger that is
        still running keeps its handle.
        """
        process = self.processes.get(pid)
        if process is None:
            return
        exit_code = process.poll()
        if exit_code is None:
            log.warning("Debugger still running, keeping its handle", pid=pid)
            return
        del self.processes[pid]
        log.debug("Debugger released", pid=pid, exit_code=exit_code)

# 🔼⚙️
