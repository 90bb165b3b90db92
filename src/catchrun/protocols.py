#
# src/catchrun/protocols.py
#
"""
Defines the capability protocols catchrun expects from its host.
"""
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from catchrun.models import TestCaseDescriptor, TestOutcome, TestResultRecord


@runtime_checkable
class Reporter(Protocol):
    """
    Receives progress and results from the executor.

    For a given test case, record_start is always called before record_end,
    and record_end before record_result.
    """

    def record_start(self, test_case: TestCaseDescriptor) -> None: ...

    def record_end(self, test_case: TestCaseDescriptor, outcome: TestOutcome) -> None: ...

    def record_result(self, result: TestResultRecord) -> None: ...


@runtime_checkable
class Launcher(Protocol):
    """
    Starts a process with a debugger attached.
    """

    def launch_with_debugger_attached(
        self,
        executable: Path,
        working_dir: Path,
        arguments: str,
        environment: Mapping[str, str] | None,
    ) -> int:
        """
        Launches 'executable' under a debugger.

        Args:
            executable: Absolute path of the program to debug.
            working_dir: Directory to start the program in.
            arguments: The escaped argument string for the program.
            environment: Environment for the program, or None to inherit.

        Returns:
            The process id to wait on; the run is over when it exits.
        """
        ...


@runtime_checkable
class TestDiscoverer(Protocol):
    """
    Enumerates the test cases contained in a set of test binaries.
    """

    __test__ = False

    def discover(self, sources: Iterable[str]) -> Sequence[TestCaseDescriptor]: ...

# 🔼⚙️
