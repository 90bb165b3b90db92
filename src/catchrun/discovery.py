#
# src/catchrun/discovery.py
#
"""
Enumerates the test cases of Catch binaries by asking them to list their names.
"""
import subprocess
from collections.abc import Iterable, Sequence
from pathlib import Path

import structlog

from catchrun.exceptions import DiscoveryError
from catchrun.execution.runner import resolve_executable
from catchrun.models import TestCaseDescriptor
from catchrun.protocols import TestDiscoverer
from catchrun.telemetry import StructLogger

log: StructLogger = structlog.get_logger("discovery")

LIST_TESTS_FLAG = "--list-test-names-only"


class ListingTestDiscoverer(TestDiscoverer):
    """
    Implements the TestDiscoverer protocol with '<binary> --list-test-names-only'.
    """

    def __init__(self, working_dir: Path | None = None, timeout: float | None = None):
        self.working_dir = working_dir or Path.cwd()
        self.timeout = timeout

    def discover(self, sources: Iterable[str]) -> Sequence[TestCaseDescriptor]:
        """
        Returns the test cases of every binary in 'sources', in listing order.

        Raises:
            DiscoveryError: If a binary cannot be run or exits with an error.
        """
        test_cases: list[TestCaseDescriptor] = []
        for source in sources:
            test_cases.extend(self._list_tests(source))
        return test_cases

    def _list_tests(self, source: str) -> list[TestCaseDescriptor]:
        executable = resolve_executable(source, self.working_dir)
        discover_log = log.bind(source=source)
        discover_log.debug("Listing test cases", executable=str(executable), emoji_key="path")

        try:
            completed = subprocess.run(
                [str(executable), LIST_TESTS_FLAG],
                cwd=self.working_dir,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            discover_log.error("Could not list test cases", error=str(e))
            raise DiscoveryError(f"Could not list test cases of '{source}': {e}") from e

        # Catch returns the number of listed tests as its exit code, so only a
        # negative code (killed by a signal) is treated as an error.
        if completed.returncode < 0:
            raise DiscoveryError(
                f"Listing test cases of '{source}' was killed by signal {-completed.returncode}"
            )

        seen: set[str] = set()
        test_cases = []
        for line in completed.stdout.splitlines():
            name = line.strip()
            if not name or name in seen:
                continue
            seen.add(name)
            test_cases.append(TestCaseDescriptor(fully_qualified_name=name, source=source))

        discover_log.info("Discovered test cases", count=len(test_cases))
        return test_cases

# 🔼⚙️
