#
# src/catchrun/models.py
#
"""
Attrs-based value types exchanged between the runner, the parser and the executor.
"""
import threading
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from attrs import define, field

if TYPE_CHECKING:
    from catchrun.protocols import Launcher


class TestOutcome(Enum):
    """Classification of a single test case run."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    UNKNOWN = "unknown"  # No OverallResult, or the run could not be parsed.


@define(frozen=True, slots=True)
class TestCaseDescriptor:
    """One named Catch test case inside a test binary."""

    __test__ = False

    fully_qualified_name: str
    source: str  # Path to the binary, relative paths resolve against the working dir.

    def __str__(self) -> str:
        return f"{self.source}::{self.fully_qualified_name}"


@define(frozen=True, slots=True)
class ExecutionContext:
    """
    Run-time configuration shared by every test case of a batch.

    The cancellation event may be set from any thread; the executor checks it
    between test cases.
    """

    is_being_debugged: bool = field(default=False)
    launcher: Optional["Launcher"] = field(default=None)
    working_dir: Path = field(factory=Path.cwd, converter=Path)
    environment: Mapping[str, str] | None = field(default=None)
    cancellation: threading.Event = field(factory=threading.Event, eq=False, repr=False)


@define(frozen=True, slots=True)
class FailureLocation:
    """Source position of a failing assertion."""

    file_path: str
    line_number: int  # 1-based


@define(frozen=True, slots=True)
class ParsedResult:
    """Outcome and diagnostics parsed from one test case's reporter output."""

    outcome: TestOutcome
    error_message: str | None = field(default=None)
    location: FailureLocation | None = field(default=None)


@define(frozen=True, slots=True)
class TestResultRecord:
    """The complete result submitted to a reporter for one test case."""

    __test__ = False

    test_case: TestCaseDescriptor
    outcome: TestOutcome
    error_message: str | None = field(default=None)
    code_file_path: str | None = field(default=None)
    line_number: int | None = field(default=None)
    duration: float = field(default=0.0)  # seconds

    @classmethod
    def from_parsed(cls, test_case: TestCaseDescriptor, parsed: ParsedResult, duration: float) -> "TestResultRecord":
        location = parsed.location
        return cls(
            test_case=test_case,
            outcome=parsed.outcome,
            error_message=parsed.error_message,
            code_file_path=location.file_path if location else None,
            line_number=location.line_number if location else None,
            duration=duration,
        )

# 🔼⚙️
