#
# src/catchrun/reporting.py
#
"""
Reporter implementations that receive progress and results from the executor.
"""
from collections import Counter

import structlog
from attrs import define, field
from rich.console import Console
from rich.markup import escape

from catchrun.models import TestCaseDescriptor, TestOutcome, TestResultRecord
from catchrun.protocols import Reporter
from catchrun.telemetry import StructLogger

log: StructLogger = structlog.get_logger("reporting")

OUTCOME_EMOJI_MAP = {
    TestOutcome.PASSED: "✅",
    TestOutcome.FAILED: "❌",
    TestOutcome.UNKNOWN: "❓",
}

OUTCOME_STYLE_MAP = {
    TestOutcome.PASSED: "green",
    TestOutcome.FAILED: "bold red",
    TestOutcome.UNKNOWN: "yellow",
}


@define(slots=True)
class CollectingReporter(Reporter):
    """
    Keeps every notification in arrival order.

    'events' holds ("start" | "end" | "result", test name) pairs, which makes
    the ordering of notifications easy to inspect.
    """
    events: list[tuple[str, str]] = field(factory=list)
    results: list[TestResultRecord] = field(factory=list)

    def record_start(self, test_case: TestCaseDescriptor) -> None:
        self.events.append(("start", test_case.fully_qualified_name))

    def record_end(self, test_case: TestCaseDescriptor, outcome: TestOutcome) -> None:
        self.events.append(("end", test_case.fully_qualified_name))

    def record_result(self, result: TestResultRecord) -> None:
        self.events.append(("result", result.test_case.fully_qualified_name))
        self.results.append(result)

    @property
    def counts(self) -> Counter:
        return Counter(result.outcome for result in self.results)

    @property
    def all_passed(self) -> bool:
        return all(result.outcome is TestOutcome.PASSED for result in self.results)


@define(slots=True)
class ConsoleReporter(CollectingReporter):
    """Prints one line per result on a rich console, and a summary on request."""
    console: Console = field(factory=Console)

    def record_start(self, test_case: TestCaseDescriptor) -> None:
        super().record_start(test_case)
        log.debug("Test case started", test=test_case.fully_qualified_name, source=test_case.source)

    def record_result(self, result: TestResultRecord) -> None:
        super().record_result(result)
        outcome = result.outcome
        line = (
            f"{OUTCOME_EMOJI_MAP[outcome]} [{OUTCOME_STYLE_MAP[outcome]}]{outcome.value.upper():<7}[/] "
            f"{escape(result.test_case.fully_qualified_name)} [dim]({result.duration:.2f}s)[/]"
        )
        self.console.print(line, highlight=False)
        if result.code_file_path:
            self.console.print(f"    at {result.code_file_path}:{result.line_number}", markup=False, highlight=False)
        if result.error_message:
            self.console.print(f"    {result.error_message}", markup=False, highlight=False)

    def print_summary(self) -> None:
        counts = self.counts
        self.console.rule("Summary")
        self.console.print(
            f"{len(self.results)} test case(s): "
            f"[green]{counts[TestOutcome.PASSED]} passed[/], "
            f"[red]{counts[TestOutcome.FAILED]} failed[/], "
            f"[yellow]{counts[TestOutcome.UNKNOWN]} unknown[/]",
            highlight=False,
        )

# 🔼⚙️
