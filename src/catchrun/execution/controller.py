#
# src/catchrun/execution/controller.py
#
"""
Drives a batch of Catch test cases through the runner and the parser and
reports their results to the host.
"""
import time
from collections.abc import Iterable

import structlog

from catchrun.exceptions import ExecutionError, ReportError
from catchrun.execution import parser
from catchrun.execution.runner import ProcessRunner
from catchrun.models import (
    ExecutionContext,
    ParsedResult,
    TestCaseDescriptor,
    TestOutcome,
    TestResultRecord,
)
from catchrun.protocols import Reporter, TestDiscoverer
from catchrun.state import ExecutorState, ExecutorStateHolder
from catchrun.telemetry import StructLogger

log: StructLogger = structlog.get_logger("execution.controller")


class CatchTestExecutor:
    """
    Runs Catch test cases one at a time.

    Errors that spoil a single test case are reported as an UNKNOWN outcome
    for that case and the batch carries on. Only cancel() stops a batch early,
    and only between two test cases.
    """

    def __init__(self, runner: ProcessRunner | None = None):
        self.runner = runner or ProcessRunner()
        self._state = ExecutorStateHolder()

    @property
    def state(self) -> ExecutorState:
        return self._state.state

    def cancel(self) -> None:
        """Requests that the running batch stop before its next test case."""
        if self._state.request_cancel():
            log.info("Cancellation requested", emoji_key="cancel")

    def _cancellation_pending(self, context: ExecutionContext) -> bool:
        if context.cancellation.is_set():
            self.cancel()
        return self._state.acknowledge_cancel()

    async def run_all(
        self,
        test_cases: Iterable[TestCaseDescriptor],
        context: ExecutionContext,
        reporter: Reporter,
    ) -> list[TestResultRecord]:
        """
        Runs 'test_cases' in order.

        Returns the records of the test cases that were run. Test cases not yet
        started when a cancellation is observed are skipped without a result.
        """
        self._state.start_batch()
        results: list[TestResultRecord] = []
        try:
            for test_case in test_cases:
                if self._cancellation_pending(context):
                    log.warning("Test run cancelled", completed=len(results), emoji_key="cancel")
                    break
                results.append(await self.run_one(test_case, context, reporter))
        finally:
            final_state = self._state.finish_batch()
        log.info("Test run finished", executed=len(results), state=final_state.name)
        return results

    async def run_sources(
        self,
        sources: Iterable[str],
        context: ExecutionContext,
        reporter: Reporter,
        discoverer: TestDiscoverer,
    ) -> list[TestResultRecord]:
        """Discovers the test cases in 'sources' and runs all of them."""
        test_cases = discoverer.discover(sources)
        log.info("Discovered test cases", count=len(test_cases))
        return await self.run_all(test_cases, context, reporter)

    async def run_one(
        self,
        test_case: TestCaseDescriptor,
        context: ExecutionContext,
        reporter: Reporter,
    ) -> TestResultRecord:
        """Runs a single test case and submits its result to 'reporter'."""
        test_log = log.bind(test=test_case.fully_qualified_name, source=test_case.source)
        reporter.record_start(test_case)
        started = time.monotonic()

        try:
            output = await self.runner.run(test_case, context)
            element = parser.locate(parser.parse_report(output), test_case.fully_qualified_name)
        except (ExecutionError, ReportError) as e:
            test_log.error("Could not obtain a result for test case", error=str(e))
            parsed = ParsedResult(outcome=TestOutcome.UNKNOWN, error_message=str(e))
            reporter.record_end(test_case, parsed.outcome)
            return self._submit(test_case, parsed, started, reporter)

        parsed = ParsedResult(outcome=parser.classify(element))
        reporter.record_end(test_case, parsed.outcome)
        test_log.info("Test case finished", outcome=parsed.outcome.value, emoji_key=parsed.outcome.value)

        if parsed.outcome is TestOutcome.FAILED:
            enrichment = parser.enrich_failure(element)
            if enrichment.problem is not None:
                # Log it and move on; a missing file/line must not hold up the result.
                test_log.warning(
                    "Couldn't figure out file and line number of failure",
                    error=str(enrichment.problem),
                )
            parsed = ParsedResult(
                outcome=parsed.outcome,
                error_message=enrichment.error_message,
                location=enrichment.location,
            )

        return self._submit(test_case, parsed, started, reporter)

    @staticmethod
    def _submit(
        test_case: TestCaseDescriptor,
        parsed: ParsedResult,
        started: float,
        reporter: Reporter,
    ) -> TestResultRecord:
        result = TestResultRecord.from_parsed(test_case, parsed, duration=time.monotonic() - started)
        reporter.record_result(result)
        return result

# 🔼⚙️
