#
# src/catchrun/__init__.py
#
"""
catchrun: executes Catch C++ unit tests and reconciles their XML reports into
per-test outcomes and failure locations.
"""
from catchrun.execution import CatchTestExecutor, ProcessRunner, escape_arguments
from catchrun.models import (
    ExecutionContext,
    FailureLocation,
    ParsedResult,
    TestCaseDescriptor,
    TestOutcome,
    TestResultRecord,
)
from catchrun.protocols import Launcher, Reporter, TestDiscoverer
from catchrun.state import ExecutorState

__all__ = [
    "CatchTestExecutor",
    "ExecutionContext",
    "ExecutorState",
    "FailureLocation",
    "Launcher",
    "ParsedResult",
    "ProcessRunner",
    "Reporter",
    "TestCaseDescriptor",
    "TestDiscoverer",
    "TestOutcome",
    "TestResultRecord",
    "escape_arguments",
]

# 🔼⚙️
