#
# src/catchrun/exceptions.py
#
"""
Custom exceptions for catchrun.
"""


class CatchRunError(Exception):
    """Base class for all catchrun errors."""

    pass


class ConfigurationError(CatchRunError):
    """Raised when the configuration file is missing, unreadable or invalid."""

    pass


class DiscoveryError(CatchRunError):
    """Raised when the test cases of a binary cannot be enumerated."""

    pass


class ExecutorBusyError(CatchRunError):
    """Raised when a batch is started while another one is still in flight."""

    pass


class ExecutionError(CatchRunError):
    """Base class for errors that spoil the result of a single test case."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        test_name: str | None = None,
        details: Exception | None = None,
    ):
        self.source = source
        self.test_name = test_name
        self.details = details
        full_message = message
        if test_name:
            full_message += f" (Test: '{test_name}')"
        if source:
            full_message += f" (Binary: '{source}')"
        super().__init__(full_message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")


class ProcessLaunchError(ExecutionError):
    """The test binary could not be started."""

    pass


class DebuggerLaunchError(ExecutionError):
    """The test binary could not be started with a debugger attached."""

    pass


class ProcessOutputError(ExecutionError):
    """The output of a test binary could not be captured or read."""

    pass


class ProcessTimeoutError(ProcessOutputError):
    """The test binary did not exit within the configured timeout."""

    pass


class ReportError(CatchRunError):
    """Base class for errors reading the XML reporter output."""

    pass


class ReportParseError(ReportError):
    """The reporter output is not well-formed XML."""

    pass


class TestCaseNotFoundError(ReportError):
    """No TestCase element with the requested name exists in the report."""

    __test__ = False

    def __init__(self, test_name: str):
        self.test_name = test_name
        super().__init__(f"No TestCase element named '{test_name}' in reporter output")


class EnrichmentError(CatchRunError):
    """Base class for best-effort failure diagnostics that could not be extracted."""

    pass


class NoFailureExpressionFoundError(EnrichmentError):
    """The failed test case has no Expression element with success="false"."""

    pass


class FailureLocationError(EnrichmentError):
    """A failing Expression element carries an unusable filename or line."""

    pass

# 🔼⚙️
