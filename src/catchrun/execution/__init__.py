#
# src/catchrun/execution/__init__.py
#
"""
Test execution sub-package for catchrun: invoking Catch binaries, reading
their XML reports and driving batches of test cases.
"""
from .arguments import escape_arguments, split_arguments
from .controller import CatchTestExecutor
from .runner import ProcessRunner

__all__ = [
    "CatchTestExecutor",
    "ProcessRunner",
    "escape_arguments",
    "split_arguments",
]

# 🔼⚙️
