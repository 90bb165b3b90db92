import json
import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from catchrun.config import CatchRunConfig, DebuggerConfig, GlobalConfig, RunnerConfig
from catchrun.models import ExecutionContext, TestCaseDescriptor
from catchrun.reporting import CollectingReporter

# A stand-in for a Catch test binary. Reports live in '<script>.json' (test
# name -> XML) and every invocation's argv is appended to '<script>.calls'.
FAKE_CATCH_SCRIPT = """\
#!{python}
import json
import pathlib
import sys
import time

here = pathlib.Path(__file__)
args = sys.argv[1:]
with here.with_suffix(".calls").open("a") as calls:
    calls.write(json.dumps(args) + "\\n")

reports = json.loads(here.with_suffix(".json").read_text())
if args == ["--list-test-names-only"]:
    for name in reports:
        print(name)
    sys.exit(len(reports))

text = reports.get(args[0], "<Catch/>")
if text == "SLEEP":
    time.sleep(30)
if "--out" in args:
    pathlib.Path(args[args.index("--out") + 1]).write_text(text)
else:
    sys.stdout.write(text)
sys.exit(0 if 'success="true"' in text else 1)
"""


@pytest.fixture
def make_catch_binary(tmp_path: Path) -> Callable[..., Path]:
    """Writes an executable fake Catch binary serving the given reports."""

    def _make(reports: dict[str, str], name: str = "fake_catch") -> Path:
        script = tmp_path / name
        script.write_text(FAKE_CATCH_SCRIPT.format(python=sys.executable))
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        script.with_suffix(".json").write_text(json.dumps(reports))
        return script

    return _make


@pytest.fixture
def recorded_calls() -> Callable[[Path], list[list[str]]]:
    """Returns a function reading the argv of every invocation of a fake Catch binary."""

    def _calls(binary: Path) -> list[list[str]]:
        calls_file = binary.with_suffix(".calls")
        if not calls_file.exists():
            return []
        return [json.loads(line) for line in calls_file.read_text().splitlines()]

    return _calls


@pytest.fixture
def reporter() -> CollectingReporter:
    return CollectingReporter()


@pytest.fixture
def context(tmp_path: Path) -> ExecutionContext:
    return ExecutionContext(working_dir=tmp_path)


@pytest.fixture
def descriptor() -> TestCaseDescriptor:
    return TestCaseDescriptor(fully_qualified_name="T1", source="fake_catch")


@pytest.fixture
def minimal_config(tmp_path: Path) -> CatchRunConfig:
    return CatchRunConfig(
        global_config=GlobalConfig(log_level="DEBUG"),
        runner=RunnerConfig(working_dir=tmp_path),
        debugger=DebuggerConfig(command=(sys.executable,)),
    )
