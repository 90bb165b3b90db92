#
# config/models.py
#
"""
Attrs-based data models for the catchrun configuration structure.
"""

import logging
from pathlib import Path
from typing import Any

from attrs import define, field

# Interactive: the session stays open at a --break trap or after the program exits.
DEFAULT_DEBUGGER_COMMAND = ("gdb", "-q", "-ex", "run", "--args")


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_optional_positive_number(inst: Any, attr: Any, value: float | None) -> None:
    """Validator ensures the number is positive when given."""
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int | float) or value <= 0:
        raise ValueError(f"Field '{attr.name}' must be a positive number, got {value!r}")


def _validate_reporter(inst: Any, attr: Any, value: str) -> None:
    # Only the XML reporter output can be parsed.
    if value != "xml":
        raise ValueError(f"Unsupported reporter '{value}'. Only 'xml' is supported.")


def _validate_command(inst: Any, attr: Any, value: tuple[str, ...]) -> None:
    if not value or not all(isinstance(part, str) and part for part in value):
        raise ValueError(f"Field '{attr.name}' must be a non-empty list of strings, got {value!r}")


@define(frozen=True, slots=True)
class RunnerConfig:
    """How test binaries are invoked."""
    working_dir: Path = field(factory=Path.cwd, converter=Path)
    reporter: str = field(default="xml", validator=_validate_reporter)
    # Seconds a single test binary may run; None waits forever.
    timeout: float | None = field(default=None, validator=_validate_optional_positive_number)


@define(frozen=True, slots=True)
class DebuggerConfig:
    """How test binaries are launched when running under a debugger."""
    command: tuple[str, ...] = field(default=DEFAULT_DEBUGGER_COMMAND, converter=tuple, validator=_validate_command)
    break_on_failure: bool = field(default=True)


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for catchrun."""
    log_level: str = field(default="INFO", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class CatchRunConfig:
    """Root configuration object for the catchrun application."""
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})
    runner: RunnerConfig = field(factory=RunnerConfig)
    debugger: DebuggerConfig = field(factory=DebuggerConfig)
    config_file_path: Path | None = field(default=None)

# 🔼⚙️
