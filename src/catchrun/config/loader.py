#
# config/loader.py
#
"""
Loads and validates the TOML configuration file into attrs models.
"""

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import attrs
import structlog

from catchrun.exceptions import ConfigurationError
from catchrun.telemetry import StructLogger

from .models import CatchRunConfig, DebuggerConfig, GlobalConfig, RunnerConfig

log: StructLogger = structlog.get_logger("config.loader")

ENV_LOG_LEVEL = "CATCHRUN_LOG_LEVEL"


def _table_name(attribute: attrs.Attribute) -> str:
    return attribute.metadata.get("toml_name", attribute.name)


def _build_section(model: type, data: Mapping[str, Any], section: str) -> Any:
    """Instantiates one attrs model from a TOML table, rejecting unknown keys."""
    known = {a.name for a in attrs.fields(model) if a.init}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"Unknown key(s) in [{section}]: {', '.join(unknown)}")

    try:
        return model(**data)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value in [{section}]: {e}") from e


def _section_table(raw: Mapping[str, Any], section: str) -> dict[str, Any]:
    data = raw.get(section, {})
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Section [{section}] must be a table, got {type(data).__name__}")
    return dict(data)


def _apply_env_overrides(global_data: dict[str, Any]) -> dict[str, Any]:
    env_level = os.environ.get(ENV_LOG_LEVEL)
    if env_level:
        log.debug("Overriding log level from environment", env_var=ENV_LOG_LEVEL, value=env_level)
        global_data = {**global_data, "log_level": env_level}
    return global_data


def load_config(config_path: Path | None) -> CatchRunConfig:
    """
    Loads the configuration from 'config_path'.

    A missing file yields the defaults. Relative runner.working_dir values are
    resolved against the directory holding the configuration file.

    Raises:
        ConfigurationError: If the file cannot be read or fails validation.
    """
    raw: dict[str, Any] = {}
    loaded_from: Path | None = None
    if config_path is not None and config_path.is_file():
        log.debug("Reading configuration file", path=str(config_path), emoji_key="path")
        try:
            with config_path.open("rb") as handle:
                raw = tomllib.load(handle)
            loaded_from = config_path
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Malformed TOML in '{config_path}': {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file '{config_path}': {e}") from e
    elif config_path is not None:
        log.info("Configuration file not found, using defaults", path=str(config_path))

    sections = {_table_name(a): a for a in attrs.fields(CatchRunConfig) if a.name != "config_file_path"}
    unknown = sorted(set(raw) - set(sections))
    if unknown:
        raise ConfigurationError(f"Unknown section(s): {', '.join(unknown)}")

    global_data = _apply_env_overrides(_section_table(raw, "global"))
    runner_data = _section_table(raw, "runner")
    if config_path is not None and "working_dir" in runner_data:
        working_dir = Path(str(runner_data["working_dir"])).expanduser()
        if not working_dir.is_absolute():
            working_dir = config_path.parent / working_dir
        runner_data["working_dir"] = working_dir.resolve()

    config = CatchRunConfig(
        global_config=_build_section(GlobalConfig, global_data, "global"),
        runner=_build_section(RunnerConfig, runner_data, "runner"),
        debugger=_build_section(DebuggerConfig, _section_table(raw, "debugger"), "debugger"),
        config_file_path=loaded_from,
    )
    log.debug("Configuration loaded", config_file=str(config.config_file_path), emoji_key="parse")
    return config

# 🔼⚙️
