#
# config/__init__.py
#
"""
Configuration handling sub-package for catchrun.

Exports the loading function and core configuration models.
"""

from .loader import load_config
from .models import (
    CatchRunConfig,
    DebuggerConfig,
    GlobalConfig,
    RunnerConfig,
)

__all__ = [
    "CatchRunConfig",
    "DebuggerConfig",
    "GlobalConfig",
    "RunnerConfig",
    "load_config",
]

# 🔼⚙️
