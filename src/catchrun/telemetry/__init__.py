#
# src/catchrun/telemetry/__init__.py
#
"""
Logging and telemetry sub-package for catchrun.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
