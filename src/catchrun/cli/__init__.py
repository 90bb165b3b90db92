# src/catchrun/cli/__init__.py
"""
Command line interface for catchrun.
"""
