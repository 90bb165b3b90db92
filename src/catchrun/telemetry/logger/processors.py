# src/catchrun/telemetry/logger/processors.py

"""
Custom structlog processors used by the catchrun logging pipeline.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS: dict[int | str, str] = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "launch": "🚀",
    "debug": "🪲",
    "parse": "📄",
    "passed": "✅",
    "failed": "🚫",
    "unknown": "❓",
    "cancel": "⏹️",
    "path": "📁",
    "general": "➡️",
}

# Keys that only drive processors and must not reach the renderer.
_INTERNAL_KEYS = ("emoji_key",)


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event with an emoji picked from 'emoji_key' or the log level."""
    emoji_key: Any = event_dict.get("emoji_key")
    if emoji_key is None:
        level_name = str(event_dict.get("level", method_name)).upper()
        emoji_key = logging.getLevelName(level_name)
    emoji = LOG_EMOJIS.get(emoji_key, LOG_EMOJIS["general"])
    event = event_dict.get("event")
    if isinstance(event, str) and not event.startswith(emoji):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Drops processor-only keys from the event dict."""
    for key in _INTERNAL_KEYS:
        event_dict.pop(key, None)
    return event_dict

# 🔼⚙️
