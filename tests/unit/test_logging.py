#
# tests/unit/test_logging.py
#
"""
Tests for the structlog processors and logging setup.
"""

import json
import logging
from pathlib import Path

import structlog

from catchrun.telemetry import setup_logging
from catchrun.telemetry.logger.processors import LOG_EMOJIS, add_emoji_processor, remove_extra_keys_processor


class TestProcessors:
    def test_emoji_from_key(self) -> None:
        event = add_emoji_processor(None, "info", {"event": "Launching", "emoji_key": "launch"})
        assert event["event"] == f"{LOG_EMOJIS['launch']} Launching"

    def test_emoji_from_level(self) -> None:
        event = add_emoji_processor(None, "warning", {"event": "Careful", "level": "warning"})
        assert event["event"] == f"{LOG_EMOJIS[logging.WARNING]} Careful"

    def test_unknown_key_falls_back_to_general(self) -> None:
        event = add_emoji_processor(None, "info", {"event": "Hm", "emoji_key": "nope"})
        assert event["event"] == f"{LOG_EMOJIS['general']} Hm"

    def test_internal_keys_are_removed(self) -> None:
        event = remove_extra_keys_processor(None, "info", {"event": "x", "emoji_key": "parse", "test": "T1"})
        assert event == {"event": "x", "test": "T1"}


def test_log_file_receives_json(tmp_path: Path) -> None:
    log_file = tmp_path / "catchrun.log"
    setup_logging(level=logging.INFO, log_file=str(log_file), file_only=True)
    try:
        structlog.get_logger("test.logging").info("Test case finished", test="T1", emoji_key="passed")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        finished = [entry for entry in lines if entry.get("test") == "T1"]
        assert len(finished) == 1
        assert finished[0]["event"] == f"{LOG_EMOJIS['passed']} Test case finished"
        assert finished[0]["logger"] == "test.logging"
        assert "emoji_key" not in finished[0]
    finally:
        root = logging.getLogger()
        for handler in list(root.handlers):
            handler.close()
            root.removeHandler(handler)
