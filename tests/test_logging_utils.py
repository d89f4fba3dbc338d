from __future__ import annotations

import json
import logging
from pathlib import Path

from hgt2png.logging_utils import HumanFormatter, LogOptions, configure_logging


def test_configure_logging_writes_json(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "hgt2png.jsonl"
    configure_logging(LogOptions(log_file=log_path))
    logger = logging.getLogger("hgt2png.test")
    logger.info("hello", extra={"tile": "N47E008.0.0.png"})
    for handler in logging.getLogger("hgt2png").handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert lines
    payload = json.loads(lines[-1])
    assert payload["message"] == "hello"
    assert payload["level"] == "info"
    assert payload["logger"] == "hgt2png.test"
    assert payload["extra"]["tile"] == "N47E008.0.0.png"


def test_console_level_follows_options() -> None:
    assert LogOptions().console_level == logging.INFO
    assert LogOptions(verbose=1).console_level == logging.DEBUG
    assert LogOptions(verbose=2, quiet=True).console_level == logging.WARNING


def test_human_formatter_prefixes_tile() -> None:
    formatter = HumanFormatter("%(levelname)s: %(message)s")
    record = logging.LogRecord("hgt2png", logging.INFO, __file__, 1, "done", (), None)
    record.tile = "a.0.0.png"
    assert formatter.format(record) == "[a.0.0.png] INFO: done"
