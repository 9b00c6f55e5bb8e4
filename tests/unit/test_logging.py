from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

import pytest
import structlog

from py_category_sync.infrastructure.config.settings import ProdSettingsNoFile, TestSettingsNoFile
from py_category_sync.infrastructure.logging.config import configure_logging, get_logger

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


@pytest.fixture(autouse=True)
def reset() -> None:
    logging.getLogger().handlers.clear()


def test_structlog_init_console(capsys: Any) -> None:
    configure_logging(settings=TestSettingsNoFile(LOG_LEVEL="DEBUG", JSON_LOGS=False))
    logger = get_logger("test")
    logger.debug("hello", foo=1)

    plain = ANSI_RE.sub("", capsys.readouterr().out)
    assert "hello" in plain
    assert "foo=1" in plain
    assert "test" in plain


def test_stdlib_records_share_the_formatter(capsys: Any) -> None:
    configure_logging(settings=TestSettingsNoFile(LOG_LEVEL="INFO", JSON_LOGS=True))
    logging.getLogger("py_category_sync.application").info("created=%s failed=%s", 21, 2)

    log_obj = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert log_obj["event"] == "created=21 failed=2"
    assert log_obj["logger"] == "py_category_sync.application"
    assert log_obj["level"] == "info"


def test_structlog_init_json(capsys: Any) -> None:
    configure_logging(settings=ProdSettingsNoFile(API_BASE_URL="https://api.example.com", LOG_LEVEL="INFO"))
    get_logger("audit").info("event", value=42)

    log_obj = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert log_obj["event"] == "event"
    assert log_obj["value"] == 42
    assert log_obj["level"] == "info"
    assert log_obj["logger"] == "audit"
    assert re.match(r"\d{4}-\d{2}-\d{2}T", log_obj["timestamp"]) is not None
    assert isinstance(structlog.get_config()["processors"], list)


def test_explicit_stream(tmp_path: Path) -> None:
    target = tmp_path / "stream.log"
    with target.open("w", encoding="utf-8") as fh:
        configure_logging(stream=fh, settings=TestSettingsNoFile(JSON_LOGS=True, LOG_LEVEL="WARNING"))
        logging.getLogger("py_category_sync").info("filtered")
        logging.getLogger("py_category_sync").warning("kept")
        for handler in logging.getLogger().handlers:
            handler.flush()
    lines = target.read_text(encoding="utf-8").strip().splitlines()
    assert [json.loads(line)["event"] for line in lines] == ["kept"]


def test_structlog_json_file_rotation(tmp_path: Path) -> None:
    log_file = tmp_path / "app.log"
    settings = TestSettingsNoFile(
        JSON_LOGS=True,
        LOG_LEVEL="INFO",
        LOG_FILE=str(log_file),
        LOG_ROTATION="size",
        LOG_MAX_BYTES=1024,
        LOG_BACKUP_COUNT=2,
    )
    configure_logging(settings=settings)
    logger = get_logger("rotate")
    for i in range(200):
        logger.info("event", seq=i, payload="x" * 20)

    assert log_file.exists()
    contents = log_file.read_text(encoding="utf-8").strip().splitlines()
    assert contents
    sample = json.loads(contents[0])
    assert sample["logger"] == "rotate"
    assert len(list(tmp_path.glob("app.log*"))) > 1


def test_logging_disabled(capsys: Any) -> None:
    configure_logging(settings=TestSettingsNoFile(LOGGING_ENABLED=False))
    logging.getLogger("py_category_sync").error("silenced")
    assert capsys.readouterr().out == ""
