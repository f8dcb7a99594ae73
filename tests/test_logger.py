import json
import re
from datetime import date

import pytest

from download_list.logger import create_log_file, new_logger


def _records(directory, pattern):
    path = directory / f"{pattern}-{date.today():%Y-%m-%d}.log"
    return [json.loads(line) for line in path.read_text().splitlines() if line]


def test_create_log_file_name_and_existence(tmp_path):
    folder = tmp_path / "logs"
    path = create_log_file("app", folder)
    assert path == folder / f"app-{date.today():%Y-%m-%d}.log"
    assert path.is_file()


def test_create_log_file_keeps_existing_content(tmp_path):
    path = create_log_file("app", tmp_path)
    path.write_text("kept\n")
    assert create_log_file("app", tmp_path).read_text() == "kept\n"


def test_info_written_as_json(tmp_path):
    logger = new_logger("svc", tmp_path)
    logger.info("hello")
    (record,) = _records(tmp_path, "svc")
    assert record["level"] == "info"
    assert record["msg"] == "hello"
    assert record["caller"].startswith("test_logger.py:")
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}[+-]\d{4}", record["ts"])


def test_debug_is_filtered(tmp_path):
    logger = new_logger("svc", tmp_path)
    logger.debug("hidden")
    logger.warn("shown")
    records = _records(tmp_path, "svc")
    assert [r["msg"] for r in records] == ["shown"]
    assert records[0]["level"] == "warn"


def test_args_appended_without_placeholders(tmp_path):
    logger = new_logger("svc", tmp_path)
    logger.error("Error publishing message: ", "boom")
    (record,) = _records(tmp_path, "svc")
    assert record["level"] == "error"
    assert record["msg"] == "Error publishing message: boom"


def test_args_fill_placeholders(tmp_path):
    logger = new_logger("svc", tmp_path)
    logger.info("count=%d", 3)
    assert _records(tmp_path, "svc")[0]["msg"] == "count=3"


def test_fatal_logs_and_exits(tmp_path):
    logger = new_logger("svc", tmp_path)
    with pytest.raises(SystemExit) as info:
        logger.fatal("Failed to create server")
    assert info.value.code == 1
    (record,) = _records(tmp_path, "svc")
    assert record["level"] == "fatal"
    assert record["msg"] == "Failed to create server"


def test_recreating_logger_does_not_duplicate_lines(tmp_path):
    new_logger("svc", tmp_path)
    logger = new_logger("svc", tmp_path)
    logger.info("once")
    assert len(_records(tmp_path, "svc")) == 1