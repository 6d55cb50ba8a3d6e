import io
import json
import logging

import pytest

import log


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_text_format_includes_extras():
    stream = io.StringIO()
    log.configure(level="DEBUG", json=False, stream=stream)
    log.get_logger("decree").debug("inputs committed", extra={"labels": ["a", "b"], "stage": 0})
    line = stream.getvalue().strip()
    assert "DEBUG" in line
    assert "labels=['a', 'b']" in line
    assert line.endswith("| inputs committed")


def test_json_format():
    stream = io.StringIO()
    log.configure(level="INFO", json=True, stream=stream)
    logger = log.get_logger("decree")
    logger.debug("hidden")
    logger.info("shown", extra={"payload": b"\x01\x02"})
    lines = stream.getvalue().strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["msg"] == "shown"
    assert record["payload"] == "0102"
    assert record["level"] == "INFO"


def test_decree_logs_labels_only(caplog):
    from decree import Decree

    caplog.set_level(logging.DEBUG, logger="decree")
    d = Decree("logged", ["a"], ["x"])
    d.add_serial("a", b"secret-bytes")
    d.get_challenge("x")
    messages = [r.getMessage() for r in caplog.records]
    assert "inputs committed" in messages
    assert "challenge drawn" in messages
    assert all("secret-bytes" not in str(r.__dict__) for r in caplog.records)
