import io
import json

import pytest

from attendance_reconciler.logging_config import configure_logging, get_logger, reset_logging


@pytest.fixture
def stream():
    reset_logging()
    buf = io.StringIO()
    configure_logging(level="INFO", stream=buf)
    yield buf
    reset_logging()


def test_log_lines_are_json_with_extra_fields(stream):
    get_logger("ingestion").info("punch sync completed", extra={"processed": 3})

    line = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert line["message"] == "punch sync completed"
    assert line["logger"] == "attendance_reconciler.ingestion"
    assert line["level"] == "INFO"
    assert line["processed"] == 3


def test_exceptions_carry_type_and_traceback(stream):
    try:
        raise ValueError("bad punch")
    except ValueError:
        get_logger("reconciliation").exception("employee reconciliation failed")

    line = json.loads(stream.getvalue().strip().splitlines()[-1])
    assert line["exc_type"] == "ValueError"
    assert line["exc_message"] == "bad punch"
    assert "Traceback" in line["traceback"]


def test_configure_is_idempotent(stream):
    configure_logging(level="DEBUG", stream=io.StringIO())

    get_logger("main").info("starting")

    assert "starting" in stream.getvalue()
