import io
import json
import logging

import pytest

from gym_billing.config.settings import settings
from gym_billing.core.logging import CustomJsonFormatter, configure_logging, get_logger, request_id


@pytest.fixture
def json_output():
    previous = settings.LOG_FORMAT
    settings.LOG_FORMAT = "json"
    configure_logging(force=True)
    buffer = io.StringIO()
    [handler] = [h for h in logging.getLogger().handlers if isinstance(h.formatter, CustomJsonFormatter)]
    handler.setStream(buffer)
    yield buffer
    settings.LOG_FORMAT = previous
    configure_logging(force=True)


def _records(buffer):
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line.strip()]


def test_structlog_event_is_one_flat_json_object(json_output):
    token = request_id.set("req-42")
    try:
        get_logger("gym_billing.tests.logging").info("expense.recorded", gym_id=1, amount="120.00")
    finally:
        request_id.reset(token)

    [record] = _records(json_output)
    assert record["message"] == "expense.recorded"
    assert record["gym_id"] == 1
    assert record["amount"] == "120.00"
    assert record["request_id"] == "req-42"
    assert record["level"] == "INFO"
    assert record["logger"] == "gym_billing.tests.logging"


def test_standard_library_loggers_share_the_json_format(json_output):
    logging.getLogger("gym_billing.tests.stdlib").warning("pool exhausted")

    [record] = _records(json_output)
    assert record["message"] == "pool exhausted"
    assert record["level"] == "WARNING"
