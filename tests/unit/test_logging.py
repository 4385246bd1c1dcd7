from __future__ import annotations

import json
import logging

from clients_service.utils.logging import _json_formatter

EXPECTED_SCORE_DELTA = 5
EXPECTED_ROWS = 3


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.client_id = "c1"
    record.score_delta = EXPECTED_SCORE_DELTA

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["client_id"] == "c1"
    assert payload["score_delta"] == EXPECTED_SCORE_DELTA
    assert "lineno" not in payload


def test_json_formatter_supports_legacy_nested_extra_field() -> None:
    record = _record()
    record.extra = {"rows": EXPECTED_ROWS}

    payload = json.loads(_json_formatter(record))

    assert payload["rows"] == EXPECTED_ROWS


def test_json_formatter_stringifies_unserializable_values() -> None:
    record = _record()
    record.when = object()

    payload = json.loads(_json_formatter(record))

    assert payload["when"].startswith("<object")
