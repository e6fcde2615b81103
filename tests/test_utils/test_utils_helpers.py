"""Tests for supply_dashboard.utils (time helpers and logging setup)."""

from __future__ import annotations

import json
import logging
import sys
from datetime import date, datetime, timedelta, timezone

import pytest

from supply_dashboard.config import LoggingConfig
from supply_dashboard.utils.logging import _JsonFormatter, configure_logging
from supply_dashboard.utils.time_utils import ensure_utc, parse_timestamp, utc_day, utcnow


class TestTimeUtils:
    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo == timezone.utc

    def test_ensure_utc_naive(self):
        assert ensure_utc(datetime(2026, 1, 1, 5)).tzinfo == timezone.utc

    def test_ensure_utc_converts_offset(self):
        value = datetime(2026, 1, 1, 5, tzinfo=timezone(timedelta(hours=3)))
        assert ensure_utc(value) == datetime(2026, 1, 1, 2, tzinfo=timezone.utc)

    def test_utc_day(self):
        value = datetime(2026, 1, 1, 1, tzinfo=timezone(timedelta(hours=2)))
        assert utc_day(value) == date(2025, 12, 31)

    @pytest.mark.parametrize(
        "raw",
        ["2026-03-01T12:00:00Z", "2026-03-01T12:00:00+00:00", " 2026-03-01 12:00:00 "],
    )
    def test_parse_timestamp(self, raw):
        assert parse_timestamp(raw) == datetime(2026, 3, 1, 12, tzinfo=timezone.utc)

    def test_parse_timestamp_invalid(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")


class TestLogging:
    def test_json_formatter_includes_extra(self):
        record = logging.makeLogRecord({
            "name": "supply_dashboard.test", "levelname": "INFO",
            "msg": "refreshed %d", "args": (3,), "product_id": "p1",
        })
        payload = json.loads(_JsonFormatter().format(record))
        assert payload["msg"] == "refreshed 3"
        assert payload["logger"] == "supply_dashboard.test"
        assert payload["product_id"] == "p1"

    def test_configure_logging_writes_file(self, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        configure_logging(LoggingConfig(level="INFO", log_file=str(log_file), json_format=True))
        try:
            logging.getLogger("supply_dashboard.test").info("hello")
            for handler in logging.getLogger().handlers:
                handler.flush()
            line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
            assert json.loads(line)["msg"] == "hello"
        finally:
            for handler in list(logging.getLogger().handlers):
                handler.close()
                logging.getLogger().removeHandler(handler)

    def test_console_handler_uses_stderr(self):
        configure_logging(LoggingConfig(level="warning", log_file=""))
        try:
            handlers = logging.getLogger().handlers
            assert len(handlers) == 1
            assert handlers[0].stream is sys.stderr
            assert handlers[0].level == logging.WARNING
            assert logging.getLogger("streamlit").level == logging.WARNING
        finally:
            for handler in list(logging.getLogger().handlers):
                handler.close()
                logging.getLogger().removeHandler(handler)
