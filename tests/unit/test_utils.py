# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for datetime and logging utilities."""

import json
import logging
from datetime import datetime, timedelta, timezone

import pytest
import structlog

from src.core.config.settings import Settings
from src.utils.datetime import ensure_utc, is_expired, seconds_from_now, utc_now
from src.utils.logging import LOG_HANDLER_NAME, log_context, setup_logging


class TestDatetime:
    """Tests for datetime helpers."""

    def test_utc_now_is_aware(self) -> None:
        assert utc_now().tzinfo == timezone.utc

    def test_ensure_utc_naive(self) -> None:
        naive = datetime(2025, 1, 1, 12, 0)

        assert ensure_utc(naive) == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_ensure_utc_converts_offset(self) -> None:
        plus_two = datetime(2025, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

        assert ensure_utc(plus_two) == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert ensure_utc(plus_two).tzinfo == timezone.utc

    def test_ensure_utc_none(self) -> None:
        assert ensure_utc(None) is None

    def test_seconds_from_now(self) -> None:
        later = seconds_from_now(60)

        assert timedelta(seconds=59) < later - utc_now() <= timedelta(seconds=60)

    def test_is_expired(self) -> None:
        assert is_expired(None) is True
        assert is_expired(utc_now() - timedelta(seconds=1)) is True
        assert is_expired(seconds_from_now(60)) is False


def _installed_handler() -> logging.Handler:
    handlers = [h for h in logging.getLogger().handlers if h.get_name() == LOG_HANDLER_NAME]
    assert len(handlers) == 1
    return handlers[0]


@pytest.fixture
def reset_logging():
    """Remove the installed handler and structlog config after each test."""
    yield
    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == LOG_HANDLER_NAME]:
        root.removeHandler(handler)
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


@pytest.mark.usefixtures("reset_logging")
class TestLogging:
    """Tests for structlog setup."""

    def test_setup_development(self) -> None:
        settings = Settings(_env_file=None, log_level="INFO")  # type: ignore[call-arg]

        setup_logging(settings)

        formatter = _installed_handler().formatter
        assert isinstance(formatter, structlog.stdlib.ProcessorFormatter)
        assert isinstance(formatter.processors[-1], structlog.dev.ConsoleRenderer)
        assert logging.getLogger("src").level == logging.INFO
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_setup_json_outside_development(self) -> None:
        settings = Settings(  # type: ignore[call-arg]
            _env_file=None,
            environment="staging",
            debug=False,
            log_level="WARNING",
        )

        setup_logging(settings)

        formatter = _installed_handler().formatter
        assert isinstance(formatter.processors[-1], structlog.processors.JSONRenderer)
        assert logging.getLogger("src").level == logging.WARNING

    def test_repeated_setup_keeps_one_handler(self) -> None:
        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        setup_logging(settings)
        setup_logging(settings)

        _installed_handler()

    def test_stdlib_records_carry_bound_context(self, capsys) -> None:
        settings = Settings(  # type: ignore[call-arg]
            _env_file=None, environment="staging", debug=False, log_level="INFO"
        )
        setup_logging(settings)
        logger = logging.getLogger("src.infrastructure.database.migrations.runner")

        with log_context(revision="001_initial_schema", backend="sqlite"):
            logger.info("Applied migration: %s", "001_initial_schema")
        logger.info("No pending migrations")

        lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
        applied, idle = lines[-2], lines[-1]
        assert applied["event"] == "Applied migration: 001_initial_schema"
        assert applied["revision"] == "001_initial_schema"
        assert applied["backend"] == "sqlite"
        assert applied["level"] == "info"
        assert "revision" not in idle

    def test_log_context_restores_outer_values(self) -> None:
        with log_context(seed="initial"):
            with log_context(seed="nested", revision="001_initial_schema"):
                assert structlog.contextvars.get_contextvars() == {
                    "seed": "nested",
                    "revision": "001_initial_schema",
                }
            assert structlog.contextvars.get_contextvars() == {"seed": "initial"}

        assert structlog.contextvars.get_contextvars() == {}
