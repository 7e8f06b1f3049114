import io
import logging

from genai_gateway.utils.logging import get_logger, parse_log_level, setup_logging


def test_setup_logging_uses_emoji_formatter():
    buf = io.StringIO()
    setup_logging(level=logging.INFO, stream=buf)

    get_logger("unit").info("hello")

    assert buf.getvalue().strip() == "💡 [INFO    ] (genai_gateway.unit) hello"


def test_extra_fields_are_appended():
    buf = io.StringIO()
    setup_logging(level=logging.DEBUG, stream=buf)

    get_logger("routing.router").debug("Attempting", extra={"candidate": "gemini:m", "ordinal": 0})

    assert "| candidate='gemini:m' ordinal=0" in buf.getvalue()


def test_level_filters_lower_messages():
    buf = io.StringIO()
    setup_logging(level=logging.WARNING, stream=buf)

    log = get_logger("unit")
    log.info("hidden")
    log.warning("shown")

    out = buf.getvalue()
    assert "hidden" not in out
    assert "⚠️" in out


def test_setup_logging_replaces_handlers():
    setup_logging(stream=io.StringIO())
    setup_logging(stream=io.StringIO())

    assert len(logging.getLogger().handlers) == 1


def test_parse_log_level():
    assert parse_log_level("debug") == logging.DEBUG
    assert parse_log_level("WARNING") == logging.WARNING
    assert parse_log_level("10") == 10
    assert parse_log_level(logging.ERROR) == logging.ERROR
    assert parse_log_level("nonsense") == logging.INFO
    assert parse_log_level(None, default=logging.CRITICAL) == logging.CRITICAL
