import io
import logging

import pytest
import typer

from genai_gateway.core.error_handler import handle_error, safe_entrypoint
from genai_gateway.core.exceptions import CLIError
from genai_gateway.utils.logging import setup_logging


@pytest.fixture
def log_buffer():
    buf = io.StringIO()
    setup_logging(level=logging.DEBUG, stream=buf)
    return buf


def test_handle_error_logs_known_gateway_error_as_error(log_buffer):
    handle_error(CLIError("invalid flag"))

    out = log_buffer.getvalue()
    assert "[cli] invalid flag" in out
    assert "🔥" in out


def test_handle_error_logs_unknown_exception_as_critical(log_buffer):
    handle_error(ValueError("boom"))

    out = log_buffer.getvalue()
    assert "💀" in out
    assert "Unexpected error: ValueError: boom" in out


def test_handle_error_verbose_includes_traceback_in_debug(log_buffer):
    try:
        raise RuntimeError("trace-me")
    except RuntimeError as e:
        handle_error(e, context="unit", verbose=True)

    out = log_buffer.getvalue()
    assert "Traceback:\n" in out
    assert "[unit] Unexpected error: RuntimeError: trace-me" in out


def test_handle_error_with_only_a_message(log_buffer):
    handle_error(error_str="something broke", context="unit")

    assert "[unit] something broke" in log_buffer.getvalue()


def test_safe_entrypoint_returns_function_result_and_passes_kwargs(log_buffer):
    @safe_entrypoint("unit.ok")
    def f(x: int, *, verbose: bool = False) -> int:
        return x + 1

    assert f(1, verbose=True) == 2
    assert log_buffer.getvalue() == ""


def test_safe_entrypoint_converts_errors_to_exit(log_buffer):
    @safe_entrypoint("unit.fail")
    def f() -> None:
        raise CLIError("bad input")

    with pytest.raises(typer.Exit) as exc_info:
        f()

    assert exc_info.value.exit_code == 1
    assert "[unit.fail] [cli] bad input" in log_buffer.getvalue()


def test_safe_entrypoint_lets_exit_through(log_buffer):
    @safe_entrypoint("unit.exit")
    def f() -> None:
        raise typer.Exit(code=2)

    with pytest.raises(typer.Exit) as exc_info:
        f()

    assert exc_info.value.exit_code == 2
