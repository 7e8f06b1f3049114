"""Pytest configuration and fixtures for e2e CLI tests."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from genai_gateway.config.env_manager import EnvManager
from genai_gateway.core.bootstrap import bootstrap
from genai_gateway.service.chat_service import ChatMode, ChatResponse


@pytest.fixture
def cli_runner():
    """Provide a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def real_context(tmp_path, monkeypatch):
    """A context built by the real bootstrap, with only a Gemini key set."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return bootstrap(
        log_level=logging.WARNING, env_manager=EnvManager(env_paths=[tmp_path / ".env"])
    )


@pytest.fixture
def mock_run_bootstrap():
    """Patch bootstrap in the run command with a context whose service is scripted."""
    with patch("genai_gateway.cli.commands.run.bootstrap") as mock_bootstrap:
        ctx = MagicMock()
        ctx.service.handle = AsyncMock(
            return_value=ChatResponse(
                success=True,
                text="Hello from the gateway",
                mode=ChatMode.CHAT,
                model_used="gemini-2.0-flash-exp",
            )
        )
        mock_bootstrap.return_value = ctx
        yield ctx
