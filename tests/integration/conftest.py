"""Fixtures that wire the real bootstrap with scripted provider families."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml
from fastapi.testclient import TestClient

from genai_gateway.config.env_manager import EnvManager
from genai_gateway.core.bootstrap import bootstrap
from genai_gateway.providers.base import GeneratedMedia
from genai_gateway.providers.provider_manager import ProviderManager
from genai_gateway.routing.types import ProviderId
from genai_gateway.server.app import create_app


def scripted_provider(name: str, text: str = "", media: GeneratedMedia | None = None):
    provider = MagicMock()
    provider.name = name
    provider.generate_text = AsyncMock(return_value=text)
    provider.generate_media = AsyncMock(return_value=media)
    return provider


@pytest.fixture
def gateway_config(tmp_path):
    path = tmp_path / "gateway.yaml"
    path.write_text(yaml.safe_dump({"routing": {"retry_delay": 0}}), encoding="utf-8")
    return path


@pytest.fixture
def env_manager(tmp_path):
    return EnvManager(env_paths=[tmp_path / ".env"])


@pytest.fixture
def gemini():
    return scripted_provider(
        "gemini",
        text="Hello from Gemini",
        media=GeneratedMedia(mime_type="image/png", data=b"\x89PNG\r\n\x1a\n"),
    )


@pytest.fixture
def grok():
    return scripted_provider("grok", text="Hello from Grok")


@pytest.fixture
def provider_manager(env_manager, gemini, grok):
    manager = ProviderManager(env_manager)
    manager.register(ProviderId.GEMINI, gemini)
    manager.register(ProviderId.GROK, grok)
    return manager


@pytest.fixture
def app_context(gateway_config, env_manager, provider_manager):
    return bootstrap(
        gateway_config,
        log_level=logging.WARNING,
        env_manager=env_manager,
        provider_manager=provider_manager,
    )


@pytest.fixture
def client(app_context):
    return TestClient(create_app(app_context))
