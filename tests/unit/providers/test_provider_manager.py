"""Tests for ProviderManager loading and dispatch."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from genai_gateway.config.env_manager import EnvManager
from genai_gateway.config.schemas import AppConfig
from genai_gateway.providers import registered_providers
from genai_gateway.providers.base import GeneratedMedia
from genai_gateway.providers.exceptions import (
    ProviderConfigurationError,
    ProviderInvalidRequestError,
)
from genai_gateway.providers.gemini_provider import GeminiProvider
from genai_gateway.providers.provider_manager import ProviderManager
from genai_gateway.routing.types import (
    Attachment,
    Candidate,
    Capability,
    MediaType,
    ProviderId,
    RequestTask,
)


@pytest.fixture
def env_manager(tmp_path):
    return EnvManager(env_paths=[tmp_path / ".env"])


def candidate(provider, capability, model="m"):
    return Candidate(provider_id=provider, model_name=model, capability=capability)


def test_all_families_are_registered():
    assert set(registered_providers()) == set(ProviderId)


def test_load_only_builds_families_with_keys(env_manager, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-key")
    monkeypatch.setenv("STABILITY_API_KEY", "s-key")
    manager = ProviderManager(env_manager)

    manager.load(AppConfig())

    assert manager.list_providers() == [ProviderId.GEMINI, ProviderId.STABILITY]
    assert isinstance(manager.get_provider(ProviderId.GEMINI), GeminiProvider)
    assert manager.get_provider(ProviderId.GEMINI).api_key == "g-key"
    assert manager.missing_keys() == {
        ProviderId.GROK: "XAI_API_KEY",
        ProviderId.HUGGINGFACE: "HUGGINGFACE_API_KEY",
    }
    assert manager.api_key_env(ProviderId.GROK) == "XAI_API_KEY"


def test_load_logs_missing_keys(env_manager, caplog):
    manager = ProviderManager(env_manager)

    with caplog.at_level("WARNING"):
        manager.load(AppConfig())

    assert not manager.list_providers()
    assert "XAI_API_KEY is not set" in caplog.text


@pytest.mark.asyncio
async def test_invoke_unconfigured_family_raises(env_manager):
    manager = ProviderManager(env_manager)
    manager.load(AppConfig())
    task = RequestTask(capability=Capability.TEXT_CHAT, prompt_text="hi")

    with pytest.raises(ProviderConfigurationError, match="GEMINI_API_KEY"):
        await manager.invoke(candidate(ProviderId.GEMINI, Capability.TEXT_CHAT), task)


@pytest.mark.asyncio
async def test_invoke_text_dispatches_to_generate_text(env_manager, png_data_uri):
    provider = MagicMock()
    provider.name = "gemini"
    provider.generate_text = AsyncMock(return_value="a cat on a mat")
    manager = ProviderManager(env_manager)
    manager.register(ProviderId.GEMINI, provider)
    attachment = Attachment.from_data_uri(png_data_uri)
    task = RequestTask(
        capability=Capability.IMAGE_ANALYSIS, prompt_text="describe", attachments=[attachment]
    )

    result = await manager.invoke(
        candidate(ProviderId.GEMINI, Capability.IMAGE_ANALYSIS, "gemini-2.5-flash"), task
    )

    assert result == "a cat on a mat"
    provider.generate_text.assert_awaited_once_with(
        "gemini-2.5-flash", "describe", [attachment], task.options
    )


@pytest.mark.asyncio
async def test_invoke_analysis_requires_attachment(env_manager):
    provider = MagicMock()
    provider.name = "gemini"
    manager = ProviderManager(env_manager)
    manager.register(ProviderId.GEMINI, provider)
    task = RequestTask(capability=Capability.IMAGE_ANALYSIS, prompt_text="describe")

    with pytest.raises(ProviderInvalidRequestError):
        await manager.invoke(candidate(ProviderId.GEMINI, Capability.IMAGE_ANALYSIS), task)


@pytest.mark.asyncio
async def test_invoke_generation_returns_data_uri(env_manager):
    provider = MagicMock()
    provider.name = "huggingface"
    provider.generate_media = AsyncMock(
        return_value=GeneratedMedia(mime_type="video/mp4", data=b"\x00\x01")
    )
    manager = ProviderManager(env_manager)
    manager.register(ProviderId.HUGGINGFACE, provider)
    task = RequestTask(
        capability=Capability.IMAGE_GENERATE, prompt_text="waves", media_type=MediaType.VIDEO
    )

    result = await manager.invoke(
        candidate(ProviderId.HUGGINGFACE, Capability.IMAGE_GENERATE, "t2v"), task
    )

    assert result == "data:video/mp4;base64,AAE="
    provider.generate_media.assert_awaited_once_with("t2v", "waves", MediaType.VIDEO)


@pytest.mark.asyncio
async def test_invoke_generation_requires_prompt(env_manager):
    provider = MagicMock()
    provider.name = "stability"
    manager = ProviderManager(env_manager)
    manager.register(ProviderId.STABILITY, provider)
    task = RequestTask(capability=Capability.IMAGE_GENERATE)

    with pytest.raises(ProviderInvalidRequestError, match="prompt"):
        await manager.invoke(candidate(ProviderId.STABILITY, Capability.IMAGE_GENERATE), task)
