"""
Provider manager for provider registration and per-family availability
"""

from genai_gateway.config.env_manager import EnvManager
from genai_gateway.config.schemas import AppConfig, ProviderSettings
from genai_gateway.providers.base import BaseProvider
from genai_gateway.providers.exceptions import (
    ProviderConfigurationError,
    ProviderInvalidRequestError,
)
from genai_gateway.routing.types import Candidate, Capability, ProviderId, RequestTask
from genai_gateway.utils.logging import get_logger

logger = get_logger("providers.manager")

# Module-level registry for provider classes (used by decorators)
_provider_registry: dict[ProviderId, type[BaseProvider]] = {}


def register_provider(provider_id: ProviderId | str):
    """Decorator to register a provider class for a family"""
    key = ProviderId(provider_id)

    def decorator(cls: type[BaseProvider]) -> type[BaseProvider]:
        _provider_registry[key] = cls
        cls.name = key.value
        logger.debug(f"Registered builtin provider: {key.value}")
        return cls

    return decorator


def registered_providers() -> dict[ProviderId, type[BaseProvider]]:
    return dict(_provider_registry)


class ProviderManager:
    """Builds provider instances once at startup and dispatches candidate calls.

    A family whose API key is missing is left out. That is reported once at
    load time; at request time the family is simply not configured.
    """

    def __init__(self, env_manager: EnvManager | None = None):
        self.env_manager = env_manager or EnvManager()
        self._providers: dict[ProviderId, type[BaseProvider]] = dict(_provider_registry)
        self._instances: dict[ProviderId, BaseProvider] = {}
        self._missing_keys: dict[ProviderId, str] = {}
        self._settings: dict[ProviderId, ProviderSettings] = {}

    def register(self, provider_id: ProviderId, instance: BaseProvider) -> None:
        """Register a ready-made provider instance (used by tests and embedders)."""
        self._instances[provider_id] = instance
        self._missing_keys.pop(provider_id, None)

    def load(self, config: AppConfig) -> None:
        """Instantiate every registered family whose API key is present."""
        logger.info("Loading providers")
        self._instances.clear()
        self._missing_keys.clear()
        self._providers.update(_provider_registry)
        self._settings = dict(config.providers)

        for provider_id, settings in config.providers.items():
            provider_class = self._providers.get(provider_id)
            if provider_class is None:
                logger.warning(f"No provider class registered for: {provider_id.value}")
                continue

            api_key = self.env_manager.get_api_key(settings.api_key_env)
            if not api_key:
                self._missing_keys[provider_id] = settings.api_key_env
                logger.warning(
                    f"{provider_id.value} disabled: {settings.api_key_env} is not set"
                )
                continue

            self._instances[provider_id] = provider_class(settings, api_key=api_key)
            logger.debug(f"Created instance for provider: {provider_id.value}")

        logger.info(f"Provider load complete: {len(self._instances)} providers configured")

    def get_provider(self, provider_id: ProviderId) -> BaseProvider | None:
        return self._instances.get(provider_id)

    def is_configured(self, provider_id: ProviderId) -> bool:
        return provider_id in self._instances

    def list_providers(self) -> list[ProviderId]:
        """Configured families, sorted by name"""
        return sorted(self._instances, key=lambda p: p.value)

    def api_key_env(self, provider_id: ProviderId) -> str | None:
        """Env var a family reads its key from, if the family was in the config"""
        settings = self._settings.get(provider_id)
        return settings.api_key_env if settings else None

    def missing_keys(self) -> dict[ProviderId, str]:
        """Families skipped at load time, mapped to the env var they need"""
        return dict(self._missing_keys)

    async def invoke(self, candidate: Candidate, task: RequestTask) -> str:
        """Run one candidate for one task.

        Text capabilities return the reply; generation returns a data-URI.

        Raises:
            ProviderError: On any provider failure, with a structured kind
        """
        provider = self.get_provider(candidate.provider_id)
        if provider is None:
            env_name = self._missing_keys.get(candidate.provider_id, "its API key")
            raise ProviderConfigurationError(
                f"Provider is not configured (set {env_name})",
                candidate.provider_id.value,
                model=candidate.model_name,
            )

        prompt = task.prompt_text or ""
        if task.capability is Capability.IMAGE_GENERATE:
            if not prompt:
                raise ProviderInvalidRequestError(
                    "A prompt is required for generation",
                    provider.name,
                    model=candidate.model_name,
                )
            media = await provider.generate_media(
                candidate.model_name, prompt, task.media_type
            )
            return media.to_data_uri()

        if task.capability is Capability.IMAGE_ANALYSIS and not task.attachments:
            raise ProviderInvalidRequestError(
                "Image analysis needs at least one image",
                provider.name,
                model=candidate.model_name,
            )

        return await provider.generate_text(
            candidate.model_name, prompt, list(task.attachments), task.options
        )

