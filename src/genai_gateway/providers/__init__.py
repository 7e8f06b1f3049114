"""
Generative-AI provider system

Each provider family registers itself with the provider manager; the manager
builds the families whose API keys are present and dispatches candidate
calls to them.
"""

# Import provider modules to trigger decorator registration
from . import (
    gemini_provider,  # noqa: F401
    grok_provider,  # noqa: F401
    huggingface_provider,  # noqa: F401
    stability_provider,  # noqa: F401
)
from .base import BaseDriver, BaseProvider, GeneratedMedia
from .exceptions import (
    ProviderAuthError,
    ProviderConfigurationError,
    ProviderConnectionError,
    ProviderError,
    ProviderInvalidRequestError,
    ProviderModelUnavailableError,
    ProviderRateLimitError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from .provider_manager import ProviderManager, register_provider, registered_providers

__all__ = [
    "BaseDriver",
    "BaseProvider",
    "GeneratedMedia",
    "ProviderAuthError",
    "ProviderConfigurationError",
    "ProviderConnectionError",
    "ProviderError",
    "ProviderInvalidRequestError",
    "ProviderManager",
    "ProviderModelUnavailableError",
    "ProviderRateLimitError",
    "ProviderResponseError",
    "ProviderTimeoutError",
    "register_provider",
    "registered_providers",
]
