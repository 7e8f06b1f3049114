"""Configuration schemas for the gateway."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from genai_gateway.routing.types import Candidate, Capability, ProviderId


def _default_chains() -> dict[Capability, list[ProviderId]]:
    return {
        Capability.TEXT_CHAT: [ProviderId.GEMINI, ProviderId.GROK],
        Capability.IMAGE_ANALYSIS: [ProviderId.GEMINI, ProviderId.GROK],
        Capability.IMAGE_GENERATE: [
            ProviderId.GEMINI,
            ProviderId.HUGGINGFACE,
            ProviderId.STABILITY,
        ],
    }


class RoutingConfig(BaseModel):
    """Configuration for candidate routing and cross-provider fallback."""

    max_attempts: int = Field(
        default=5, ge=1, description="Upper bound on attempts per routing call"
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Pause in seconds before each attempt after the first",
    )
    chains: dict[Capability, list[ProviderId]] = Field(
        default_factory=_default_chains,
        description=(
            "Provider families per capability. The first configured family is "
            "primary, the others are tried as separate fallback routes."
        ),
    )

    @field_validator("chains")
    @classmethod
    def validate_chains(cls, v):
        for capability, families in v.items():
            if len(set(families)) != len(families):
                raise ValueError(f"duplicate provider in chain for {capability.value}")
        return v

    def chain_for(self, capability: Capability) -> list[ProviderId]:
        return list(self.chains.get(capability, []))


class ProviderSettings(BaseModel):
    """Connection settings for one provider family."""

    api_key_env: str = Field(description="Environment variable holding the API key")
    base_url: str | None = Field(
        default=None, description="Override for the provider's API base URL"
    )
    timeout: float = Field(default=60.0, gt=0.0, description="Request timeout in seconds")


def _default_providers() -> dict[ProviderId, ProviderSettings]:
    return {
        ProviderId.GEMINI: ProviderSettings(api_key_env="GEMINI_API_KEY"),
        ProviderId.GROK: ProviderSettings(api_key_env="XAI_API_KEY"),
        ProviderId.HUGGINGFACE: ProviderSettings(
            api_key_env="HUGGINGFACE_API_KEY", timeout=120.0
        ),
        ProviderId.STABILITY: ProviderSettings(
            api_key_env="STABILITY_API_KEY", timeout=120.0
        ),
    }


class ServerConfig(BaseModel):
    host: str = Field(default="127.0.0.1", description="Host to bind to")
    port: int = Field(default=8000, gt=0, lt=65536, description="Port to listen on")


class LoggingConfig(BaseModel):
    enabled: bool = Field(default=True, description="Whether logging is enabled")
    level: str = Field(default="INFO", description="Root log level")


class AppConfig(BaseModel):
    """Top-level application configuration."""

    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    providers: dict[ProviderId, ProviderSettings] = Field(
        default_factory=_default_providers, description="Provider connection settings"
    )
    catalog: list[Candidate] = Field(
        default_factory=list, description="Candidate catalog in declaration order"
    )
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> AppConfig:
        """Create AppConfig from a dictionary.

        Provider entries are merged over the built-in defaults so a YAML file
        only has to mention the fields it changes.
        """
        data = dict(config_dict)
        providers = {p.value: s.model_dump() for p, s in _default_providers().items()}
        for name, settings in (data.pop("providers", None) or {}).items():
            providers[name] = {**providers.get(name, {}), **(settings or {})}
        return cls.model_validate({**data, "providers": providers})

    def provider_settings(self, provider_id: ProviderId) -> ProviderSettings:
        return self.providers[provider_id]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
