"""Configuration management for the gateway."""

from .env_manager import EnvManager
from .loader import ConfigLoader, load_config
from .schemas import AppConfig, ProviderSettings, RoutingConfig, ServerConfig

__all__ = [
    "AppConfig",
    "ConfigLoader",
    "EnvManager",
    "ProviderSettings",
    "RoutingConfig",
    "ServerConfig",
    "load_config",
]
