"""Application bootstrap sequence."""

import logging
from pathlib import Path

from genai_gateway.config.env_manager import EnvManager
from genai_gateway.config.loader import ConfigLoader
from genai_gateway.config.schemas import AppConfig
from genai_gateway.core.app_context import AppContext
from genai_gateway.core.exceptions import GatewayError
from genai_gateway.providers.provider_manager import ProviderManager
from genai_gateway.routing.catalog import CandidateCatalog
from genai_gateway.routing.router import ProviderRouter
from genai_gateway.service.chat_service import ChatService
from genai_gateway.utils.logging import get_logger, parse_log_level, setup_logging

logger = get_logger("core.bootstrap")


def _setup_environment(env_manager: EnvManager) -> None:
    """Load .env files; a broken file is logged, not fatal."""
    try:
        loaded = env_manager.load_env_files()
    except GatewayError as e:
        logger.warning(f"Failed to load .env files: {e}")
        return
    if loaded:
        logger.debug(f"Loaded env files: {', '.join(str(p) for p in loaded)}")


def _setup_logging(config: AppConfig, log_level: int | None = None) -> None:
    """Configure logging from the loaded config; an explicit level wins."""
    if log_level is not None:
        setup_logging(level=log_level)
    elif not config.logging.enabled:
        setup_logging(level=logging.CRITICAL)
    else:
        setup_logging(level=parse_log_level(config.logging.level))


def bootstrap(
    config_path: str | Path | None = None,
    *,
    log_level: int | None = None,
    env_manager: EnvManager | None = None,
    provider_manager: ProviderManager | None = None,
) -> AppContext:
    """Initialize and wire the application.

    Args:
        config_path: Optional YAML file layered over the packaged defaults
        log_level: Override for the configured log level
        env_manager: Optional EnvManager (custom prefix or .env paths)
        provider_manager: Optional pre-built manager (for testing); when given
            it is used as is and not reloaded

    Returns:
        AppContext with config, catalog, providers, router and service

    Raises:
        ConfigError: If the configuration or the catalog is invalid
    """
    setup_logging(level=log_level or logging.INFO)
    logger.debug("Starting application bootstrap")

    env_manager = env_manager or EnvManager()
    _setup_environment(env_manager)

    config_paths = [Path(config_path)] if config_path else []
    config = ConfigLoader(config_paths, env_manager=env_manager).load_config()
    _setup_logging(config, log_level)

    catalog = CandidateCatalog.from_config(config.catalog)

    if provider_manager is None:
        provider_manager = ProviderManager(env_manager)
        provider_manager.load(config)

    router = ProviderRouter(
        provider_manager.invoke,
        max_attempts=config.routing.max_attempts,
        retry_delay=config.routing.retry_delay,
    )
    service = ChatService(router, catalog, provider_manager, config.routing)

    ctx = AppContext(config=config)
    ctx.register("catalog", catalog)
    ctx.register("providers", provider_manager)
    ctx.register("router", router)
    ctx.register("service", service)

    logger.info(
        f"Bootstrap complete: {len(catalog)} candidates, "
        f"{len(provider_manager.list_providers())} provider families configured"
    )
    return ctx
