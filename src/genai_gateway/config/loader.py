"""Configuration loader that merges ENV → YAML → Defaults."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from genai_gateway.config.env_manager import EnvManager
from genai_gateway.config.schemas import AppConfig
from genai_gateway.core.exceptions import ConfigError
from genai_gateway.utils.logging import get_logger

logger = get_logger("config.loader")

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


class ConfigLoader:
    """Loads and merges configuration from multiple sources.

    Priority order (highest to lowest):
    1. Environment variables with the ``GENAI_GW_`` prefix
    2. YAML configuration files, in the order given
    3. The packaged defaults.yaml

    Lists (the catalog in particular) are replaced, not merged: a user file
    that declares ``catalog:`` owns the whole catalog.
    """

    def __init__(
        self,
        config_paths: list[Path] | None = None,
        env_manager: EnvManager | None = None,
        defaults_path: Path | None = None,
    ):
        self.config_paths = [Path(p) for p in (config_paths or [])]
        self.env_manager = env_manager or EnvManager()
        self._defaults_path = defaults_path or DEFAULTS_PATH

    def load_config(self) -> AppConfig:
        """Load and merge configuration from all sources.

        Raises:
            ConfigError: If configuration is invalid or files don't exist
        """
        logger.info("Loading configuration from multiple sources")
        config_data = self._load_defaults()

        for config_path in self.config_paths:
            yaml_data = self._load_yaml_file(config_path)
            config_data = self._deep_merge(config_data, yaml_data)
            logger.debug(f"Merged YAML config from {config_path}")

        env_data = self.env_manager.get_config_from_env()
        if env_data:
            config_data = self._deep_merge(config_data, env_data)
            logger.debug(f"Merged {len(env_data)} environment overrides")

        try:
            config = AppConfig.from_dict(config_data)
        except ValidationError as e:
            error_msg = f"Invalid configuration: {e}"
            logger.error(error_msg)
            raise ConfigError(error_msg) from e

        logger.info(
            f"Configuration loaded: {len(config.catalog)} catalog entries, "
            f"{len(config.providers)} provider families"
        )
        return config

    def _load_defaults(self) -> dict[str, Any]:
        if self._defaults_path.exists():
            return self._load_yaml_file(self._defaults_path)
        logger.debug("No defaults file found, using empty defaults")
        return {}

    def _load_yaml_file(self, file_path: Path) -> dict[str, Any]:
        """Load YAML file and return as dictionary.

        Raises:
            ConfigError: If file doesn't exist or is invalid YAML
        """
        logger.debug(f"Loading YAML file: {file_path}")

        if not file_path.exists():
            error_msg = f"Config file not found: {file_path}"
            logger.error(error_msg)
            raise ConfigError(error_msg)

        try:
            with open(file_path, encoding="utf-8") as file:
                config_data = yaml.safe_load(file)
        except UnicodeDecodeError as e:
            raise ConfigError(
                f"Unicode decode error in {file_path}: {e}. File may not be UTF-8 encoded."
            ) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {file_path}: {e}") from e

        if config_data is None:
            logger.warning(f"YAML file {file_path} is empty, using empty dict")
            return {}
        if not isinstance(config_data, dict):
            raise ConfigError(
                f"YAML file {file_path} must contain a mapping, got {type(config_data).__name__}"
            )
        return config_data

    def _deep_merge(
        self, base: dict[str, Any], overlay: dict[str, Any]
    ) -> dict[str, Any]:
        result = base.copy()

        for key, value in overlay.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(
    config_paths: list[Path] | None = None, env_manager: EnvManager | None = None
) -> AppConfig:
    """Load application configuration.

    Args:
        config_paths: Optional list of config file paths
        env_manager: Optional EnvManager (for a custom prefix or .env paths)

    Returns:
        Loaded and merged AppConfig
    """
    return ConfigLoader(config_paths, env_manager=env_manager).load_config()
