"""Environment variable management for the gateway."""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from genai_gateway.core.exceptions import ConfigError
from genai_gateway.utils.logging import get_logger

logger = get_logger("config.env_manager")

DEFAULT_ENV_PREFIX = "GENAI_GW_"


class EnvManager:
    """Loads .env files and turns prefixed variables into config overrides."""

    def __init__(
        self, env_prefix: str = DEFAULT_ENV_PREFIX, env_paths: list[Path] | None = None
    ):
        """Initialize the environment manager.

        Args:
            env_prefix: Prefix for environment variables to load (default: "GENAI_GW_")
            env_paths: Optional list of .env file paths to load (default: auto-detect)
        """
        self.env_prefix = env_prefix
        self.env_paths = env_paths or self._get_default_env_paths()

    def with_prefix(self, key: str) -> str:
        """Add the environment prefix to a key if not already present."""
        return key if key.startswith(self.env_prefix) else f"{self.env_prefix}{key}"

    def _get_default_env_paths(self) -> list[Path]:
        """Get default .env file paths to check."""
        # Try to find project root by looking for pyproject.toml
        current_path = Path(__file__).parent
        for parent in [current_path, *list(current_path.parents)]:
            if (parent / "pyproject.toml").exists():
                return [parent / ".env", parent / ".env.local"]
        # Fallback to current working directory
        return [Path.cwd() / ".env", Path.cwd() / ".env.local"]

    def load_env_files(self) -> list[Path]:
        """Load .env files; later files override earlier ones.

        Variables already present in the process environment win over the
        first file.

        Returns:
            The files that were loaded

        Raises:
            ConfigError: If .env file exists but cannot be loaded
        """
        loaded: list[Path] = []
        for env_path in self.env_paths:
            if not env_path.exists():
                continue
            try:
                load_dotenv(env_path, override=bool(loaded))
            except Exception as e:
                raise ConfigError(f"Failed to load .env file {env_path}: {e}") from e
            logger.info(f"Loaded environment variables from {env_path}")
            loaded.append(env_path)

        if not loaded:
            logger.debug("No .env files found to load")
        return loaded

    def get_api_key(self, env_name: str) -> str | None:
        """Return a non-blank API key from the environment, or None."""
        value = os.getenv(env_name)
        if value is None or not value.strip():
            return None
        return value.strip()

    def get_config_from_env(self) -> dict[str, Any]:
        """Extract configuration overrides from prefixed environment variables.

        ``GENAI_GW_ROUTING__MAX_ATTEMPTS=3`` becomes
        ``{"routing": {"max_attempts": 3}}``.
        """
        config_data: dict[str, Any] = {}
        env_count = 0

        for key, value in os.environ.items():
            if not key.startswith(self.env_prefix):
                continue
            config_key = key[len(self.env_prefix) :].lower()
            if not config_key:
                continue
            env_count += 1
            self._set_nested_value(config_data, config_key.split("__"), value)

        if env_count > 0:
            logger.debug(
                f"Loaded {env_count} environment variables with prefix '{self.env_prefix}'"
            )
        return config_data

    def _set_nested_value(
        self, data: dict[str, Any], key_parts: list[str], value: str
    ) -> None:
        current = data

        for part in key_parts[:-1]:
            if part not in current:
                current[part] = {}
            elif not isinstance(current[part], dict):
                logger.warning(
                    f"Cannot set nested value for {'.'.join(key_parts)}: {part} is not a dictionary"
                )
                return
            current = current[part]

        current[key_parts[-1]] = self._convert_env_value(value)

    def _convert_env_value(self, value: str) -> Any:
        """Convert string environment variable value to appropriate type."""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"

        try:
            if "." not in value and "e" not in value.lower():
                return int(value)
            return float(value)
        except ValueError:
            pass

        return value if value != "null" else None
