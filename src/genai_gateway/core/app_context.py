"""Application context holding the components built at startup."""

from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from genai_gateway.config.schemas import AppConfig
    from genai_gateway.providers.provider_manager import ProviderManager
    from genai_gateway.routing.catalog import CandidateCatalog
    from genai_gateway.routing.router import ProviderRouter
    from genai_gateway.service.chat_service import ChatService

T = TypeVar("T")


class AppContext:
    """Central context object shared by the HTTP server and the CLI.

    Components are registered by name during bootstrap; the well-known ones
    are also exposed as properties.
    """

    def __init__(self, config: "AppConfig | None" = None) -> None:
        self._resources: dict[str, Any] = {}
        self._config = config

    @property
    def config(self) -> "AppConfig":
        """The loaded configuration.

        Raises:
            RuntimeError: If the context was not built by bootstrap()
        """
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Did you call bootstrap()?")
        return self._config

    @property
    def catalog(self) -> "CandidateCatalog":
        return self._require("catalog")

    @property
    def providers(self) -> "ProviderManager":
        return self._require("providers")

    @property
    def router(self) -> "ProviderRouter":
        return self._require("router")

    @property
    def service(self) -> "ChatService":
        return self._require("service")

    def _require(self, name: str) -> Any:
        if name not in self._resources:
            raise RuntimeError(f"Component '{name}' is not registered")
        return self._resources[name]

    def register(self, name: str, resource: Any) -> None:
        """Register a resource with the context."""
        self._resources[name] = resource

    def get(self, name: str, default: Any = None) -> Any | None:
        return self._resources.get(name, default)

    def get_typed(
        self, name: str, expected_type: type[T], default: T | None = None
    ) -> T | None:
        """Retrieve a resource by name, or `default` if missing or of the wrong type."""
        resource = self._resources.get(name)
        if not isinstance(resource, expected_type):
            return default
        return resource

    def __getitem__(self, name: str) -> Any:
        """Enable dictionary-style access to resources.

        Raises:
            KeyError: If the resource is not found
        """
        return self._resources[name]

    def __contains__(self, name: str) -> bool:
        return name in self._resources
