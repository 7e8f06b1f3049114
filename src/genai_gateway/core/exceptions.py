class GatewayError(Exception):
    """Base exception for all gateway errors.

    The message is automatically prefixed with the subsystem name in square brackets.
    """

    subsystem = "core"

    def __init__(self, message: str, *, subsystem: str | None = None) -> None:
        self.subsystem = subsystem or self.subsystem
        self.detail = message
        super().__init__(f"[{self.subsystem}] {message}")


# ─── Subsystem-level exceptions ───────────────────────────────────────────────


class ConfigError(GatewayError):
    """Raised for configuration loading or parsing errors.

    Also used when no provider family for a capability has its API key set.
    """

    subsystem = "config"


class RoutingError(GatewayError):
    """Raised for routing failures that happen before any candidate is tried."""

    subsystem = "routing"


class NoCandidatesAvailable(RoutingError):
    """Raised when the catalog holds no candidate for the requested capability."""

    def __init__(self, capability: str, *, provider: str | None = None) -> None:
        self.capability = capability
        self.provider = provider
        scope = f" from provider '{provider}'" if provider else ""
        super().__init__(f"No candidates available for capability '{capability}'{scope}")


class ServiceError(GatewayError):
    """Raised for request handling issues in the chat service."""

    subsystem = "service"


class RequestValidationError(ServiceError):
    """Raised when an inbound request is malformed or empty."""


class CLIError(GatewayError):
    """Raised for CLI-specific logic or user input issues."""

    subsystem = "cli"
