"""
Provider-specific exceptions

Every provider failure carries an explicit `ErrorKind` so routing can decide
between switching model and giving up without parsing message text.
"""

from genai_gateway.core.exceptions import GatewayError
from genai_gateway.routing.types import ErrorKind


class ProviderError(GatewayError):
    """Base exception for provider-related errors"""

    subsystem = "providers"
    default_kind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        *,
        kind: ErrorKind | None = None,
        model: str | None = None,
        status_code: int | None = None,
    ):
        self.provider = provider
        self.model = model
        self.message = message
        self.status_code = status_code
        self.kind = kind or self.default_kind
        super().__init__(f"[{provider}] {message}" if provider else message)


class ProviderConfigurationError(ProviderError):
    """Raised when a provider cannot be built, typically a missing API key"""

    default_kind = ErrorKind.AUTH_FAILURE


class ProviderAuthError(ProviderError):
    """Raised when authentication with provider fails"""

    default_kind = ErrorKind.AUTH_FAILURE


class ProviderRateLimitError(ProviderError):
    """Raised when rate limit or quota is exceeded"""

    default_kind = ErrorKind.RATE_LIMITED

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        retry_after: int | None = None,
        **kwargs,
    ):
        self.retry_after = retry_after
        super().__init__(message, provider, **kwargs)


class ProviderModelUnavailableError(ProviderError):
    """Raised when the model is unknown, retired or still loading"""

    default_kind = ErrorKind.MODEL_UNAVAILABLE


class ProviderInvalidRequestError(ProviderError):
    """Raised when the provider rejects the request itself"""

    default_kind = ErrorKind.INVALID_REQUEST


class ProviderResponseError(ProviderError):
    """Raised when a provider answers with a payload we cannot use"""

    default_kind = ErrorKind.UNEXPECTED_RESPONSE


class ProviderTimeoutError(ProviderError):
    """Raised when request times out"""

    default_kind = ErrorKind.TIMEOUT


class ProviderConnectionError(ProviderError):
    """Raised when the provider cannot be reached at all"""

    default_kind = ErrorKind.CONNECTION_FAILED


_STATUS_KINDS = {
    400: ErrorKind.INVALID_REQUEST,
    401: ErrorKind.AUTH_FAILURE,
    402: ErrorKind.QUOTA_EXHAUSTED,
    403: ErrorKind.AUTH_FAILURE,
    404: ErrorKind.MODEL_UNAVAILABLE,
    413: ErrorKind.INVALID_REQUEST,
    422: ErrorKind.INVALID_REQUEST,
    429: ErrorKind.RATE_LIMITED,
    503: ErrorKind.MODEL_UNAVAILABLE,
}

_KIND_CLASSES: dict[ErrorKind, type[ProviderError]] = {
    ErrorKind.AUTH_FAILURE: ProviderAuthError,
    ErrorKind.RATE_LIMITED: ProviderRateLimitError,
    ErrorKind.QUOTA_EXHAUSTED: ProviderRateLimitError,
    ErrorKind.MODEL_UNAVAILABLE: ProviderModelUnavailableError,
    ErrorKind.INVALID_REQUEST: ProviderInvalidRequestError,
    ErrorKind.UNEXPECTED_RESPONSE: ProviderResponseError,
    ErrorKind.TIMEOUT: ProviderTimeoutError,
}


def kind_from_status(status_code: int | None) -> ErrorKind:
    """Map an HTTP status code to an error kind.

    503 is what Hugging Face returns while a model is warming up.
    """
    if status_code is None:
        return ErrorKind.UNKNOWN
    return _STATUS_KINDS.get(status_code, ErrorKind.UNKNOWN)


def error_from_status(
    status_code: int,
    message: str,
    provider: str | None = None,
    model: str | None = None,
) -> ProviderError:
    """Build the most specific ProviderError for an HTTP status code."""
    kind = kind_from_status(status_code)
    lowered = message.lower()
    if kind is ErrorKind.RATE_LIMITED and "quota" in lowered:
        kind = ErrorKind.QUOTA_EXHAUSTED
    error_class = _KIND_CLASSES.get(kind, ProviderError)
    return error_class(
        f"HTTP {status_code}: {message}",
        provider,
        kind=kind,
        model=model,
        status_code=status_code,
    )
