"""Failure classification for provider attempts."""

from genai_gateway.providers.exceptions import ProviderError
from genai_gateway.routing.types import AttemptOutcome, ErrorKind

RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.RATE_LIMITED,
        ErrorKind.QUOTA_EXHAUSTED,
        ErrorKind.MODEL_UNAVAILABLE,
    }
)

RETRYABLE_STATUS_CODES = frozenset({404, 429, 503})

# Only consulted when a provider could not tell what went wrong.
RETRYABLE_MARKERS = (
    "429",
    "404",
    "quota",
    "limit",
    "not found",
    "unavailable",
    "model_not_found",
    "loading",
)


def is_retryable_kind(kind: ErrorKind) -> bool:
    return kind in RETRYABLE_KINDS


def kind_from_message(message: str) -> ErrorKind:
    """Best-effort kind for free-text errors from providers without structure."""
    lowered = message.lower()
    if "quota" in lowered:
        return ErrorKind.QUOTA_EXHAUSTED
    if "429" in lowered or "limit" in lowered:
        return ErrorKind.RATE_LIMITED
    if any(marker in lowered for marker in RETRYABLE_MARKERS):
        return ErrorKind.MODEL_UNAVAILABLE
    return ErrorKind.UNKNOWN


def resolve_kind(error: ProviderError) -> ErrorKind:
    """Return the structured kind, falling back to status code then message."""
    if error.kind is not ErrorKind.UNKNOWN:
        return error.kind
    if error.status_code in RETRYABLE_STATUS_CODES:
        if error.status_code == 429:
            return ErrorKind.RATE_LIMITED
        return ErrorKind.MODEL_UNAVAILABLE
    return kind_from_message(error.message)


def classify(error: ProviderError) -> AttemptOutcome:
    """Decide whether the router should switch model or stop."""
    if is_retryable_kind(resolve_kind(error)):
        return AttemptOutcome.RETRYABLE_FAILURE
    return AttemptOutcome.FATAL_FAILURE
