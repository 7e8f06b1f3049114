"""Data model shared by the router, the catalog and the chat service."""

from __future__ import annotations

import base64
import binascii
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Capability(str, Enum):
    """Category of work a request needs."""

    TEXT_CHAT = "text-chat"
    IMAGE_ANALYSIS = "image-analysis"
    IMAGE_GENERATE = "image-generate"


class ProviderId(str, Enum):
    """Provider families the gateway can talk to."""

    GEMINI = "gemini"
    GROK = "grok"
    HUGGINGFACE = "huggingface"
    STABILITY = "stability"


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    RETRYABLE_FAILURE = "retryable-failure"
    FATAL_FAILURE = "fatal-failure"


class ErrorKind(str, Enum):
    """Structured reason a provider call failed."""

    RATE_LIMITED = "rate_limited"
    QUOTA_EXHAUSTED = "quota_exhausted"
    MODEL_UNAVAILABLE = "model_unavailable"
    INVALID_REQUEST = "invalid_request"
    AUTH_FAILURE = "auth_failure"
    UNEXPECTED_RESPONSE = "unexpected_response"
    TIMEOUT = "timeout"
    CONNECTION_FAILED = "connection_failed"
    UNKNOWN = "unknown"


class Candidate(BaseModel):
    """One (provider, model) pair eligible to serve a capability."""

    model_config = ConfigDict(frozen=True)

    provider_id: ProviderId = Field(description="Provider family serving the model")
    model_name: str = Field(min_length=1, description="Provider-side model id")
    capability: Capability = Field(description="Capability this entry serves")
    priority: int = Field(default=100, description="Lower values are tried first")
    media_type: MediaType = Field(
        default=MediaType.IMAGE,
        description="Output media for image-generate candidates",
    )

    @property
    def label(self) -> str:
        return f"{self.provider_id.value}:{self.model_name}"


class Attachment(BaseModel):
    """Binary image payload with its declared MIME type."""

    model_config = ConfigDict(frozen=True)

    mime_type: str = Field(min_length=1)
    data: bytes

    @classmethod
    def from_data_uri(cls, data_uri: str) -> Attachment:
        """Parse ``data:<mime>;base64,<payload>``.

        Raises:
            ValueError: If the string is not a base64 data-URI.
        """
        if not isinstance(data_uri, str) or not data_uri.startswith("data:"):
            raise ValueError("attachment must be a data URI")

        header, sep, payload = data_uri.partition(",")
        if not sep:
            raise ValueError("attachment data URI has no payload")

        meta = header[len("data:") :].split(";")
        mime_type = meta[0].strip()
        if not mime_type or "base64" not in meta[1:]:
            raise ValueError("attachment data URI must declare a MIME type and base64")

        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"attachment payload is not valid base64: {e}") from e

        return cls(mime_type=mime_type, data=data)

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_data}"


class GenerationOptions(BaseModel):
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=2048, gt=0)


class RequestTask(BaseModel):
    """The unit of work submitted to the router."""

    capability: Capability
    prompt_text: str | None = None
    attachments: list[Attachment] = Field(default_factory=list)
    media_type: MediaType = MediaType.IMAGE
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class AttemptRecord(BaseModel):
    """Result of invoking one candidate for one task."""

    candidate: Candidate
    outcome: AttemptOutcome
    error_detail: str | None = None
    error_kind: ErrorKind | None = None
    timestamp_ordinal: int = Field(ge=0)

    @property
    def failed(self) -> bool:
        return self.outcome is not AttemptOutcome.SUCCESS


class RouteResult(BaseModel):
    """Final outcome of routing a task."""

    succeeded: bool
    payload: str | None = None
    winning_candidate: Candidate | None = None
    attempts: list[AttemptRecord]

    @model_validator(mode="after")
    def _check_consistency(self) -> RouteResult:
        if not self.attempts:
            raise ValueError("a route result needs at least one attempt")

        last = self.attempts[-1]
        if self.succeeded:
            if self.payload is None or self.winning_candidate is None:
                raise ValueError("successful result needs payload and winner")
            if last.outcome is not AttemptOutcome.SUCCESS:
                raise ValueError("successful result must end with a success")
            if last.candidate != self.winning_candidate:
                raise ValueError("winning candidate must be the last attempted")
        elif self.payload is not None or self.winning_candidate is not None:
            raise ValueError("failed result cannot carry a payload or winner")
        return self

    @property
    def last_attempt(self) -> AttemptRecord:
        return self.attempts[-1]

    @property
    def last_error(self) -> str | None:
        for record in reversed(self.attempts):
            if record.error_detail:
                return record.error_detail
        return None

    @property
    def ended_fatally(self) -> bool:
        return self.last_attempt.outcome is AttemptOutcome.FATAL_FAILURE
