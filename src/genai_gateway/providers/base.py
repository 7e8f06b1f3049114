"""
Base classes for generative-AI providers
"""

import abc
import base64
from typing import Any

import httpx
from pydantic import BaseModel, Field

from genai_gateway.config.schemas import ProviderSettings
from genai_gateway.providers.exceptions import (
    ProviderConfigurationError,
    ProviderConnectionError,
    ProviderInvalidRequestError,
    ProviderTimeoutError,
    error_from_status,
)
from genai_gateway.routing.types import Attachment, GenerationOptions, MediaType
from genai_gateway.utils.logging import get_logger

logger = get_logger("providers.base")


class GeneratedMedia(BaseModel):
    """Binary output of an image or video generation call."""

    mime_type: str = Field(default="image/png", min_length=1)
    data: bytes = Field(min_length=1)

    @classmethod
    def from_base64(cls, payload: str, mime_type: str) -> "GeneratedMedia":
        return cls(mime_type=mime_type, data=base64.b64decode(payload))

    def to_data_uri(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class BaseDriver(abc.ABC):
    """Base class for drivers that handle text generation API calls"""

    def __init__(self, api_key: str, base_url: str, **kwargs):
        self.api_key = api_key
        self.base_url = base_url
        self.kwargs = kwargs

    @abc.abstractmethod
    async def generate_text(
        self,
        model: str,
        prompt: str,
        attachments: list[Attachment],
        options: GenerationOptions,
    ) -> str:
        """Generate a text reply, optionally grounded on image attachments"""


def extract_error_message(response: httpx.Response) -> str:
    """Pull a readable message out of a provider error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase

    if isinstance(payload, dict):
        error_obj = payload.get("error")
        if isinstance(error_obj, dict):
            message = error_obj.get("message") or error_obj.get("status")
            if message:
                return str(message)
        elif isinstance(error_obj, str) and error_obj:
            return error_obj
        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            return "; ".join(str(e) for e in errors)
        if payload.get("message"):
            return str(payload["message"])
    return str(payload)


class BaseProvider(abc.ABC):
    """Base class for provider families.

    A provider turns one candidate model call into either text or media and
    raises `ProviderError` subclasses with an explicit kind on failure.
    Subclasses override whichever of `generate_text` / `generate_media` the
    family supports.
    """

    name: str = "base"
    default_base_url: str = ""

    def __init__(
        self,
        settings: ProviderSettings,
        api_key: str | None = None,
        **kwargs: Any,
    ):
        self.settings = settings
        self.api_key_env = settings.api_key_env
        self.base_url = (settings.base_url or self.default_base_url).rstrip("/")
        self.timeout = settings.timeout
        self.kwargs = kwargs
        # Custom httpx transport, e.g. httpx.MockTransport in tests
        self.transport: httpx.AsyncBaseTransport | None = kwargs.get("transport")

        self.api_key = api_key
        if not self.api_key:
            raise ProviderConfigurationError(
                f"No API key provided (set {self.api_key_env})", self.name
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(base_url={self.base_url!r})"

    async def generate_text(
        self,
        model: str,
        prompt: str,
        attachments: list[Attachment],
        options: GenerationOptions,
    ) -> str:
        """Generate text for `prompt`; attachments turn it into image analysis."""
        raise ProviderInvalidRequestError(
            "Text generation is not supported", self.name, model=model
        )

    async def generate_media(
        self, model: str, prompt: str, media_type: MediaType = MediaType.IMAGE
    ) -> GeneratedMedia:
        """Generate an image (or video) for `prompt`."""
        raise ProviderInvalidRequestError(
            f"{media_type.value.capitalize()} generation is not supported",
            self.name,
            model=model,
        )

    async def _post(self, url: str, *, model: str, **kwargs: Any) -> httpx.Response:
        """POST to the provider and map transport and HTTP failures to ProviderErrors."""
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(url, **kwargs)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(
                f"Request timed out after {self.timeout}s", self.name, model=model
            ) from e
        except httpx.HTTPError as e:
            raise ProviderConnectionError(
                f"Connection failed: {e}", self.name, model=model
            ) from e

        if response.status_code >= 400:
            message = extract_error_message(response)
            logger.debug(
                f"{self.name} returned HTTP {response.status_code} for {model}: {message}"
            )
            raise error_from_status(response.status_code, message, self.name, model)

        return response
