"""
Google Gemini provider implementation
"""

import binascii
from typing import Any

from genai_gateway.providers.base import BaseProvider, GeneratedMedia
from genai_gateway.providers.compatible_drivers import OpenAIChatCompletionsDriver
from genai_gateway.providers.exceptions import (
    ProviderInvalidRequestError,
    ProviderResponseError,
)
from genai_gateway.providers.provider_manager import register_provider
from genai_gateway.routing.types import Attachment, GenerationOptions, MediaType

NATIVE_API_URL = "https://generativelanguage.googleapis.com/v1beta"


@register_provider("gemini")
class GeminiProvider(BaseProvider):
    """Provider for Google Gemini.

    Chat and image analysis go through Gemini's OpenAI-compatible endpoint.
    Image generation uses the native generateContent call, which is the only
    one that returns inline image data.
    """

    default_base_url = "https://generativelanguage.googleapis.com/v1beta/openai/"

    def __init__(self, settings, api_key: str | None = None, **kwargs: Any):
        super().__init__(settings, api_key=api_key, **kwargs)
        self.native_url = kwargs.get("native_url", NATIVE_API_URL).rstrip("/")
        self.driver_instance = OpenAIChatCompletionsDriver(
            api_key=self.api_key,
            base_url=f"{self.base_url}/",
            provider_name=self.name,
            timeout=self.timeout,
        )

    async def generate_text(
        self,
        model: str,
        prompt: str,
        attachments: list[Attachment],
        options: GenerationOptions,
    ) -> str:
        return await self.driver_instance.generate_text(
            model, prompt, attachments, options
        )

    async def generate_media(
        self, model: str, prompt: str, media_type: MediaType = MediaType.IMAGE
    ) -> GeneratedMedia:
        if media_type is not MediaType.IMAGE:
            raise ProviderInvalidRequestError(
                f"{media_type.value} generation is not supported", self.name, model=model
            )

        response = await self._post(
            f"{self.native_url}/models/{model}:generateContent",
            model=model,
            params={"key": self.api_key},
            headers={"Content-Type": "application/json"},
            json={
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"responseModalities": ["IMAGE", "TEXT"]},
            },
        )
        try:
            return self._extract_image(response.json(), model)
        except (ValueError, binascii.Error, AttributeError) as e:
            raise ProviderResponseError(
                f"Unexpected image response: {e}", self.name, model=model
            ) from e

    def _extract_image(self, payload: dict[str, Any], model: str) -> GeneratedMedia:
        """Return the first inline image among the response candidates."""
        for candidate in payload.get("candidates") or []:
            parts = (candidate.get("content") or {}).get("parts") or []
            for part in parts:
                inline_data = part.get("inlineData") or part.get("inline_data")
                if inline_data and inline_data.get("data"):
                    mime = (
                        inline_data.get("mimeType")
                        or inline_data.get("mime_type")
                        or "image/png"
                    )
                    return GeneratedMedia.from_base64(inline_data["data"], mime)

        feedback = payload.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            raise ProviderInvalidRequestError(
                f"Prompt blocked by safety filter ({feedback['blockReason']})",
                self.name,
                model=model,
            )
        raise ProviderResponseError("No image data received", self.name, model=model)
