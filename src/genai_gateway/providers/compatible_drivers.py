"""
Compatible drivers for OpenAI-style chat APIs

Gemini and x.ai both expose an OpenAI-compatible chat.completions endpoint,
so one driver built on the openai library serves text chat and image
analysis for both families.
"""

from typing import Any, NoReturn

import openai
from openai import AsyncOpenAI

from genai_gateway.providers.base import BaseDriver
from genai_gateway.providers.exceptions import (
    ProviderConnectionError,
    ProviderError,
    ProviderResponseError,
    ProviderTimeoutError,
    error_from_status,
)
from genai_gateway.routing.types import Attachment, GenerationOptions
from genai_gateway.utils.logging import get_logger

logger = get_logger("providers.compatible_drivers")


class OpenAIChatCompletionsDriver(BaseDriver):
    """Driver for OpenAI-compatible chat.completions API using the openai library"""

    def __init__(self, api_key: str, base_url: str, **kwargs):
        super().__init__(api_key, base_url, **kwargs)
        self.provider_name = kwargs.get("provider_name")
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=kwargs.get("timeout", 60.0),
            max_retries=0,
        )

    def build_messages(
        self, prompt: str, attachments: list[Attachment]
    ) -> list[dict[str, Any]]:
        """Build a single user message; images become image_url content parts."""
        if not attachments:
            return [{"role": "user", "content": prompt}]

        content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        for attachment in attachments:
            content.append(
                {
                    "type": "image_url",
                    "image_url": {"url": attachment.to_data_uri()},
                }
            )
        return [{"role": "user", "content": content}]

    async def generate_text(
        self,
        model: str,
        prompt: str,
        attachments: list[Attachment],
        options: GenerationOptions,
    ) -> str:
        """Generate using OpenAI chat.completions API"""
        payload = {
            "model": model,
            "messages": self.build_messages(prompt, attachments),
            "temperature": options.temperature,
            "max_tokens": options.max_output_tokens,
        }

        try:
            response = await self.client.chat.completions.create(**payload)
        except Exception as e:
            self._handle_error(e, model)

        logger.debug("Response: %s", response)
        return self._parse_response(response, model)

    def _parse_response(self, response: Any, model: str) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise ProviderResponseError(
                "Response contained no choices", self.provider_name, model=model
            )

        content = getattr(choices[0].message, "content", None)
        if not content or not content.strip():
            finish_reason = getattr(choices[0], "finish_reason", None)
            raise ProviderResponseError(
                f"Empty response (finish_reason={finish_reason})",
                self.provider_name,
                model=model,
            )
        return content

    def _extract_status_code(self, e: Exception) -> int | None:
        status_code = getattr(e, "status_code", None)
        if status_code is not None:
            return int(status_code)
        response = getattr(e, "response", None)
        if response is not None and getattr(response, "status_code", None) is not None:
            return int(response.status_code)
        return None

    def _error_message(self, e: Exception) -> str:
        body = getattr(e, "body", None)
        if isinstance(body, dict):
            error_obj = body.get("error", body)
            if isinstance(error_obj, dict) and error_obj.get("message"):
                return str(error_obj["message"])
        return getattr(e, "message", None) or str(e)

    def _handle_error(self, e: Exception, model: str) -> NoReturn:
        """Translate openai exceptions into structured ProviderErrors"""
        logger.debug(f"Error type: {type(e).__module__}.{type(e).__name__}")

        if isinstance(e, openai.APITimeoutError):
            raise ProviderTimeoutError(
                "Request timed out", self.provider_name, model=model
            ) from e
        if isinstance(e, openai.APIConnectionError):
            raise ProviderConnectionError(
                f"Connection failed: {e}", self.provider_name, model=model
            ) from e

        status_code = self._extract_status_code(e)
        if status_code is not None:
            raise error_from_status(
                status_code, self._error_message(e), self.provider_name, model
            ) from e

        if isinstance(e, ProviderError):
            raise e

        # No status: keep the raw text so routing can still inspect it
        logger.error(f"API error in {self.provider_name}: {e}", exc_info=True)
        raise ProviderError(
            f"API error: {e}", self.provider_name, model=model
        ) from e
