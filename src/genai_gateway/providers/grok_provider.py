"""
x.ai Grok provider implementation
"""

from typing import Any

from genai_gateway.providers.base import BaseProvider
from genai_gateway.providers.compatible_drivers import OpenAIChatCompletionsDriver
from genai_gateway.providers.provider_manager import register_provider
from genai_gateway.routing.types import Attachment, GenerationOptions


@register_provider("grok")
class GrokProvider(BaseProvider):
    """Provider for the x.ai API (text only)"""

    default_base_url = "https://api.x.ai/v1"

    def __init__(self, settings, api_key: str | None = None, **kwargs: Any):
        super().__init__(settings, api_key=api_key, **kwargs)
        self.driver_instance = OpenAIChatCompletionsDriver(
            api_key=self.api_key,
            base_url=self.base_url,
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
