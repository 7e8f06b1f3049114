"""
Stability AI provider implementation
"""

from genai_gateway.providers.base import BaseProvider, GeneratedMedia
from genai_gateway.providers.exceptions import (
    ProviderInvalidRequestError,
    ProviderResponseError,
)
from genai_gateway.providers.provider_manager import register_provider
from genai_gateway.routing.types import MediaType


@register_provider("stability")
class StabilityProvider(BaseProvider):
    """Provider for Stability's stable-image generate endpoints.

    Model names map to endpoints: ``core`` and ``ultra`` are endpoints of
    their own, any ``sd3*`` name is sent to the ``sd3`` endpoint as its model.
    """

    default_base_url = "https://api.stability.ai/v2beta/stable-image/generate"
    output_format = "png"

    def _endpoint_for(self, model: str) -> tuple[str, dict[str, str]]:
        if model.startswith("sd3"):
            return f"{self.base_url}/sd3", {"model": model}
        return f"{self.base_url}/{model}", {}

    async def generate_media(
        self, model: str, prompt: str, media_type: MediaType = MediaType.IMAGE
    ) -> GeneratedMedia:
        if media_type is not MediaType.IMAGE:
            raise ProviderInvalidRequestError(
                f"{media_type.value} generation is not supported", self.name, model=model
            )

        url, extra_fields = self._endpoint_for(model)
        response = await self._post(
            url,
            model=model,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Accept": "image/*",
            },
            # The API only accepts multipart bodies
            files={"none": ""},
            data={"prompt": prompt, "output_format": self.output_format, **extra_fields},
        )

        if not response.content:
            raise ProviderResponseError("Empty response body", self.name, model=model)
        mime_type = response.headers.get("content-type", f"image/{self.output_format}")
        return GeneratedMedia(mime_type=mime_type.split(";")[0], data=response.content)
