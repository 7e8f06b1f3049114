"""
Hugging Face Inference API provider implementation
"""

from genai_gateway.providers.base import BaseProvider, GeneratedMedia
from genai_gateway.providers.exceptions import ProviderResponseError
from genai_gateway.providers.provider_manager import register_provider
from genai_gateway.routing.types import MediaType
from genai_gateway.utils.logging import get_logger

logger = get_logger("providers.huggingface")

ACCEPT_HEADERS = {
    MediaType.IMAGE: "image/*",
    MediaType.VIDEO: "video/*",
}


@register_provider("huggingface")
class HuggingFaceProvider(BaseProvider):
    """Provider for text-to-image and text-to-video models on the Inference API.

    A cold model answers HTTP 503 while it loads; that maps to a
    model-unavailable error so routing moves on to the next model.
    """

    default_base_url = "https://api-inference.huggingface.co/models"

    async def generate_media(
        self, model: str, prompt: str, media_type: MediaType = MediaType.IMAGE
    ) -> GeneratedMedia:
        response = await self._post(
            f"{self.base_url}/{model}",
            model=model,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Accept": ACCEPT_HEADERS[media_type],
            },
            json={"inputs": prompt},
        )

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not content_type.startswith(f"{media_type.value}/"):
            logger.debug(f"Unexpected content type from {model}: {content_type!r}")
            raise ProviderResponseError(
                f"Expected {media_type.value} data, got {content_type or 'no content type'}",
                self.name,
                model=model,
            )
        if not response.content:
            raise ProviderResponseError("Empty response body", self.name, model=model)

        return GeneratedMedia(mime_type=content_type, data=response.content)
