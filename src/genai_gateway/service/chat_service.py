"""
Chat service: turns an inbound chat request into routed provider calls.

Mode inference, prompt framing and response shaping live here. Which model
answers is decided by the router; which provider family is tried next, when a
whole family fails, is decided by the routing chains in the config.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from genai_gateway.config.schemas import RoutingConfig
from genai_gateway.core.exceptions import (
    ConfigError,
    NoCandidatesAvailable,
    RequestValidationError,
)
from genai_gateway.providers.provider_manager import ProviderManager
from genai_gateway.routing.catalog import CandidateCatalog
from genai_gateway.routing.router import ProviderRouter
from genai_gateway.routing.types import (
    Attachment,
    Capability,
    GenerationOptions,
    MediaType,
    ProviderId,
    RequestTask,
    RouteResult,
)
from genai_gateway.utils.logging import get_logger

logger = get_logger("service.chat")

FAMILY_NAMES = {
    ProviderId.GEMINI: "Gemini",
    ProviderId.GROK: "Grok",
    ProviderId.HUGGINGFACE: "Hugging Face",
    ProviderId.STABILITY: "Stability",
}

ANALYZE_WITH_MESSAGE = (
    "Analyze this image carefully and: {message}\n\n"
    "Please provide detailed, accurate analysis."
)
DESCRIBE_IMAGE_PROMPT = (
    "Describe this image in comprehensive detail. Include:\n"
    "1. Main subjects and objects\n"
    "2. Colors and visual style  \n"
    "3. Composition and setting\n"
    "4. Any text or symbols visible\n"
    "5. Overall context and mood"
)
GENERATE_ANALYSIS_PROMPT = (
    "Analyze this image in detail and suggest how to create a new image based on "
    "it with this modification: {message}"
)
GENERATE_FROM_ANALYSIS = "{message}. Based on this analysis: {analysis}"

# Used when a fallback family can only chat
RESTATED_ANALYSIS = (
    "The user shared {count} image(s) that cannot be shown to you. "
    "Answer their request as helpfully as possible from the text alone, and "
    "say briefly that the image itself could not be viewed.\n\nRequest: {message}"
)
RESTATED_GENERATION = (
    "Image generation is unavailable right now. Describe in vivid detail the "
    "image the user asked for, so they can picture it.\n\nRequest: {message}"
)

FAILURE_TEMPLATES = {
    "chat": "❌ Chat failed: {detail}. Please try again.",
    "analyze": "❌ Image analysis failed: {detail}. Please try again with a clearer image.",
    "generate": (
        "❌ Image generation failed: {detail}. Please try again with a different prompt."
    ),
}

MEDIA_MARKERS = {
    MediaType.IMAGE: "IMAGE_GENERATED",
    MediaType.VIDEO: "VIDEO_GENERATED",
}

CHAT_OPTIONS = GenerationOptions(temperature=0.7, max_output_tokens=2048)
ANALYSIS_OPTIONS = GenerationOptions(temperature=0.4, max_output_tokens=2048)


class ChatMode(str, Enum):
    CHAT = "chat"
    ANALYZE = "analyze"
    GENERATE = "generate"


class ChatRequest(BaseModel):
    """Inbound request body of POST /api/chat."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    images: list[str] = Field(default_factory=list, description="Image data-URIs")
    mode: ChatMode | None = None
    media_type: MediaType = Field(default=MediaType.IMAGE, alias="mediaType")

    @field_validator("images", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return [] if v is None else v

    @classmethod
    def parse(cls, data: Any) -> "ChatRequest":
        """Validate a raw JSON body.

        Raises:
            RequestValidationError: If the body is not a valid chat request
        """
        if not isinstance(data, dict):
            raise RequestValidationError("Request body must be a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise RequestValidationError(f"Invalid request: {e}") from e

    def resolve_mode(self) -> ChatMode:
        """Work out what the request asks for.

        An explicit ``generate`` needs a message; otherwise images mean
        analysis and a bare message means chat.

        Raises:
            RequestValidationError: If there is neither a message nor an image
        """
        if self.mode is ChatMode.GENERATE and self.message:
            return ChatMode.GENERATE
        if self.images:
            return ChatMode.ANALYZE
        if self.message:
            return ChatMode.CHAT
        raise RequestValidationError("Message or image is required")

    def attachments(self) -> list[Attachment]:
        """Decode the image data-URIs.

        Raises:
            RequestValidationError: If an image is not a base64 data-URI
        """
        attachments = []
        for index, image in enumerate(self.images):
            try:
                attachments.append(Attachment.from_data_uri(image))
            except ValueError as e:
                raise RequestValidationError(f"Image #{index + 1}: {e}") from e
        return attachments


class ChatResponse(BaseModel):
    """Outbound response body; soft failures use success=False."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    text: str
    mode: ChatMode
    model_used: str | None = Field(default=None, alias="modelUsed")
    source: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ChainOutcome(BaseModel):
    """Result of walking a capability's provider chain."""

    result: RouteResult
    family: ProviderId
    fallback: bool = False
    restated: bool = False


class ChatService:
    """Handles chat, image-analysis and image-generation requests.

    Each family in a capability's chain gets its own `route` call on its own
    catalog partition. A family whose catalog lacks the capability but can
    chat receives a text-only restatement of the request instead.
    """

    def __init__(
        self,
        router: ProviderRouter,
        catalog: CandidateCatalog,
        provider_manager: ProviderManager,
        routing_config: RoutingConfig | None = None,
    ):
        self.router = router
        self.catalog = catalog
        self.provider_manager = provider_manager
        self.routing_config = routing_config or RoutingConfig()

    async def handle(self, request: ChatRequest) -> ChatResponse:
        """Serve one request.

        Raises:
            RequestValidationError: If the request is empty or an image is malformed
            ConfigError: If no provider family for the capability has an API key
            NoCandidatesAvailable: If no configured family offers a candidate
        """
        mode = request.resolve_mode()
        logger.info(
            "Chat request",
            extra={
                "mode": mode.value,
                "preview": (request.message or "")[:50],
                "images": len(request.images),
            },
        )

        if mode is ChatMode.GENERATE:
            return await self._generate(request)
        if mode is ChatMode.ANALYZE:
            return await self._analyze(request)
        return await self._chat(request)

    async def _chat(self, request: ChatRequest) -> ChatResponse:
        task = RequestTask(
            capability=Capability.TEXT_CHAT,
            prompt_text=request.message,
            options=CHAT_OPTIONS,
        )
        outcome = await self.route_chain(task, request.message or "")
        return self._respond(ChatMode.CHAT, outcome)

    async def _analyze(self, request: ChatRequest) -> ChatResponse:
        task = RequestTask(
            capability=Capability.IMAGE_ANALYSIS,
            prompt_text=self.analysis_prompt(request.message),
            attachments=request.attachments(),
            options=ANALYSIS_OPTIONS,
        )
        outcome = await self.route_chain(task, request.message or "")
        return self._respond(ChatMode.ANALYZE, outcome)

    async def _generate(self, request: ChatRequest) -> ChatResponse:
        message = request.message or ""
        prompt = message
        if request.images:
            analysis = await self._describe_images(request.attachments(), message)
            if analysis:
                prompt = GENERATE_FROM_ANALYSIS.format(message=message, analysis=analysis)

        task = RequestTask(
            capability=Capability.IMAGE_GENERATE,
            prompt_text=prompt,
            media_type=request.media_type,
        )
        outcome = await self.route_chain(task, message)
        return self._respond(ChatMode.GENERATE, outcome, media_type=request.media_type)

    async def _describe_images(
        self, attachments: list[Attachment], message: str
    ) -> str | None:
        """Analysis used to ground generation; None if it could not be produced."""
        prompt = (
            GENERATE_ANALYSIS_PROMPT.format(message=message)
            if message
            else DESCRIBE_IMAGE_PROMPT
        )
        task = RequestTask(
            capability=Capability.IMAGE_ANALYSIS,
            prompt_text=prompt,
            attachments=attachments,
            options=ANALYSIS_OPTIONS,
        )
        try:
            outcome = await self.route_chain(task, "", allow_restatement=False)
        except (ConfigError, NoCandidatesAvailable) as e:
            logger.warning(f"Skipping reference image analysis: {e}")
            return None

        if not outcome.result.succeeded:
            logger.warning(
                f"Reference image analysis failed, using the plain prompt: "
                f"{outcome.result.last_error}"
            )
            return None
        return outcome.result.payload

    @staticmethod
    def analysis_prompt(message: str | None) -> str:
        if message:
            return ANALYZE_WITH_MESSAGE.format(message=message)
        return DESCRIBE_IMAGE_PROMPT

    def _configured_chain(
        self, capability: Capability
    ) -> tuple[ProviderId, list[ProviderId]]:
        """The chain's primary family and the families that have an API key."""
        chain = self.routing_config.chain_for(capability) or [ProviderId.GEMINI]
        configured = [p for p in chain if self.provider_manager.is_configured(p)]
        if not configured:
            raise ConfigError(f"{FAMILY_NAMES[chain[0]]} API key not configured")
        return chain[0], configured

    def _task_for_family(
        self,
        task: RequestTask,
        partition: CandidateCatalog,
        user_message: str,
        allow_restatement: bool,
    ) -> RequestTask | None:
        media_type = task.media_type if task.capability is Capability.IMAGE_GENERATE else None
        if partition.supports(task.capability, media_type):
            return task
        if (
            not allow_restatement
            or partition.supports(task.capability)
            or task.capability is Capability.TEXT_CHAT
            or not partition.supports(Capability.TEXT_CHAT)
        ):
            return None

        if task.capability is Capability.IMAGE_ANALYSIS:
            prompt = RESTATED_ANALYSIS.format(
                count=len(task.attachments),
                message=user_message or "Describe the image.",
            )
        else:
            prompt = RESTATED_GENERATION.format(message=user_message)
        return RequestTask(
            capability=Capability.TEXT_CHAT, prompt_text=prompt, options=CHAT_OPTIONS
        )

    async def route_chain(
        self, task: RequestTask, user_message: str, *, allow_restatement: bool = True
    ) -> ChainOutcome:
        """Route `task` through each configured family of its chain in turn.

        Stops at the first family that succeeds. The outcome of the last family
        tried is returned when none does.

        Raises:
            ConfigError: If no family in the chain has an API key
            NoCandidatesAvailable: If no configured family can serve the task
        """
        outcome: ChainOutcome | None = None
        primary, families = self._configured_chain(task.capability)

        for family in families:
            partition = self.catalog.partition(family)
            family_task = self._task_for_family(
                task, partition, user_message, allow_restatement
            )
            if family_task is None:
                logger.debug(f"{family.value} cannot serve {task.capability.value}, skipping")
                continue

            if outcome is not None:
                logger.warning(
                    f"Falling back to {family.value} for {task.capability.value}"
                )
            result = await self.router.route(family_task, partition)
            outcome = ChainOutcome(
                result=result,
                family=family,
                fallback=family is not primary,
                restated=family_task is not task,
            )
            if result.succeeded:
                return outcome

        if outcome is None:
            raise NoCandidatesAvailable(task.capability.value)
        return outcome

    def _respond(
        self,
        mode: ChatMode,
        outcome: ChainOutcome,
        *,
        media_type: MediaType = MediaType.IMAGE,
    ) -> ChatResponse:
        result = outcome.result
        if not result.succeeded:
            detail = result.last_error or "all candidates failed"
            return ChatResponse(
                success=False,
                text=FAILURE_TEMPLATES[mode.value].format(detail=detail),
                mode=mode,
            )

        text = result.payload or ""
        if mode is ChatMode.GENERATE and not outcome.restated:
            text = f"{MEDIA_MARKERS[media_type]}:{text}"

        return ChatResponse(
            success=True,
            text=text,
            mode=mode,
            model_used=result.winning_candidate.model_name,
            source=outcome.family.value if outcome.fallback else None,
        )

    def provider_status(self) -> list[dict[str, Any]]:
        """Per-family key status and candidate counts."""
        statuses = []
        for family in ProviderId:
            partition = self.catalog.partition(family)
            statuses.append(
                {
                    "provider": family.value,
                    "name": FAMILY_NAMES[family],
                    "configured": self.provider_manager.is_configured(family),
                    "apiKeyEnv": self.provider_manager.api_key_env(family),
                    "models": {
                        capability.value: len(partition.for_capability(capability))
                        for capability in Capability
                    },
                }
            )
        return statuses
