"""
Provider routing: sequential fallback over a priority-ordered catalog.
"""

import asyncio
import itertools
from collections.abc import Awaitable, Callable

from genai_gateway.core.exceptions import NoCandidatesAvailable
from genai_gateway.providers.exceptions import ProviderError
from genai_gateway.routing.catalog import CandidateCatalog
from genai_gateway.routing.classifier import classify, resolve_kind
from genai_gateway.routing.types import (
    AttemptOutcome,
    AttemptRecord,
    Candidate,
    Capability,
    RequestTask,
    RouteResult,
)
from genai_gateway.utils.logging import get_logger

logger = get_logger("routing.router")

CandidateInvoker = Callable[[Candidate, RequestTask], Awaitable[str]]

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_RETRY_DELAY = 1.0


class ProviderRouter:
    """Routes a task through candidates until one succeeds or routing must stop.

    The router holds no per-request state. Everything that changes during a
    call (attempt history, attempted set, ordinal counter) lives inside
    `route`, so concurrent requests never see each other's failures.
    """

    def __init__(
        self,
        invoker: CandidateInvoker,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if retry_delay < 0:
            raise ValueError("retry_delay cannot be negative")
        self.invoker = invoker
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay

    def _ordered_candidates(
        self, task: RequestTask, catalog: CandidateCatalog
    ) -> list[Candidate]:
        media_type = task.media_type if task.capability is Capability.IMAGE_GENERATE else None
        candidates = catalog.for_capability(task.capability, media_type)
        if not candidates:
            raise NoCandidatesAvailable(task.capability.value)
        return candidates

    async def route(self, task: RequestTask, catalog: CandidateCatalog) -> RouteResult:
        """Resolve `task` against `catalog`.

        Args:
            task: The work to perform
            catalog: Candidates to choose from; filtered by the task's capability

        Returns:
            RouteResult with the full attempt history

        Raises:
            NoCandidatesAvailable: If no candidate serves the task's capability
        """
        candidates = self._ordered_candidates(task, catalog)

        attempts: list[AttemptRecord] = []
        attempted: set[Candidate] = set()
        ordinals = itertools.count()

        for candidate in candidates:
            if candidate in attempted:
                continue
            if len(attempts) >= self.max_attempts:
                logger.warning(
                    "Attempt cap reached, giving up",
                    extra={"capability": task.capability.value, "cap": self.max_attempts},
                )
                break
            if attempts and self.retry_delay:
                await asyncio.sleep(self.retry_delay)

            attempted.add(candidate)
            ordinal = next(ordinals)
            logger.debug(
                "Attempting candidate",
                extra={"candidate": candidate.label, "ordinal": ordinal},
            )

            try:
                payload = await self.invoker(candidate, task)
            except ProviderError as e:
                outcome = classify(e)
                attempts.append(
                    AttemptRecord(
                        candidate=candidate,
                        outcome=outcome,
                        error_detail=e.detail,
                        error_kind=resolve_kind(e),
                        timestamp_ordinal=ordinal,
                    )
                )
                if outcome is AttemptOutcome.FATAL_FAILURE:
                    logger.error(
                        f"Candidate {candidate.label} failed fatally, stopping: {e.detail}"
                    )
                    break
                logger.warning(
                    f"Candidate {candidate.label} unavailable, switching model: {e.detail}"
                )
                continue

            attempts.append(
                AttemptRecord(
                    candidate=candidate,
                    outcome=AttemptOutcome.SUCCESS,
                    timestamp_ordinal=ordinal,
                )
            )
            logger.info(
                f"Routed {task.capability.value} to {candidate.label}",
                extra={"attempts": len(attempts)},
            )
            return RouteResult(
                succeeded=True,
                payload=payload,
                winning_candidate=candidate,
                attempts=attempts,
            )

        logger.error(
            f"Routing exhausted for {task.capability.value} after {len(attempts)} attempt(s)"
        )
        return RouteResult(succeeded=False, attempts=attempts)
