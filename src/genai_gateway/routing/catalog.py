"""Static candidate catalog, loaded once at startup and read-only afterwards."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import ValidationError

from genai_gateway.core.exceptions import ConfigError
from genai_gateway.routing.types import Candidate, Capability, MediaType, ProviderId


class CandidateCatalog:
    """Ordered, immutable collection of candidates.

    Declaration order is preserved so priority ties resolve the same way on
    every call.
    """

    def __init__(self, candidates: Iterable[Candidate] = ()) -> None:
        self._candidates: tuple[Candidate, ...] = tuple(candidates)

    @classmethod
    def from_config(cls, entries: Iterable[dict[str, Any] | Candidate]) -> CandidateCatalog:
        """Build a catalog from config entries.

        Raises:
            ConfigError: If an entry does not describe a valid candidate
        """
        candidates = []
        for index, entry in enumerate(entries):
            if isinstance(entry, Candidate):
                candidates.append(entry)
                continue
            try:
                candidates.append(Candidate.model_validate(entry))
            except ValidationError as e:
                raise ConfigError(f"Invalid catalog entry #{index}: {e}") from e
        return cls(candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)

    def __len__(self) -> int:
        return len(self._candidates)

    def __bool__(self) -> bool:
        return bool(self._candidates)

    def __repr__(self) -> str:
        return f"CandidateCatalog({[c.label for c in self._candidates]})"

    @property
    def candidates(self) -> tuple[Candidate, ...]:
        return self._candidates

    def for_capability(
        self, capability: Capability, media_type: MediaType | None = None
    ) -> list[Candidate]:
        """Candidates serving `capability`, lowest priority first (stable)."""
        matching = [
            c
            for c in self._candidates
            if c.capability is capability
            and (media_type is None or c.media_type is media_type)
        ]
        return sorted(matching, key=lambda c: c.priority)

    def partition(self, provider_id: ProviderId) -> CandidateCatalog:
        """Sub-catalog with a single provider family."""
        return CandidateCatalog(c for c in self._candidates if c.provider_id is provider_id)

    def providers(self) -> list[ProviderId]:
        """Provider families in declaration order."""
        seen: list[ProviderId] = []
        for candidate in self._candidates:
            if candidate.provider_id not in seen:
                seen.append(candidate.provider_id)
        return seen

    def supports(self, capability: Capability, media_type: MediaType | None = None) -> bool:
        return bool(self.for_capability(capability, media_type))

    def models_for(self, provider_id: ProviderId) -> list[str]:
        models: list[str] = []
        for candidate in self.partition(provider_id):
            if candidate.model_name not in models:
                models.append(candidate.model_name)
        return models
