import pytest

from genai_gateway.core.exceptions import ConfigError
from genai_gateway.routing.catalog import CandidateCatalog
from genai_gateway.routing.types import Capability, MediaType, ProviderId


def test_from_config_preserves_declaration_order():
    catalog = CandidateCatalog.from_config(
        [
            {"provider_id": "gemini", "model_name": "a", "capability": "text-chat", "priority": 2},
            {"provider_id": "grok", "model_name": "b", "capability": "text-chat", "priority": 1},
        ]
    )

    assert [c.label for c in catalog] == ["gemini:a", "grok:b"]
    assert len(catalog) == 2


def test_from_config_rejects_invalid_entry():
    with pytest.raises(ConfigError, match="Invalid catalog entry #1"):
        CandidateCatalog.from_config(
            [
                {"provider_id": "gemini", "model_name": "a", "capability": "text-chat"},
                {"provider_id": "openai", "model_name": "b", "capability": "text-chat"},
            ]
        )


def test_for_capability_sorts_by_priority(make_candidate):
    catalog = CandidateCatalog(
        [
            make_candidate("late", priority=3),
            make_candidate("gen", capability=Capability.IMAGE_GENERATE),
            make_candidate("early", priority=1),
        ]
    )

    assert [c.model_name for c in catalog.for_capability(Capability.TEXT_CHAT)] == [
        "early",
        "late",
    ]


def test_for_capability_filters_media_type(make_candidate):
    catalog = CandidateCatalog(
        [
            make_candidate("img", capability=Capability.IMAGE_GENERATE),
            make_candidate(
                "vid", capability=Capability.IMAGE_GENERATE, media_type=MediaType.VIDEO
            ),
        ]
    )

    videos = catalog.for_capability(Capability.IMAGE_GENERATE, MediaType.VIDEO)

    assert [c.model_name for c in videos] == ["vid"]
    assert catalog.supports(Capability.IMAGE_GENERATE, MediaType.IMAGE)
    assert not catalog.supports(Capability.IMAGE_ANALYSIS)


def test_partition_and_models(make_candidate):
    catalog = CandidateCatalog(
        [
            make_candidate("g1"),
            make_candidate("x1", provider=ProviderId.GROK),
            make_candidate("g1", capability=Capability.IMAGE_ANALYSIS),
        ]
    )

    gemini = catalog.partition(ProviderId.GEMINI)

    assert len(gemini) == 2
    assert catalog.providers() == [ProviderId.GEMINI, ProviderId.GROK]
    assert catalog.models_for(ProviderId.GEMINI) == ["g1"]
    assert not catalog.partition(ProviderId.STABILITY)
