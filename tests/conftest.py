from __future__ import annotations

import logging
import sys
from pathlib import Path

# Add project src/ to sys.path for imports like `genai_gateway.*`
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest

from genai_gateway.routing.types import Candidate, Capability, ProviderId

PROVIDER_KEY_VARS = (
    "GEMINI_API_KEY",
    "XAI_API_KEY",
    "HUGGINGFACE_API_KEY",
    "STABILITY_API_KEY",
)

PNG_DATA_URI = "data:image/png;base64,iVBORw0KGgo="


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real API keys and GENAI_GW_* overrides out of every test."""
    import os

    for name in PROVIDER_KEY_VARS:
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.startswith("GENAI_GW_"):
            monkeypatch.delenv(name, raising=False)
    yield
    logging.getLogger().handlers.clear()


@pytest.fixture
def png_data_uri() -> str:
    return PNG_DATA_URI


@pytest.fixture
def make_candidate():
    """Factory for catalog candidates."""

    def _make(
        model: str,
        priority: int = 1,
        capability: Capability = Capability.TEXT_CHAT,
        provider: ProviderId = ProviderId.GEMINI,
        **kwargs,
    ) -> Candidate:
        return Candidate(
            provider_id=provider,
            model_name=model,
            capability=capability,
            priority=priority,
            **kwargs,
        )

    return _make
