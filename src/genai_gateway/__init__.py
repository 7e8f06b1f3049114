"""Generative-AI chat gateway with multi-provider model fallback."""

__version__ = "0.1.0"
