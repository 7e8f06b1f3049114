"""CLI commands for the gateway."""

from . import provider, run, serve

__all__ = ["provider", "run", "serve"]
