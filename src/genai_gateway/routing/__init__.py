"""
Candidate routing.

The router itself lives in `genai_gateway.routing.router`; it depends on the
provider exceptions, which in turn depend on the types exported here.
"""

from .catalog import CandidateCatalog
from .types import (
    Attachment,
    AttemptOutcome,
    AttemptRecord,
    Candidate,
    Capability,
    ErrorKind,
    GenerationOptions,
    MediaType,
    ProviderId,
    RequestTask,
    RouteResult,
)

__all__ = [
    "Attachment",
    "AttemptOutcome",
    "AttemptRecord",
    "Candidate",
    "CandidateCatalog",
    "Capability",
    "ErrorKind",
    "GenerationOptions",
    "MediaType",
    "ProviderId",
    "RequestTask",
    "RouteResult",
]
