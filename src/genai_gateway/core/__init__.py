"""Core functionality: application context, bootstrap and error handling.

`bootstrap` lives in `genai_gateway.core.bootstrap`; it is not re-exported
here because it imports every other subsystem.
"""

from .app_context import AppContext

__all__ = ["AppContext"]
