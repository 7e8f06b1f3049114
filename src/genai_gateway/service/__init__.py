"""Request handling on top of the provider router."""

from .chat_service import ChatMode, ChatRequest, ChatResponse, ChatService

__all__ = ["ChatMode", "ChatRequest", "ChatResponse", "ChatService"]
