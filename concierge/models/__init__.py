"""Pydantic models for API request/response and real-time events."""

from .agent import AgentReply
from .conversation import (
    CreateConversationRequest,
    ConversationResponse,
    ConversationListResponse,
    SaveMessageRequest,
    SavedMessageResponse,
    MessageResponse,
    ConversationMessagesResponse,
)
from .events import ClientCommand

__all__ = [
    "AgentReply",
    "CreateConversationRequest",
    "ConversationResponse",
    "ConversationListResponse",
    "SaveMessageRequest",
    "SavedMessageResponse",
    "MessageResponse",
    "ConversationMessagesResponse",
    "ClientCommand",
]
