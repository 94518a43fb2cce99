"""Repository layer for data access."""

from .conversation import ConversationRepository
from .message import MessageRepository
from .interaction import InteractionRepository

__all__ = ["ConversationRepository", "MessageRepository", "InteractionRepository"]
