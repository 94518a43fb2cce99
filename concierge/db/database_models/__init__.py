"""Database models (Data Objects) - map to database tables."""

from .conversation import ConversationDO
from .message import MessageDO
from .interaction import InteractionDO

__all__ = ["ConversationDO", "MessageDO", "InteractionDO"]
