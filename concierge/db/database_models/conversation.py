"""Conversation database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class ConversationDO:
    """Conversation data object - maps to conversations table."""

    id: str
    session_id: str
    user_id: Optional[str] = None
    start_time: datetime = field(default_factory=datetime.utcnow)
    end_time: Optional[datetime] = None
    is_active: bool = True
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
