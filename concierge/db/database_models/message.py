"""Chat message database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional


@dataclass
class MessageDO:
    """Message data object - maps to messages table."""

    conversation_id: str
    is_from_user: bool
    message_text: str
    agent_type: str = ""
    timestamp: datetime = field(default_factory=datetime.utcnow)
    sequence_number: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)
    contains_sensitive_data: bool = False
    id: Optional[int] = None
