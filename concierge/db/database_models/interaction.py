"""Agent interaction database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class InteractionDO:
    """Interaction data object - maps to agent_interactions table (append-only)."""

    conversation_id: str
    agent_type: str
    action: str
    success: bool
    duration_ms: int = 0
    timestamp: datetime = field(default_factory=datetime.utcnow)
    error_message: Optional[str] = None
    action_context: Optional[str] = None
    intent_confidence: float = 0.0
    id: Optional[int] = None
