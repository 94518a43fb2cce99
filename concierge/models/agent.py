"""Agent reply model returned by the orchestrator."""

from datetime import datetime
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field


class AgentReply(BaseModel):
    """Terminal, well-formed result of one orchestration pass."""

    agent_type: str = Field(description="Agent that produced the reply")
    message: str = Field(description="Reply text shown to the guest")
    intent: str = Field(description="Classified intent, or 'error' for a failed pass")
    confidence: float = Field(ge=0.0, le=1.0, description="Intent confidence score")
    conversation_id: str = Field(description="Conversation ID")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Reply timestamp")
    has_error: bool = Field(default=False, description="Whether the pass failed")
    error_message: Optional[str] = Field(None, description="Short caller-facing error description")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional reply metadata")
