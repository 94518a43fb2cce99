"""WebSocket command model and real-time event names."""

from typing import Optional
from pydantic import BaseModel, Field


# Events emitted by the connection hub
CONNECTION_ESTABLISHED = "connection_established"
CONVERSATION_JOINED = "conversation_joined"
CONVERSATION_LEFT = "conversation_left"
MESSAGE_RECEIVED = "message_received"
AGENT_TYPING = "agent_typing"
AGENT_MESSAGE = "agent_message"
MESSAGE_ERROR = "message_error"
USER_TYPING = "user_typing"
CONVERSATION_STATUS = "conversation_status"


class ClientCommand(BaseModel):
    """Inbound WebSocket command from a chat client."""

    type: str = Field(description="join_conversation, leave_conversation, send_message, typing, get_status or ping")
    conversation_id: Optional[str] = Field(None, description="Target conversation ID")
    message: Optional[str] = Field(None, description="Guest message text (send_message)")
    message_id: Optional[str] = Field(None, description="Client message ID (send_message)")
    user_id: Optional[str] = Field(None, description="Guest identifier (join_conversation)")
    is_typing: bool = Field(default=False, description="Typing state (typing)")
