"""Conversation API models."""

from datetime import datetime
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field


class CreateConversationRequest(BaseModel):
    """Request model for creating a conversation."""

    session_id: Optional[str] = Field(None, description="Client session ID (generated when omitted)", max_length=100)
    user_id: Optional[str] = Field(None, description="Optional guest identifier", max_length=100)


class ConversationResponse(BaseModel):
    """Response model for conversation information."""

    conversation_id: str = Field(description="Conversation ID")
    session_id: str = Field(description="Client session ID")
    user_id: Optional[str] = Field(None, description="Guest identifier")
    start_time: datetime = Field(description="Start timestamp")
    end_time: Optional[datetime] = Field(None, description="End timestamp, None while active")
    is_active: bool = Field(description="Whether the conversation is active")


class ConversationListResponse(BaseModel):
    """Response model for listing conversations."""

    conversations: List[ConversationResponse] = Field(description="List of conversations")
    count: int = Field(description="Number of conversations returned")


class SaveMessageRequest(BaseModel):
    """Request model for saving a message."""

    is_from_user: bool = Field(description="True for guest messages, False for agent replies")
    message_text: str = Field(description="Message content", min_length=1)
    agent_type: Optional[str] = Field(None, description="Agent type for agent replies")
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Optional metadata")
    contains_sensitive_data: bool = Field(default=False, description="Sensitive data flag")


class SavedMessageResponse(BaseModel):
    """Response model for a saved message."""

    conversation_id: str = Field(description="Conversation ID")
    sequence_number: int = Field(description="Assigned sequence number")


class MessageResponse(BaseModel):
    """Response model for a single message."""

    message_id: Optional[int] = Field(None, description="Message ID")
    conversation_id: str = Field(description="Conversation ID")
    is_from_user: bool = Field(description="True for guest messages")
    message_text: str = Field(description="Message content")
    agent_type: str = Field(default="", description="Agent type, empty for guest messages")
    timestamp: datetime = Field(description="Message timestamp")
    sequence_number: int = Field(description="Per-conversation sequence number")


class ConversationMessagesResponse(BaseModel):
    """Response model for conversation messages."""

    conversation_id: str = Field(description="Conversation ID")
    message_count: int = Field(description="Number of messages returned")
    messages: List[MessageResponse] = Field(description="Messages ordered by sequence number")
