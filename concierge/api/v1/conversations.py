"""Conversation REST API routes - V1."""

from fastapi import APIRouter, HTTPException, Depends, Query, Request

from ...models.conversation import (
    ConversationResponse,
    ConversationListResponse,
    CreateConversationRequest,
    SaveMessageRequest,
    SavedMessageResponse,
    MessageResponse,
    ConversationMessagesResponse
)
from ...db.database_models import ConversationDO, MessageDO
from ...exceptions import ConversationNotFoundError, PersistenceError
from ...services import ConciergeStore
from ...utils.logger import get_app_logger
from ...utils.text import sanitize_input, contains_sensitive_data

router = APIRouter(prefix="/api/v1/conversations", tags=["Conversations"])
logger = get_app_logger()

# Conversation store (set by main.py)
store: ConciergeStore = None


def get_store() -> ConciergeStore:
    """Dependency to get the conversation store."""
    if store is None:
        raise HTTPException(status_code=500, detail="Conversation store not initialized")
    return store


def _to_response(conv: ConversationDO) -> ConversationResponse:
    """Convert ConversationDO to ConversationResponse."""
    return ConversationResponse(
        conversation_id=conv.id,
        session_id=conv.session_id,
        user_id=conv.user_id,
        start_time=conv.start_time,
        end_time=conv.end_time,
        is_active=conv.is_active
    )


def _to_message_response(message: MessageDO) -> MessageResponse:
    """Convert MessageDO to MessageResponse."""
    return MessageResponse(
        message_id=message.id,
        conversation_id=message.conversation_id,
        is_from_user=message.is_from_user,
        message_text=message.message_text,
        agent_type=message.agent_type or "",
        timestamp=message.timestamp,
        sequence_number=message.sequence_number
    )


@router.post("", response_model=ConversationResponse, status_code=201)
async def create_conversation(
    body: CreateConversationRequest,
    request: Request,
    conv_store: ConciergeStore = Depends(get_store)
):
    """Create a new conversation."""
    try:
        conversation = await conv_store.create_conversation(
            session_id=body.session_id,
            user_id=body.user_id,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent")
        )
    except PersistenceError as e:
        logger.error(f"Error creating conversation: {e}")
        raise HTTPException(status_code=500, detail="Failed to create conversation")

    logger.info(f"Created conversation {conversation.id} for session {conversation.session_id}")
    return _to_response(conversation)


@router.get("/active", response_model=ConversationListResponse)
async def list_active_conversations(
    limit: int = Query(20, ge=1, le=100, description="Maximum number of conversations"),
    conv_store: ConciergeStore = Depends(get_store)
):
    """List active conversations, newest first."""
    conversations = await conv_store.list_active_conversations(limit)
    return ConversationListResponse(
        conversations=[_to_response(c) for c in conversations],
        count=len(conversations)
    )


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: str,
    conv_store: ConciergeStore = Depends(get_store)
):
    """Get conversation details."""
    conversation = await conv_store.get_conversation(conversation_id)

    if not conversation:
        raise HTTPException(status_code=404, detail=f"Conversation not found: {conversation_id}")

    return _to_response(conversation)


@router.get("/{conversation_id}/messages", response_model=ConversationMessagesResponse)
async def get_conversation_messages(
    conversation_id: str,
    limit: int = Query(50, ge=1, le=500, description="Maximum number of messages"),
    conv_store: ConciergeStore = Depends(get_store)
):
    """Get conversation messages ordered by sequence number."""
    messages = await conv_store.list_messages(conversation_id, limit)
    return ConversationMessagesResponse(
        conversation_id=conversation_id,
        message_count=len(messages),
        messages=[_to_message_response(m) for m in messages]
    )


@router.post("/{conversation_id}/messages", response_model=SavedMessageResponse, status_code=201)
async def save_message(
    conversation_id: str,
    body: SaveMessageRequest,
    conv_store: ConciergeStore = Depends(get_store)
):
    """Append a message to an existing conversation."""
    if await conv_store.get_conversation(conversation_id) is None:
        raise HTTPException(status_code=404, detail=f"Conversation not found: {conversation_id}")

    text = sanitize_input(body.message_text)
    if not text:
        raise HTTPException(status_code=400, detail="Message text is empty")

    try:
        sequence_number = await conv_store.append_message(
            conversation_id,
            from_user=body.is_from_user,
            text=text,
            agent_type=body.agent_type or "",
            metadata=body.metadata,
            sensitive=body.contains_sensitive_data or contains_sensitive_data(text)
        )
    except PersistenceError as e:
        logger.error(f"Error saving message for conversation {conversation_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save message")

    return SavedMessageResponse(conversation_id=conversation_id, sequence_number=sequence_number)


@router.put("/{conversation_id}/end", response_model=ConversationResponse)
async def end_conversation(
    conversation_id: str,
    conv_store: ConciergeStore = Depends(get_store)
):
    """Mark a conversation as ended."""
    try:
        conversation = await conv_store.end_conversation(conversation_id)
    except ConversationNotFoundError:
        raise HTTPException(status_code=404, detail=f"Conversation not found: {conversation_id}")
    except PersistenceError as e:
        logger.error(f"Error ending conversation {conversation_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to end conversation")

    logger.info(f"Ended conversation {conversation_id}")
    return _to_response(conversation)
