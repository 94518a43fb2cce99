"""Conversation context: a bounded view of recent history, rebuilt every pass."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from ..db.database_models import ConversationDO, MessageDO, InteractionDO
from ..utils.logger import get_app_logger
from ..utils.text import contains_sensitive_data, extract_entities
from .store import ConciergeStore


@dataclass
class ConversationContext:
    """Short-lived view of a conversation, never cached across passes."""

    conversation_id: str
    session_id: Optional[str] = None
    user_id: Optional[str] = None
    start_time: Optional[datetime] = None
    last_agent_type: Optional[str] = None
    recent_messages: List[MessageDO] = field(default_factory=list)
    recent_interactions: List[InteractionDO] = field(default_factory=list)
    message_count: int = 0
    # {entity kind: values the guest mentioned}, collected from stored message metadata
    user_preferences: Dict[str, List[Any]] = field(default_factory=dict)

    @property
    def has_history(self) -> bool:
        return len(self.recent_messages) > 0


class ConversationContextStore:
    """Builds ConversationContext values from persisted messages and interactions."""

    def __init__(
        self,
        store: ConciergeStore,
        recent_messages: int = 5,
        recent_interactions: int = 3
    ):
        self.store = store
        self.recent_messages = recent_messages
        self.recent_interactions = recent_interactions
        self.logger = get_app_logger()

    async def load(self, conversation_id: str) -> ConversationContext:
        """
        Load the context for a conversation.

        Never raises: an unknown conversation or a failing store both yield
        an empty context, so the pass continues without history.

        Args:
            conversation_id: Conversation ID

        Returns:
            ConversationContext with recent messages in chronological order
        """
        try:
            conversation: Optional[ConversationDO] = await self.store.get_conversation(conversation_id)
            if conversation is None:
                self.logger.debug(f"No stored conversation {conversation_id}, using empty context")
                return ConversationContext(conversation_id=conversation_id)

            messages = await self.store.list_messages(conversation_id, self.recent_messages, ascending=False)
            messages.reverse()
            interactions = await self.store.list_recent_interactions(conversation_id, self.recent_interactions)
            message_count = await self.store.count_messages(conversation_id)
        except Exception as e:
            self.logger.warning(f"Error getting conversation context for {conversation_id}: {e}")
            return ConversationContext(conversation_id=conversation_id)

        return ConversationContext(
            conversation_id=conversation_id,
            session_id=conversation.session_id,
            user_id=conversation.user_id,
            start_time=conversation.start_time,
            last_agent_type=self._last_agent_type(interactions, messages),
            recent_messages=messages,
            recent_interactions=interactions,
            message_count=message_count,
            user_preferences=self._guest_details(messages)
        )

    @staticmethod
    def _guest_details(messages: List[MessageDO]) -> Dict[str, List[Any]]:
        """Entities the guest mentioned in recent messages, e.g. party size or dates."""
        details: Dict[str, List[Any]] = {}
        for message in messages:
            if not message.is_from_user:
                continue
            entities = (message.metadata or {}).get("entities") or {}
            for key, values in entities.items():
                bucket = details.setdefault(key, [])
                bucket.extend(value for value in values if value not in bucket)
        return details

    @staticmethod
    def _last_agent_type(
        interactions: List[InteractionDO],
        messages: List[MessageDO]
    ) -> Optional[str]:
        if interactions:
            return interactions[0].agent_type or None
        for message in reversed(messages):
            if not message.is_from_user and message.agent_type:
                return message.agent_type
        return None

    async def ensure_conversation(
        self,
        conversation_id: str,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> bool:
        """Create the conversation on first contact. Returns True when it was created."""
        _, created = await self.store.ensure_conversation(conversation_id, session_id, user_id)
        if created:
            self.logger.info(f"Conversation {conversation_id} created on first contact")
        return created

    async def record_exchange(
        self,
        conversation_id: str,
        user_text: str,
        reply_text: str,
        agent_type: str,
        intent: str,
        confidence: float
    ) -> Tuple[int, int]:
        """
        Persist one guest message and the agent reply, in that order.

        Returns:
            (user sequence number, reply sequence number)
        """
        user_metadata: Dict[str, Any] = {"intent": intent, "confidence": confidence}
        entities = extract_entities(user_text)
        if entities:
            user_metadata["entities"] = entities

        user_sequence = await self.store.append_message(
            conversation_id,
            from_user=True,
            text=user_text,
            metadata=user_metadata,
            sensitive=contains_sensitive_data(user_text)
        )
        reply_sequence = await self.store.append_message(
            conversation_id,
            from_user=False,
            text=reply_text,
            agent_type=agent_type,
            metadata={"intent": intent, "confidence": confidence}
        )

        self.logger.debug(
            f"Conversation context updated for {conversation_id} with agent {agent_type} "
            f"(seq {user_sequence}, {reply_sequence})"
        )
        return user_sequence, reply_sequence
