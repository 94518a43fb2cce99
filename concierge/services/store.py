"""Async persistence adapter over the DuckDB repositories.

DuckDB calls are blocking, so every call runs on a worker thread behind one
lock: the event loop stays free for unrelated connections and the
read-max-then-insert sequence assignment in MessageRepository.append is atomic.
"""

import asyncio
import threading
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from ..db import DatabaseConnection, ConversationRepository, MessageRepository, InteractionRepository
from ..db.database_models import ConversationDO, MessageDO, InteractionDO
from ..exceptions import ConversationNotFoundError, PersistenceError
from ..utils.logger import get_app_logger

T = TypeVar("T")


def _new_conversation(
    conversation_id: Optional[str] = None,
    session_id: Optional[str] = None,
    user_id: Optional[str] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None
) -> ConversationDO:
    return ConversationDO(
        id=conversation_id or str(uuid.uuid4()),
        session_id=session_id or str(uuid.uuid4()),
        user_id=user_id,
        start_time=datetime.utcnow(),
        is_active=True,
        ip_address=ip_address,
        user_agent=user_agent
    )


class ConciergeStore:
    """Conversations, messages and interaction log as coroutines."""

    def __init__(self, db: DatabaseConnection):
        self.db = db
        self.logger = get_app_logger()
        self._lock = threading.Lock()
        self.conversations = ConversationRepository(db.conn)
        self.messages = MessageRepository(db.conn)
        self.interactions = InteractionRepository(db.conn)

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        def call() -> T:
            with self._lock:
                return fn(*args)

        return await asyncio.to_thread(call)

    # === Conversations ===

    async def create_conversation(
        self,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None,
        conversation_id: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> ConversationDO:
        """Create and persist a new active conversation."""
        conversation = _new_conversation(conversation_id, session_id, user_id, ip_address, user_agent)
        if not await self._run(self.conversations.create, conversation):
            raise PersistenceError(f"Failed to create conversation {conversation.id}")
        return conversation

    async def get_conversation(self, conversation_id: str) -> Optional[ConversationDO]:
        return await self._run(self.conversations.get, conversation_id)

    async def require_conversation(self, conversation_id: str) -> ConversationDO:
        """Direct lookup: unknown ids are a not-found condition."""
        conversation = await self.get_conversation(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(conversation_id)
        return conversation

    async def ensure_conversation(
        self,
        conversation_id: str,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None
    ) -> Tuple[ConversationDO, bool]:
        """
        Get a conversation, creating it on first contact.

        Lookup and insert run as one call under the store lock, so concurrent
        first contacts on the same id create it exactly once.

        Returns:
            (conversation, created)
        """
        def get_or_create() -> Tuple[Optional[ConversationDO], bool]:
            existing = self.conversations.get(conversation_id)
            if existing is not None:
                return existing, False
            conversation = _new_conversation(conversation_id, session_id, user_id)
            if not self.conversations.create(conversation):
                return None, False
            return conversation, True

        conversation, created = await self._run(get_or_create)
        if conversation is None:
            raise PersistenceError(f"Failed to create conversation {conversation_id}")
        return conversation, created

    async def end_conversation(self, conversation_id: str) -> ConversationDO:
        """Mark a conversation inactive. Raises ConversationNotFoundError for unknown ids."""
        await self.require_conversation(conversation_id)
        if not await self._run(self.conversations.end, conversation_id, datetime.utcnow()):
            raise PersistenceError(f"Failed to end conversation {conversation_id}")
        return await self.require_conversation(conversation_id)

    async def list_active_conversations(self, limit: int = 20) -> List[ConversationDO]:
        return await self._run(self.conversations.list_active, limit)

    # === Messages ===

    async def append_message(
        self,
        conversation_id: str,
        from_user: bool,
        text: str,
        agent_type: str = "",
        metadata: Optional[Dict[str, Any]] = None,
        sensitive: bool = False
    ) -> int:
        """Append a message and return its assigned sequence number."""
        message = MessageDO(
            conversation_id=conversation_id,
            is_from_user=from_user,
            message_text=text,
            agent_type="" if from_user else (agent_type or ""),
            timestamp=datetime.utcnow(),
            metadata=metadata or {},
            contains_sensitive_data=sensitive
        )
        return await self._run(self.messages.append, message)

    async def list_messages(
        self,
        conversation_id: str,
        limit: int = 50,
        ascending: bool = True
    ) -> List[MessageDO]:
        return await self._run(self.messages.list_by_conversation, conversation_id, limit, ascending)

    async def count_messages(self, conversation_id: str) -> int:
        return await self._run(self.messages.count_by_conversation, conversation_id)

    # === Interaction log ===

    async def append_interaction(self, record: InteractionDO) -> int:
        """Append an interaction record. Raises PersistenceError when the write fails."""
        interaction_id = await self._run(self.interactions.append, record)
        if interaction_id is None:
            raise PersistenceError(f"Failed to log interaction for conversation {record.conversation_id}")
        return interaction_id

    async def list_recent_interactions(self, conversation_id: str, limit: int = 3) -> List[InteractionDO]:
        return await self._run(self.interactions.list_recent, conversation_id, limit)
