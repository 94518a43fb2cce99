"""Conversation repository for database operations."""

from datetime import datetime
from typing import Optional, List
from .base import BaseRepository
from ..database_models.conversation import ConversationDO


_COLUMNS = "id, session_id, user_id, start_time, end_time, is_active, ip_address, user_agent"


def _row_to_conversation(row) -> ConversationDO:
    return ConversationDO(
        id=row[0],
        session_id=row[1],
        user_id=row[2],
        start_time=row[3],
        end_time=row[4],
        is_active=bool(row[5]),
        ip_address=row[6],
        user_agent=row[7]
    )


class ConversationRepository(BaseRepository):
    """Repository for Conversation operations. Conversations are never deleted."""

    def create(self, conversation: ConversationDO) -> bool:
        """
        Create a new conversation record.

        Args:
            conversation: ConversationDO instance

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute(f"""
                INSERT INTO conversations ({_COLUMNS})
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """, [
                conversation.id,
                conversation.session_id,
                conversation.user_id,
                conversation.start_time,
                conversation.end_time,
                conversation.is_active,
                conversation.ip_address,
                conversation.user_agent
            ])
            self.conn.commit()
            self.logger.info(f"Created conversation record: {conversation.id}")
            return True
        except Exception as e:
            self.logger.error(f"Failed to create conversation: {e}")
            return False

    def get(self, conversation_id: str) -> Optional[ConversationDO]:
        """
        Get conversation by ID.

        Args:
            conversation_id: Conversation ID

        Returns:
            ConversationDO instance or None
        """
        try:
            result = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM conversations
                WHERE id = ?
            """, [conversation_id]).fetchone()

            return _row_to_conversation(result) if result else None
        except Exception as e:
            self.logger.error(f"Failed to get conversation {conversation_id}: {e}")
            return None

    def end(self, conversation_id: str, end_time: Optional[datetime] = None) -> bool:
        """
        Mark a conversation inactive and stamp its end time.

        Args:
            conversation_id: Conversation ID
            end_time: End timestamp (defaults to now)

        Returns:
            True if successful, False otherwise
        """
        try:
            self.conn.execute("""
                UPDATE conversations
                SET is_active = FALSE, end_time = ?
                WHERE id = ?
            """, [end_time or datetime.utcnow(), conversation_id])
            self.conn.commit()
            self.logger.info(f"Ended conversation record: {conversation_id}")
            return True
        except Exception as e:
            self.logger.error(f"Failed to end conversation {conversation_id}: {e}")
            return False

    def list_active(self, limit: int = 20) -> List[ConversationDO]:
        """
        List active conversations, newest first.

        Args:
            limit: Maximum number of conversations to return

        Returns:
            List of ConversationDO instances
        """
        try:
            results = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM conversations
                WHERE is_active = TRUE
                ORDER BY start_time DESC
                LIMIT ?
            """, [limit]).fetchall()

            return [_row_to_conversation(row) for row in results]
        except Exception as e:
            self.logger.error(f"Failed to list active conversations: {e}")
            return []
