"""Message repository for database operations."""

import json
from typing import List
from .base import BaseRepository
from ..database_models.message import MessageDO
from ...exceptions import PersistenceError


_COLUMNS = (
    "id, conversation_id, is_from_user, message_text, agent_type, "
    "timestamp, sequence_number, metadata, contains_sensitive_data"
)


def _row_to_message(row) -> MessageDO:
    metadata = row[7]
    if isinstance(metadata, str):
        metadata = json.loads(metadata) if metadata else {}
    return MessageDO(
        id=row[0],
        conversation_id=row[1],
        is_from_user=bool(row[2]),
        message_text=row[3],
        agent_type=row[4] or "",
        timestamp=row[5],
        sequence_number=row[6],
        metadata=metadata or {},
        contains_sensitive_data=bool(row[8])
    )


class MessageRepository(BaseRepository):
    """Repository for Message operations."""

    def append(self, message: MessageDO) -> int:
        """
        Append a message, assigning the next per-conversation sequence number.

        The sequence number is (max existing + 1), read and written inside one
        transaction. Callers sharing the connection across threads must hold a
        lock around this call.

        Args:
            message: MessageDO instance (sequence_number and id are filled in)

        Returns:
            Assigned sequence number

        Raises:
            PersistenceError: If the message could not be written
        """
        try:
            self.conn.begin()
            row = self.conn.execute("""
                SELECT COALESCE(MAX(sequence_number), 0) + 1
                FROM messages
                WHERE conversation_id = ?
            """, [message.conversation_id]).fetchone()
            sequence_number = int(row[0])

            result = self.conn.execute("""
                INSERT INTO messages (
                    id, conversation_id, is_from_user, message_text, agent_type,
                    timestamp, sequence_number, metadata, contains_sensitive_data
                )
                VALUES (nextval('messages_id_seq'), ?, ?, ?, ?, ?, ?, ?, ?)
                RETURNING id
            """, [
                message.conversation_id,
                message.is_from_user,
                message.message_text,
                message.agent_type or "",
                message.timestamp,
                sequence_number,
                json.dumps(message.metadata or {}),
                message.contains_sensitive_data
            ]).fetchone()
            self.conn.commit()
        except Exception as e:
            try:
                self.conn.rollback()
            except Exception:
                self.logger.debug("Rollback skipped: no active transaction")
            self.logger.error(f"Failed to append message to conversation {message.conversation_id}: {e}")
            raise PersistenceError(f"Failed to append message: {e}") from e

        message.id = result[0] if result else None
        message.sequence_number = sequence_number
        self.logger.debug(
            f"Appended message {message.id} (seq {sequence_number}) to conversation {message.conversation_id}"
        )
        return sequence_number

    def list_by_conversation(
        self,
        conversation_id: str,
        limit: int = 50,
        ascending: bool = True
    ) -> List[MessageDO]:
        """
        Get messages for a conversation ordered by sequence number.

        Args:
            conversation_id: Conversation ID
            limit: Maximum number of messages to return
            ascending: Oldest first when True, newest first otherwise

        Returns:
            List of MessageDO instances
        """
        order = "ASC" if ascending else "DESC"
        try:
            results = self.conn.execute(f"""
                SELECT {_COLUMNS}
                FROM messages
                WHERE conversation_id = ?
                ORDER BY sequence_number {order}
                LIMIT ?
            """, [conversation_id, limit]).fetchall()

            return [_row_to_message(row) for row in results]
        except Exception as e:
            self.logger.error(f"Failed to get conversation messages: {e}")
            return []

    def count_by_conversation(self, conversation_id: str) -> int:
        """
        Count messages stored for a conversation.

        Args:
            conversation_id: Conversation ID

        Returns:
            Number of messages (0 on error)
        """
        try:
            result = self.conn.execute("""
                SELECT COUNT(*) FROM messages WHERE conversation_id = ?
            """, [conversation_id]).fetchone()
            return int(result[0]) if result else 0
        except Exception as e:
            self.logger.error(f"Failed to count messages: {e}")
            return 0
