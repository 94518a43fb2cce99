"""Agent interaction repository for database operations."""

from typing import Optional, List
from .base import BaseRepository
from ..database_models.interaction import InteractionDO


class InteractionRepository(BaseRepository):
    """Repository for the append-only agent interaction log."""

    def append(self, interaction: InteractionDO) -> Optional[int]:
        """
        Append an interaction record.

        Args:
            interaction: InteractionDO instance

        Returns:
            Interaction ID if successful, None otherwise
        """
        try:
            result = self.conn.execute("""
                INSERT INTO agent_interactions (
                    id, conversation_id, agent_type, action, success, duration_ms,
                    timestamp, error_message, action_context, intent_confidence
                )
                VALUES (nextval('interactions_id_seq'), ?, ?, ?, ?, ?, ?, ?, ?, ?)
                RETURNING id
            """, [
                interaction.conversation_id,
                interaction.agent_type,
                interaction.action,
                interaction.success,
                interaction.duration_ms,
                interaction.timestamp,
                interaction.error_message,
                interaction.action_context,
                interaction.intent_confidence
            ]).fetchone()

            interaction_id = result[0] if result else None
            if interaction_id:
                self.conn.commit()
                interaction.id = interaction_id
            return interaction_id
        except Exception as e:
            self.logger.error(f"Failed to append interaction: {e}")
            return None

    def list_recent(self, conversation_id: str, limit: int = 3) -> List[InteractionDO]:
        """
        Get the most recent interactions for a conversation, newest first.

        Args:
            conversation_id: Conversation ID
            limit: Maximum number of interactions to return

        Returns:
            List of InteractionDO instances
        """
        try:
            results = self.conn.execute("""
                SELECT id, conversation_id, agent_type, action, success, duration_ms,
                       timestamp, error_message, action_context, intent_confidence
                FROM agent_interactions
                WHERE conversation_id = ?
                ORDER BY timestamp DESC, id DESC
                LIMIT ?
            """, [conversation_id, limit]).fetchall()

            return [
                InteractionDO(
                    id=row[0],
                    conversation_id=row[1],
                    agent_type=row[2],
                    action=row[3],
                    success=bool(row[4]),
                    duration_ms=row[5],
                    timestamp=row[6],
                    error_message=row[7],
                    action_context=row[8],
                    intent_confidence=row[9]
                )
                for row in results
            ]
        except Exception as e:
            self.logger.error(f"Failed to list interactions: {e}")
            return []
