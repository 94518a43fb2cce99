"""
Connection Hub - live connections, conversation groups and broadcasts.

A connection is any object with an ``async send_json(dict)`` method (a
FastAPI WebSocket in production). Each connection belongs to at most one
conversation group at a time. Every conversation group owns a lock that
serializes its send_message passes, so the typing / reply events of two
messages sent to the same conversation never interleave. Different
conversations run fully in parallel.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Set

from ..models import events
from ..models.agent import AgentReply
from ..utils.logger import get_app_logger
from ..utils.text import sanitize_input
from .orchestrator import Orchestrator


PROCESSING_AGENT = "processing"
PROCESSING_FAILED_TEXT = "Failed to process message - our AI service is temporarily unavailable"


def _event(event_type: str, conversation_id: Optional[str] = None, **fields: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"type": event_type}
    if conversation_id is not None:
        payload["conversation_id"] = conversation_id
    payload.update(fields)
    payload["timestamp"] = datetime.utcnow().isoformat()
    return payload


@dataclass
class ConversationGroup:
    """Broadcast group of one conversation."""

    conversation_id: str
    members: Set[str] = field(default_factory=set)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    pending: int = 0

    def is_idle(self) -> bool:
        return not self.members and self.pending == 0


class ConnectionHub:
    """Owns connection state and drives the per-message event sequence."""

    def __init__(self, orchestrator: Orchestrator, max_message_length: int = 1000):
        self.orchestrator = orchestrator
        self.max_message_length = max_message_length
        self.logger = get_app_logger()

        # {connection_id: connection}
        self._connections: Dict[str, Any] = {}
        # {connection_id: conversation_id}
        self._memberships: Dict[str, str] = {}
        # {connection_id: user_id}
        self._user_ids: Dict[str, str] = {}
        # {conversation_id: ConversationGroup}
        self._groups: Dict[str, ConversationGroup] = {}
        self._state_lock = asyncio.Lock()

    # === Connection lifecycle ===

    async def connect(self, connection_id: str, connection: Any) -> None:
        """Register a connection and acknowledge it to the caller only."""
        async with self._state_lock:
            self._connections[connection_id] = connection
        self.logger.info(f"Chat client connected: {connection_id}")

        await self._send(connection_id, _event(
            events.CONNECTION_ESTABLISHED,
            connection_id=connection_id,
            message="Connected to Contoso Hotels AI Concierge"
        ))

    async def disconnect(self, connection_id: str, error: Optional[BaseException] = None) -> None:
        """
        Tear down a connection's state. Nothing is broadcast to others.

        In-flight send_message passes of this connection keep running; their
        caller-only events are silently dropped.
        """
        async with self._state_lock:
            self._connections.pop(connection_id, None)
            self._user_ids.pop(connection_id, None)
            conversation_id = self._memberships.pop(connection_id, None)
            if conversation_id is not None:
                self._discard_member(conversation_id, connection_id)

        if error is not None:
            self.logger.warning(f"Chat client disconnected with error: {connection_id} - {error}")
        else:
            self.logger.info(f"Chat client disconnected: {connection_id}")

    # === Group membership ===

    async def join_conversation(
        self,
        connection_id: str,
        conversation_id: str,
        user_id: Optional[str] = None
    ) -> None:
        """
        Track the connection's conversation and add it to the broadcast group.

        A connection has at most one active conversation: joining another one
        moves it out of the previous group.
        """
        async with self._state_lock:
            previous = self._memberships.get(connection_id)
            if previous is not None and previous != conversation_id:
                self._discard_member(previous, connection_id)
            self._memberships[connection_id] = conversation_id
            if user_id:
                self._user_ids[connection_id] = user_id
            self._get_group(conversation_id).members.add(connection_id)

        self.logger.info(f"Client {connection_id} joined conversation {conversation_id}")

        try:
            await self.orchestrator.context_store.ensure_conversation(
                conversation_id, session_id=connection_id, user_id=user_id
            )
        except Exception as e:
            self.logger.warning(f"Could not ensure conversation {conversation_id} exists: {e}")

        await self._send(connection_id, _event(
            events.CONVERSATION_JOINED, conversation_id, user_id=user_id
        ))

    async def leave_conversation(self, connection_id: str, conversation_id: str) -> None:
        """Remove the connection from the group and its mapping."""
        async with self._state_lock:
            self._discard_member(conversation_id, connection_id)
            if self._memberships.get(connection_id) == conversation_id:
                del self._memberships[connection_id]

        self.logger.info(f"Client {connection_id} left conversation {conversation_id}")
        await self._send(connection_id, _event(events.CONVERSATION_LEFT, conversation_id))

    # === Messaging ===

    async def send_message(
        self,
        connection_id: str,
        conversation_id: str,
        text: str,
        message_id: Optional[str] = None
    ) -> Optional[AgentReply]:
        """
        Process a guest message and broadcast the reply to the whole group.

        Event order per message: message_received (caller), agent_typing on
        (group), agent_typing off (group), agent_message (group). The
        acknowledgement goes out as soon as the message is accepted; the
        group events of passes on the same conversation are serialized.

        Returns:
            The AgentReply, or None when the message was rejected or failed
        """
        message_id = message_id or str(uuid.uuid4())

        cleaned = sanitize_input(text)
        if not cleaned or len(cleaned) > self.max_message_length:
            reason = "Message is empty" if not cleaned else (
                f"Message exceeds {self.max_message_length} characters"
            )
            await self._send(connection_id, _event(
                events.MESSAGE_ERROR, conversation_id, message_id=message_id, error=reason
            ))
            return None

        self.logger.info(f"Received message from {connection_id} in conversation {conversation_id}")
        await self._send(connection_id, _event(
            events.MESSAGE_RECEIVED, conversation_id, message_id=message_id, status="received"
        ))

        async with self._state_lock:
            group = self._get_group(conversation_id)
            group.pending += 1

        try:
            async with group.lock:
                return await self._process_message(connection_id, conversation_id, cleaned, message_id)
        finally:
            async with self._state_lock:
                group.pending -= 1
                self._drop_group_if_idle(conversation_id)

    async def _process_message(
        self,
        connection_id: str,
        conversation_id: str,
        cleaned: str,
        message_id: str
    ) -> Optional[AgentReply]:
        try:
            await self.broadcast(conversation_id, _event(
                events.AGENT_TYPING, conversation_id, agent_type=PROCESSING_AGENT, is_typing=True
            ))

            reply = await self.orchestrator.process_message(
                conversation_id, cleaned, user_id=self._user_ids.get(connection_id)
            )

            await self.broadcast(conversation_id, _event(
                events.AGENT_TYPING, conversation_id, agent_type=reply.agent_type, is_typing=False
            ))

            await self.broadcast(conversation_id, _event(
                events.AGENT_MESSAGE,
                conversation_id,
                message_id=str(uuid.uuid4()),
                original_message_id=message_id,
                agent_type=reply.agent_type,
                message=reply.message,
                intent=reply.intent,
                confidence=reply.confidence,
                is_from_user=False,
                has_error=reply.has_error,
                error_message=reply.error_message
            ))
            return reply

        except Exception as e:
            self.logger.error(f"Error processing message from {connection_id}: {e}", exc_info=True)

            await self.broadcast(conversation_id, _event(
                events.AGENT_TYPING, conversation_id, agent_type="general", is_typing=False
            ))
            await self._send(connection_id, _event(
                events.MESSAGE_ERROR, conversation_id, message_id=message_id, error=PROCESSING_FAILED_TEXT
            ))
            return None

    async def send_typing_indicator(self, connection_id: str, conversation_id: str, is_typing: bool) -> None:
        """Relay a guest typing signal to every other group member."""
        await self.broadcast(
            conversation_id,
            _event(events.USER_TYPING, conversation_id, is_typing=is_typing),
            exclude={connection_id}
        )

    async def get_status(self, connection_id: str, conversation_id: str) -> int:
        """Send the live connection count of a conversation to the caller."""
        count = self.active_connection_count(conversation_id)
        await self._send(connection_id, _event(
            events.CONVERSATION_STATUS, conversation_id, active_connections=count
        ))
        return count

    def active_connection_count(self, conversation_id: str) -> int:
        return sum(1 for value in self._memberships.values() if value == conversation_id)

    def conversation_of(self, connection_id: str) -> Optional[str]:
        return self._memberships.get(connection_id)

    def group_members(self, conversation_id: str) -> Set[str]:
        group = self._groups.get(conversation_id)
        return set(group.members) if group else set()

    # === Delivery ===

    async def broadcast(
        self,
        conversation_id: str,
        payload: Dict[str, Any],
        exclude: Optional[Iterable[str]] = None
    ) -> None:
        """Deliver to every group member. An empty or vanished group is a no-op."""
        group = self._groups.get(conversation_id)
        if group is None:
            return

        excluded = set(exclude or ())
        targets = [member for member in group.members if member not in excluded]
        if targets:
            await asyncio.gather(*(self._send(member, payload) for member in targets))

    async def _send(self, connection_id: str, payload: Dict[str, Any]) -> bool:
        """
        Send to one connection.

        A failed send is logged and takes the connection out of its
        conversation: both the group membership and the tracked mapping go,
        so status counts only members that still receive broadcasts. The
        connection stays registered and may join again.
        """
        connection = self._connections.get(connection_id)
        if connection is None:
            return False

        try:
            await connection.send_json(payload)
            return True
        except Exception as e:
            self.logger.warning(f"Error sending {payload.get('type')} to {connection_id}: {e}")
            async with self._state_lock:
                conversation_id = self._memberships.pop(connection_id, None)
                if conversation_id is not None:
                    self._discard_member(conversation_id, connection_id)
            return False

    # === Internal state (callers hold _state_lock) ===

    def _get_group(self, conversation_id: str) -> ConversationGroup:
        group = self._groups.get(conversation_id)
        if group is None:
            group = ConversationGroup(conversation_id)
            self._groups[conversation_id] = group
        return group

    def _discard_member(self, conversation_id: str, connection_id: str) -> None:
        group = self._groups.get(conversation_id)
        if group is not None:
            group.members.discard(connection_id)
            self._drop_group_if_idle(conversation_id)

    def _drop_group_if_idle(self, conversation_id: str) -> None:
        group = self._groups.get(conversation_id)
        if group is not None and group.is_idle():
            del self._groups[conversation_id]

    async def shutdown(self) -> None:
        """Drop all connection state."""
        self.logger.info("Shutting down connection hub...")
        async with self._state_lock:
            self._connections.clear()
            self._memberships.clear()
            self._user_ids.clear()
            self._groups.clear()
        self.logger.info("Connection hub shut down")
