"""
Orchestrator - one orchestration pass per guest message.

    load context -> classify -> select agent -> generate -> log interaction
    -> persist the exchange -> AgentReply

A failed context load degrades to an empty context. Text-generation
failures degrade inside the classifier and the response generator. The interaction log write and the exchange persistence each run
in their own error boundary so they can never replace the reply. Anything
else that escapes the pass is turned into the fixed apology reply; callers
never see an exception.
"""

import time
from datetime import datetime
from typing import Optional, Tuple

from ..agents import AgentType
from ..db.database_models import InteractionDO
from ..models.agent import AgentReply
from ..utils.logger import get_app_logger
from ..utils.text import sanitize_input
from .agent_router import select_agent
from .context_store import ConversationContextStore
from .intent_classifier import IntentClassifier, score_confidence
from .response_generator import ResponseGenerator
from .store import ConciergeStore


PROCESS_ACTION = "ProcessMessage"

APOLOGY_MESSAGE = (
    "I apologize, but I'm experiencing technical difficulties right now. "
    "Please try again in a moment, or contact our front desk for immediate assistance."
)
ERROR_SUMMARY = "Service temporarily unavailable"


class Orchestrator:
    """Sequences context, classification, routing, generation and logging."""

    def __init__(
        self,
        store: ConciergeStore,
        classifier: IntentClassifier,
        response_generator: ResponseGenerator,
        context_store: Optional[ConversationContextStore] = None
    ):
        self.store = store
        self.classifier = classifier
        self.response_generator = response_generator
        self.context_store = context_store or ConversationContextStore(store)
        self.logger = get_app_logger()

    async def process_message(
        self,
        conversation_id: str,
        user_text: str,
        user_id: Optional[str] = None
    ) -> AgentReply:
        """
        Run one orchestration pass.

        Args:
            conversation_id: Conversation ID
            user_text: Raw guest message
            user_id: Optional guest identifier

        Returns:
            AgentReply; has_error is set when the pass failed
        """
        started = time.monotonic()
        text = sanitize_input(user_text)
        self.logger.info(f"Processing message for conversation {conversation_id}")
        self.logger.debug(f"Message for {conversation_id}: {text}")

        try:
            context = await self.context_store.load(conversation_id)
            intent = await self.classifier.classify(text, context.last_agent_type)
            agent_type = select_agent(intent, context)
            generation = await self.response_generator.generate(text, agent_type, context)
            confidence = score_confidence(intent, text)
        except Exception as e:
            self.logger.error(f"Error processing message for conversation {conversation_id}: {e}", exc_info=True)
            await self._log_interaction(
                conversation_id,
                agent_type=AgentType.GENERAL.value,
                success=False,
                started=started,
                error_message=str(e),
                action_context=user_text,
                confidence=score_confidence(AgentType.GENERAL, text)
            )
            return AgentReply(
                agent_type=AgentType.GENERAL.value,
                message=APOLOGY_MESSAGE,
                intent="error",
                confidence=1.0,
                conversation_id=conversation_id,
                has_error=True,
                error_message=ERROR_SUMMARY
            )

        await self._log_interaction(
            conversation_id,
            agent_type=agent_type.value,
            success=True,
            started=started,
            error_message=generation.error,
            action_context=user_text,
            confidence=confidence
        )

        sequences = await self._record_exchange(
            conversation_id, user_id, text, generation.text, agent_type.value, intent.value, confidence
        )

        metadata = {"used_fallback": generation.used_fallback}
        if sequences is not None:
            metadata["user_sequence"], metadata["reply_sequence"] = sequences

        return AgentReply(
            agent_type=agent_type.value,
            message=generation.text,
            intent=intent.value,
            confidence=confidence,
            conversation_id=conversation_id,
            metadata=metadata
        )

    async def _log_interaction(
        self,
        conversation_id: str,
        agent_type: str,
        success: bool,
        started: float,
        error_message: Optional[str],
        action_context: Optional[str],
        confidence: float
    ) -> None:
        """Append the interaction record; a failed write is logged and dropped."""
        record = InteractionDO(
            conversation_id=conversation_id,
            agent_type=agent_type,
            action=PROCESS_ACTION,
            success=success,
            duration_ms=int((time.monotonic() - started) * 1000),
            timestamp=datetime.utcnow(),
            error_message=error_message,
            action_context=action_context,
            intent_confidence=confidence
        )
        try:
            await self.store.append_interaction(record)
        except Exception as e:
            self.logger.warning(f"Error logging agent interaction for {conversation_id}: {e}")

    async def _record_exchange(
        self,
        conversation_id: str,
        user_id: Optional[str],
        user_text: str,
        reply_text: str,
        agent_type: str,
        intent: str,
        confidence: float
    ) -> Optional[Tuple[int, int]]:
        """Persist the guest message and reply; returns their sequence numbers or None on failure."""
        try:
            await self.context_store.ensure_conversation(conversation_id, user_id=user_id)
            return await self.context_store.record_exchange(
                conversation_id, user_text, reply_text, agent_type, intent, confidence
            )
        except Exception as e:
            self.logger.warning(f"Error updating conversation context for {conversation_id}: {e}")
            return None
