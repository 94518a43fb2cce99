"""Services package."""

from .store import ConciergeStore
from .text_generation import TextGenerator, OpenAICompatibleGenerator, create_text_generator
from .intent_classifier import IntentClassifier, match_intent, score_confidence
from .context_store import ConversationContext, ConversationContextStore
from .agent_router import select_agent, should_continue_with_agent
from .response_generator import ResponseGenerator, GenerationResult
from .orchestrator import Orchestrator
from .connection_hub import ConnectionHub

__all__ = [
    "ConciergeStore",
    "TextGenerator",
    "OpenAICompatibleGenerator",
    "create_text_generator",
    "IntentClassifier",
    "match_intent",
    "score_confidence",
    "ConversationContext",
    "ConversationContextStore",
    "select_agent",
    "should_continue_with_agent",
    "ResponseGenerator",
    "GenerationResult",
    "Orchestrator",
    "ConnectionHub",
]
