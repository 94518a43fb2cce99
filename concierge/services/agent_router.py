"""Agent Router - picks the agent that answers a classified message."""

from typing import Optional, Union

from ..agents import AgentType, parse_agent_type
from .context_store import ConversationContext


def should_continue_with_agent(intent: AgentType, last_agent_type: AgentType) -> bool:
    """Keep the previous agent for general follow-ups and for same-intent turns."""
    if intent is AgentType.GENERAL and last_agent_type is not AgentType.GENERAL:
        return True
    return intent is last_agent_type


def select_agent(
    intent: Union[str, AgentType],
    context: Optional[ConversationContext] = None
) -> AgentType:
    """
    Select the responsible agent for a message.

    Args:
        intent: Classified intent tag
        context: Conversation context carrying the last agent type

    Returns:
        One of the four agent kinds
    """
    intent_type = parse_agent_type(intent) or AgentType.GENERAL

    last_agent = parse_agent_type(context.last_agent_type) if context else None
    if last_agent is not None and should_continue_with_agent(intent_type, last_agent):
        return last_agent

    # Intent tags and agent kinds map 1:1
    return intent_type
