"""Response Generator - agent reply text with a canned fallback per agent."""

from dataclasses import dataclass
from typing import Optional, Union

from ..agents import AgentType, get_profile
from ..utils.logger import get_app_logger
from .context_store import ConversationContext
from .text_generation import TextGenerator


REPLY_PROMPT = """{system_prompt}

Context:
{context_info}

Guest message: {message}

Provide a helpful, professional response as a Contoso Hotels {title}.
Keep responses concise but informative. Use a warm, hospitality-focused tone.
If you need additional information to help the guest, ask specific questions."""


@dataclass
class GenerationResult:
    """Reply text plus how it was produced."""

    text: str
    used_fallback: bool = False
    error: Optional[str] = None


RECENT_TURNS = 3


def build_context_info(context: Optional[ConversationContext], agent_type: Union[str, AgentType]) -> str:
    """
    Render the context summary embedded in the reply prompt.

    Carries the start time, the previous agent when it differs from the
    selected one, the last few turns and any guest details on record.
    """
    if context is None or not context.recent_messages:
        return "This is the start of a new conversation."

    lines = []
    if context.start_time is not None:
        lines.append(f"Conversation started: {context.start_time:%Y-%m-%d %H:%M}")

    if context.last_agent_type and context.last_agent_type != get_profile(agent_type).agent_type.value:
        lines.append(f"Previous agent: {context.last_agent_type}")

    if len(context.recent_messages) > 1:
        lines.append("Recent conversation:")
        for message in context.recent_messages[-RECENT_TURNS:]:
            sender = "Guest" if message.is_from_user else f"Agent ({message.agent_type or 'general'})"
            lines.append(f"{sender}: {message.message_text}")

    if context.user_preferences:
        details = "; ".join(
            f"{kind}: {', '.join(str(value) for value in values)}"
            for kind, values in context.user_preferences.items()
        )
        lines.append(f"Guest details: {details}")

    return "\n".join(lines) or "Conversation in progress."


class ResponseGenerator:
    """Generates agent replies; degrades silently to the agent's canned text."""

    def __init__(self, text_generator: Optional[TextGenerator] = None):
        self.text_generator = text_generator
        self.logger = get_app_logger()

    async def generate(
        self,
        user_text: str,
        agent_type: Union[str, AgentType],
        context: Optional[ConversationContext] = None
    ) -> GenerationResult:
        """
        Produce the reply for a guest message.

        Never raises: an absent, failing or empty generation yields the
        agent's fallback text, and the failure is reported in the result.

        Args:
            user_text: Guest message
            agent_type: Selected agent
            context: Conversation context for the prompt

        Returns:
            GenerationResult with non-empty text
        """
        profile = get_profile(agent_type)

        if self.text_generator is None:
            return GenerationResult(text=profile.fallback_text, used_fallback=True)

        prompt = REPLY_PROMPT.format(
            system_prompt=profile.system_prompt,
            context_info=build_context_info(context, profile.agent_type),
            message=user_text,
            title=profile.title
        )

        try:
            reply = (await self.text_generator.complete(prompt) or "").strip()
        except Exception as e:
            self.logger.warning(f"Error generating AI response for {profile.agent_type.value}, using fallback: {e}")
            return GenerationResult(text=profile.fallback_text, used_fallback=True, error=str(e))

        if not reply:
            self.logger.warning(f"Empty AI response for {profile.agent_type.value}, using fallback")
            return GenerationResult(
                text=profile.fallback_text,
                used_fallback=True,
                error="Text generation returned an empty response"
            )

        self.logger.debug(f"Generated AI response for {profile.agent_type.value}")
        return GenerationResult(text=reply)
