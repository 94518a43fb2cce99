"""
Intent Classifier - maps a guest message to one of the four intent tags.

Rules are checked in priority order (booking, service, housekeeping,
general); the first matching pattern wins. Only when no pattern matches is
the text-generation service asked, and its answer is accepted only if it is
one of the four tags. Everything else falls back to general.
"""

import re
from typing import List, Optional, Tuple, Union

from ..agents import AgentType, parse_agent_type
from ..utils.logger import get_app_logger
from .text_generation import TextGenerator


INTENT_RULES: List[Tuple[AgentType, "re.Pattern[str]"]] = [
    (AgentType.BOOKING, re.compile(
        r"book|reservation|reserve|stay|room|check.?in|check.?out|available|vacancy")),
    (AgentType.SERVICE, re.compile(
        r"food|menu|order|dining|meal|breakfast|lunch|dinner|drink|beverage|hungry|eat")),
    (AgentType.HOUSEKEEPING, re.compile(
        r"clean|housekeeping|towel|linen|maintenance|repair|broken|fix|toilet|shower")),
    (AgentType.GENERAL, re.compile(
        r"help|info|information|amenities|facilities|pool|gym|spa|wifi|parking|location|address")),
]

_PATTERNS = dict(INTENT_RULES)

CLASSIFICATION_PROMPT = """Classify the following hotel guest message into one of these categories:
- booking: room reservations, availability, check-in/out
- service: room service, food, dining, menu requests
- housekeeping: cleaning, maintenance, towels, linens
- general: amenities, information, help

Previous context: {prior_agent}
Message: {message}

Respond with only the category name (booking, service, housekeeping, or general)."""


def match_intent(text: str) -> Optional[AgentType]:
    """Fast deterministic pass: first rule whose pattern matches the lower-cased text."""
    lowered = (text or "").lower()
    for intent, pattern in INTENT_RULES:
        if pattern.search(lowered):
            return intent
    return None


def score_confidence(intent: Union[str, AgentType, None], text: str) -> float:
    """
    Confidence for a classified intent.

    min(0.5 + 0.2 * matches, 1.0), where matches counts hits of the chosen
    intent's pattern in the lower-cased text. 0.5 for empty text or an
    unrecognized intent.
    """
    agent_type = parse_agent_type(intent)
    if not text or agent_type is None:
        return 0.5

    matches = len(_PATTERNS[agent_type].findall(text.lower()))
    return min(0.5 + matches * 0.2, 1.0)


class IntentClassifier:
    """Pattern-first intent classification with an optional AI fallback."""

    def __init__(self, text_generator: Optional[TextGenerator] = None):
        self.text_generator = text_generator
        self.logger = get_app_logger()

    async def classify(self, text: str, prior_agent_type: Optional[str] = None) -> AgentType:
        """
        Classify a guest message.

        Args:
            text: Guest message
            prior_agent_type: Agent that handled the previous turn, if any

        Returns:
            One of the four intent tags; never raises
        """
        intent = match_intent(text)
        if intent is not None:
            self.logger.debug(f"Intent classified as {intent.value} using pattern matching")
            return intent

        if self.text_generator is not None:
            prompt = CLASSIFICATION_PROMPT.format(
                prior_agent=prior_agent_type or "none",
                message=text
            )
            try:
                answer = await self.text_generator.complete(prompt)
            except Exception as e:
                self.logger.warning(f"AI intent classification failed, defaulting to general: {e}")
                return AgentType.GENERAL

            intent = parse_agent_type(answer)
            if intent is not None:
                self.logger.debug(f"Intent classified as {intent.value} using text generation")
                return intent
            self.logger.debug(f"Ignoring unrecognized classification answer: {answer!r}")

        self.logger.debug("Intent defaulted to 'general' - no clear classification")
        return AgentType.GENERAL
