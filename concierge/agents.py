"""Virtual agent kinds and their profiles.

Each agent kind maps to one profile holding its title, persona prompt and the
canned reply used when text generation is unavailable.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union


class AgentType(str, Enum):
    """Closed set of agent kinds. Intent tags use the same four values."""

    BOOKING = "booking"
    SERVICE = "service"
    HOUSEKEEPING = "housekeeping"
    GENERAL = "general"


@dataclass(frozen=True)
class AgentProfile:
    """Static behavior of one agent kind."""

    agent_type: AgentType
    title: str
    system_prompt: str
    fallback_text: str


AGENT_PROFILES: Dict[AgentType, AgentProfile] = {
    AgentType.BOOKING: AgentProfile(
        agent_type=AgentType.BOOKING,
        title="Booking Specialist",
        system_prompt=(
            "You are a professional hotel booking specialist at Contoso Hotels. "
            "Help guests with room reservations, availability, pricing, and booking-related inquiries. "
            "You have access to room inventory and can check availability."
        ),
        fallback_text=(
            "I'd be happy to help you with your room booking needs! "
            "Could you please tell me your preferred dates and the number of guests?"
        ),
    ),
    AgentType.SERVICE: AgentProfile(
        agent_type=AgentType.SERVICE,
        title="Room Service Coordinator",
        system_prompt=(
            "You are a room service coordinator at Contoso Hotels. "
            "Help guests with food orders, menu questions, dietary accommodations, and dining services. "
            "Our kitchen operates 24/7 with full menu availability."
        ),
        fallback_text=(
            "I can help you with room service! Our kitchen is open 24/7. "
            "Would you like to see our menu or do you have something specific in mind?"
        ),
    ),
    AgentType.HOUSEKEEPING: AgentProfile(
        agent_type=AgentType.HOUSEKEEPING,
        title="Housekeeping Coordinator",
        system_prompt=(
            "You are a housekeeping coordinator at Contoso Hotels. "
            "Help guests with cleaning requests, maintenance issues, amenity requests, and room services. "
            "You can schedule services and handle urgent requests."
        ),
        fallback_text=(
            "I can assist you with housekeeping services. What type of service do you need "
            "- cleaning, fresh linens, maintenance, or something else?"
        ),
    ),
    AgentType.GENERAL: AgentProfile(
        agent_type=AgentType.GENERAL,
        title="Concierge",
        system_prompt=(
            "You are a helpful concierge at Contoso Hotels. "
            "Provide information about hotel amenities, local attractions, and general assistance. "
            "Always be professional and helpful."
        ),
        fallback_text=(
            "Thank you for contacting Contoso Hotels! I'm here to help with any questions about "
            "our services, amenities, or your stay. How can I assist you today?"
        ),
    ),
}


def parse_agent_type(value: Optional[Union[str, AgentType]]) -> Optional[AgentType]:
    """
    Parse a stored or returned tag into an AgentType.

    Args:
        value: Tag such as "booking" (case and surrounding whitespace ignored)

    Returns:
        AgentType, or None when the tag is empty or not one of the four kinds
    """
    if value is None:
        return None
    if isinstance(value, AgentType):
        return value
    try:
        return AgentType(value.strip().lower())
    except ValueError:
        return None


def get_profile(agent_type: Union[str, AgentType]) -> AgentProfile:
    """Profile for an agent kind; unknown tags get the general concierge."""
    return AGENT_PROFILES[parse_agent_type(agent_type) or AgentType.GENERAL]
