"""Tests for agent kinds and the profile table."""

from concierge.agents import AgentType, AGENT_PROFILES, parse_agent_type, get_profile


class TestAgentProfiles:
    """SUT: AGENT_PROFILES"""

    def test_every_kind_has_a_profile(self):
        """Each agent kind should map to a complete profile."""
        assert set(AGENT_PROFILES) == set(AgentType)
        for agent_type, profile in AGENT_PROFILES.items():
            assert profile.agent_type is agent_type
            assert profile.title
            assert profile.system_prompt
            assert profile.fallback_text

    def test_fallbacks_are_distinct(self):
        """Fallback texts should be agent-specific."""
        texts = {profile.fallback_text for profile in AGENT_PROFILES.values()}
        assert len(texts) == len(AgentType)


class TestParseAgentType:
    """SUT: parse_agent_type"""

    def test_case_and_whitespace_ignored(self):
        assert parse_agent_type("  Booking\n") is AgentType.BOOKING

    def test_enum_passthrough(self):
        assert parse_agent_type(AgentType.SERVICE) is AgentType.SERVICE

    def test_unknown_and_empty(self):
        assert parse_agent_type("spa") is None
        assert parse_agent_type("") is None
        assert parse_agent_type(None) is None


class TestGetProfile:
    """SUT: get_profile"""

    def test_known(self):
        assert get_profile("housekeeping").title == "Housekeeping Coordinator"

    def test_unknown_defaults_to_general(self):
        assert get_profile("processing") is AGENT_PROFILES[AgentType.GENERAL]
