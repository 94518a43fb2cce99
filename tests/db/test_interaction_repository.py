"""Tests for InteractionRepository."""

import pytest
from datetime import datetime, timedelta

from concierge.db.repositories.interaction import InteractionRepository
from concierge.db.database_models.interaction import InteractionDO


@pytest.fixture
def repo(db_conn):
    """Provide an InteractionRepository."""
    return InteractionRepository(db_conn.conn)


def _make_interaction(**overrides):
    """Factory for InteractionDO with sensible defaults."""
    defaults = dict(conversation_id="c1", agent_type="general", action="ProcessMessage", success=True)
    defaults.update(overrides)
    return InteractionDO(**defaults)


class TestInteractionRepository:
    """Tests for InteractionRepository."""

    def test_append_returns_id(self, repo):
        """append() should return the new id and set it on the record."""
        record = _make_interaction(intent_confidence=0.7, duration_ms=12)
        interaction_id = repo.append(record)
        assert interaction_id is not None
        assert record.id == interaction_id

    def test_list_recent_newest_first(self, repo):
        """Most recent interactions come first, capped by limit."""
        now = datetime.utcnow()
        for i, agent in enumerate(["booking", "service", "housekeeping", "general"]):
            repo.append(_make_interaction(agent_type=agent, timestamp=now + timedelta(seconds=i)))

        recent = repo.list_recent("c1", limit=3)
        assert [r.agent_type for r in recent] == ["general", "housekeeping", "service"]

    def test_failure_fields_persisted(self, repo):
        """Error details and confidence should round-trip."""
        repo.append(_make_interaction(
            success=False, error_message="boom", action_context="hi", intent_confidence=0.5
        ))
        record = repo.list_recent("c1")[0]
        assert record.success is False
        assert record.error_message == "boom"
        assert record.action_context == "hi"
        assert record.intent_confidence == pytest.approx(0.5)

    def test_list_recent_other_conversation(self, repo):
        repo.append(_make_interaction())
        assert repo.list_recent("c2") == []
