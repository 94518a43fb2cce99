"""Tests for MessageRepository."""

import pytest

from concierge.db.repositories.message import MessageRepository
from concierge.db.database_models.message import MessageDO


@pytest.fixture
def repo(db_conn):
    """Provide a MessageRepository."""
    return MessageRepository(db_conn.conn)


def _make_msg(**overrides):
    """Factory for MessageDO with sensible defaults."""
    defaults = dict(conversation_id="c1", is_from_user=True, message_text="hello")
    defaults.update(overrides)
    return MessageDO(**defaults)


class TestMessageRepository:
    """Tests for MessageRepository."""

    class TestAppend:
        """SUT: MessageRepository.append"""

        def test_first_sequence_is_one(self, repo):
            """The first message of a conversation gets sequence 1."""
            message = _make_msg()
            assert repo.append(message) == 1
            assert message.sequence_number == 1
            assert message.id is not None

        def test_sequences_are_gapless(self, repo):
            """Repeated appends yield 1..n."""
            sequences = [repo.append(_make_msg(message_text=f"m{i}")) for i in range(5)]
            assert sequences == [1, 2, 3, 4, 5]

        def test_sequences_are_per_conversation(self, repo):
            """Each conversation starts its own sequence at 1."""
            repo.append(_make_msg(conversation_id="c1"))
            repo.append(_make_msg(conversation_id="c1"))
            assert repo.append(_make_msg(conversation_id="c2")) == 1

        def test_metadata_round_trip(self, repo):
            """Metadata dicts should be stored and read back."""
            repo.append(_make_msg(metadata={"intent": "booking", "confidence": 0.9}))
            stored = repo.list_by_conversation("c1")[0]
            assert stored.metadata == {"intent": "booking", "confidence": 0.9}

    class TestListByConversation:
        """SUT: MessageRepository.list_by_conversation"""

        def test_ordering(self, repo):
            """Ascending by default, descending on request."""
            for i in range(3):
                repo.append(_make_msg(message_text=f"m{i}"))

            ascending = repo.list_by_conversation("c1")
            assert [m.sequence_number for m in ascending] == [1, 2, 3]

            descending = repo.list_by_conversation("c1", limit=2, ascending=False)
            assert [m.message_text for m in descending] == ["m2", "m1"]

        def test_empty(self, repo):
            assert repo.list_by_conversation("missing") == []

    class TestCount:
        """SUT: MessageRepository.count_by_conversation"""

        def test_count(self, repo):
            repo.append(_make_msg())
            repo.append(_make_msg(is_from_user=False, agent_type="general"))
            assert repo.count_by_conversation("c1") == 2
            assert repo.count_by_conversation("c2") == 0
