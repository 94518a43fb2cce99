"""Tests for the orchestration pass."""

from concierge.agents import AgentType, AGENT_PROFILES
from concierge.exceptions import PersistenceError
from concierge.services import ConversationContextStore, Orchestrator
from concierge.services.orchestrator import APOLOGY_MESSAGE, ERROR_SUMMARY, PROCESS_ACTION

from conftest import (
    FakeGenerator,
    FailingGenerator,
    FailingStore,
    RaisingClassifier,
    RaisingResponseGenerator,
    make_orchestrator
)


class TestProcessMessage:
    """SUT: Orchestrator.process_message"""

    async def test_booking_on_new_conversation(self, store):
        """A first booking message is routed to booking and persisted as seq 1 and 2."""
        orchestrator = make_orchestrator(store)
        reply = await orchestrator.process_message("C1", "I'd like to book a room for 2 guests")

        assert reply.intent == "booking"
        assert reply.agent_type == "booking"
        assert "booking" in reply.message
        assert reply.confidence >= 0.7
        assert reply.has_error is False

        interactions = await store.list_recent_interactions("C1", limit=10)
        assert len(interactions) == 1
        assert interactions[0].success is True
        assert interactions[0].action == PROCESS_ACTION
        assert interactions[0].agent_type == "booking"

        messages = await store.list_messages("C1")
        assert [(m.sequence_number, m.is_from_user) for m in messages] == [(1, True), (2, False)]
        assert reply.metadata["user_sequence"] == 1
        assert reply.metadata["reply_sequence"] == 2

    async def test_unmatched_text_without_generation(self, store):
        """Unmatched text with no generator gets the general canned reply."""
        reply = await make_orchestrator(store).process_message("C1", "asdkjh qweoiu")

        assert reply.intent == "general"
        assert reply.agent_type == "general"
        assert reply.message == AGENT_PROFILES[AgentType.GENERAL].fallback_text
        assert reply.confidence == 0.5
        assert reply.metadata["used_fallback"] is True

    async def test_general_follow_up_stays_with_agent(self, store):
        """Continuity: a general follow-up keeps the previous specialist."""
        orchestrator = make_orchestrator(store)
        await orchestrator.process_message("C1", "Can I order dinner?")
        reply = await orchestrator.process_message("C1", "Where is the pool?")

        assert reply.intent == "general"
        assert reply.agent_type == "service"

        messages = await store.list_messages("C1")
        assert [m.sequence_number for m in messages] == [1, 2, 3, 4]

    async def test_generated_reply(self, store):
        reply = await make_orchestrator(store, FakeGenerator(default="We have a suite free.")).process_message(
            "C1", "Any rooms available?"
        )
        assert reply.message == "We have a suite free."
        assert reply.metadata["used_fallback"] is False

    async def test_generation_failure_is_not_an_error(self, store):
        """Generation outages degrade to fallbacks; the pass still succeeds."""
        reply = await make_orchestrator(store, FailingGenerator()).process_message("C1", "broken shower")

        assert reply.has_error is False
        assert reply.agent_type == "housekeeping"
        assert reply.message == AGENT_PROFILES[AgentType.HOUSEKEEPING].fallback_text

        interaction = (await store.list_recent_interactions("C1"))[0]
        assert interaction.success is True
        assert "service unavailable" in interaction.error_message

    async def test_every_collaborator_failing(self):
        """Total failure still returns a well-formed error reply."""
        failing_store = FailingStore()
        orchestrator = Orchestrator(
            store=failing_store,
            classifier=RaisingClassifier(),
            response_generator=RaisingResponseGenerator(),
            context_store=ConversationContextStore(failing_store)
        )
        reply = await orchestrator.process_message("C1", "I'd like to book a room")

        assert reply.agent_type == "general"
        assert reply.intent == "error"
        assert reply.confidence == 1.0
        assert reply.has_error is True
        assert reply.message == APOLOGY_MESSAGE
        assert reply.error_message == ERROR_SUMMARY

    async def test_store_and_generation_outage_degrades(self):
        """With the database and text generation down the guest still gets the agent's reply."""
        orchestrator = make_orchestrator(FailingStore(), FailingGenerator())
        reply = await orchestrator.process_message("C1", "I'd like to book a room")

        assert reply.has_error is False
        assert reply.agent_type == "booking"
        assert reply.message == AGENT_PROFILES[AgentType.BOOKING].fallback_text
        assert "user_sequence" not in reply.metadata

    async def test_context_failure_is_not_an_error(self, store, monkeypatch):
        """A context load failure runs the pass without history."""
        await store.create_conversation(conversation_id="C1")
        orchestrator = make_orchestrator(store)

        async def broken(*args, **kwargs):
            raise PersistenceError("database unavailable")

        monkeypatch.setattr(store, "list_recent_interactions", broken)
        reply = await orchestrator.process_message("C1", "I'd like to book a room")

        assert reply.has_error is False
        assert reply.agent_type == "booking"
        assert reply.message == AGENT_PROFILES[AgentType.BOOKING].fallback_text
        assert await store.count_messages("C1") == 2

    async def test_failed_pass_logs_interaction(self, store, monkeypatch):
        """A processing fault is recorded as a failed general interaction."""
        orchestrator = make_orchestrator(store)

        async def broken_classify(text, prior_agent_type=None):
            raise RuntimeError("classifier crashed")

        monkeypatch.setattr(orchestrator.classifier, "classify", broken_classify)
        reply = await orchestrator.process_message("C1", "hello")
        assert reply.has_error is True

        interaction = (await store.list_recent_interactions("C1"))[0]
        assert interaction.success is False
        assert interaction.agent_type == "general"
        assert interaction.error_message == "classifier crashed"
        assert interaction.action_context == "hello"
        assert await store.list_messages("C1") == []

    async def test_long_digit_run_is_persisted(self, store):
        """Digit runs too long to be quantities are stored without a numbers entity."""
        text = "code " + "9" * 5000
        reply = await make_orchestrator(store).process_message("C1", text)

        assert reply.has_error is False
        user_message = (await store.list_messages("C1"))[0]
        assert user_message.message_text == text
        assert "numbers" not in user_message.metadata.get("entities", {})

    async def test_persistence_failure_keeps_reply(self, store, monkeypatch):
        """Failing to store the exchange never replaces the reply."""
        orchestrator = make_orchestrator(store)

        async def broken_record(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(orchestrator.context_store, "record_exchange", broken_record)
        reply = await orchestrator.process_message("C1", "fresh towels please")

        assert reply.has_error is False
        assert reply.agent_type == "housekeeping"
        assert "user_sequence" not in reply.metadata

    async def test_creates_conversation_on_first_contact(self, store):
        await make_orchestrator(store).process_message("C9", "hello", user_id="guest-9")
        conversation = await store.get_conversation("C9")
        assert conversation is not None
        assert conversation.user_id == "guest-9"
