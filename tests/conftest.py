"""Shared pytest fixtures and test doubles."""

import asyncio
from typing import List, Optional, Set

import pytest

from concierge.db import DatabaseConnection
from concierge.exceptions import PersistenceError, TextGenerationError
from concierge.services import (
    ConciergeStore,
    ConversationContextStore,
    IntentClassifier,
    ResponseGenerator,
    Orchestrator,
    ConnectionHub,
    TextGenerator
)


class FakeGenerator(TextGenerator):
    """Returns queued replies in order, then the default."""

    def __init__(self, replies: Optional[List[str]] = None, default: str = ""):
        self.replies = list(replies or [])
        self.default = default
        self.prompts: List[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.replies:
            return self.replies.pop(0)
        return self.default


class FailingGenerator(TextGenerator):
    """Always raises."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error or TextGenerationError("service unavailable", model="test")
        self.calls = 0

    async def complete(self, prompt: str) -> str:
        self.calls += 1
        raise self.error


class SlowGenerator(TextGenerator):
    """Blocks until released, then answers."""

    def __init__(self, reply: str = "Certainly!"):
        self.reply = reply
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def complete(self, prompt: str) -> str:
        self.started.set()
        await self.release.wait()
        return self.reply


class FailingStore:
    """Store double whose every call fails."""

    async def _fail(self, *args, **kwargs):
        raise PersistenceError("database unavailable")

    get_conversation = _fail
    require_conversation = _fail
    ensure_conversation = _fail
    create_conversation = _fail
    end_conversation = _fail
    list_active_conversations = _fail
    append_message = _fail
    list_messages = _fail
    count_messages = _fail
    append_interaction = _fail
    list_recent_interactions = _fail


class RecordingConnection:
    """Connection double that records every event it is sent."""

    def __init__(self):
        self.sent: List[dict] = []

    async def send_json(self, payload: dict) -> None:
        self.sent.append(payload)

    def types(self) -> List[str]:
        return [event["type"] for event in self.sent]

    def of_type(self, event_type: str) -> List[dict]:
        return [event for event in self.sent if event["type"] == event_type]


class BrokenConnection(RecordingConnection):
    """
    Connection double whose sends fail, for all events or only the given types.

    With ``failures`` set it fails that many times and then recovers.
    """

    def __init__(self, fail_on: Optional[Set[str]] = None, failures: Optional[int] = None):
        super().__init__()
        self.fail_on = fail_on
        self.failures = failures

    async def send_json(self, payload: dict) -> None:
        should_fail = self.fail_on is None or payload["type"] in self.fail_on
        if should_fail and (self.failures is None or self.failures > 0):
            if self.failures is not None:
                self.failures -= 1
            raise RuntimeError("socket closed")
        await super().send_json(payload)


class RaisingClassifier:
    """Classifier double that always raises."""

    async def classify(self, text, prior_agent_type=None):
        raise RuntimeError("classifier crashed")


class RaisingResponseGenerator:
    """Response generator double that always raises."""

    async def generate(self, user_text, agent_type, context=None):
        raise RuntimeError("generator crashed")


def make_orchestrator(store, generator: Optional[TextGenerator] = None) -> Orchestrator:
    """Wire an orchestrator the way the application does."""
    return Orchestrator(
        store=store,
        classifier=IntentClassifier(generator),
        response_generator=ResponseGenerator(generator),
        context_store=ConversationContextStore(store)
    )


@pytest.fixture
def db_conn(tmp_path):
    """Provide a fresh database connection."""
    db = DatabaseConnection(str(tmp_path / "test.db"))
    yield db
    db.close()


@pytest.fixture
def store(db_conn):
    """Provide a ConciergeStore over a fresh database."""
    return ConciergeStore(db_conn)


@pytest.fixture
def orchestrator(store):
    """Orchestrator without text generation (canned replies)."""
    return make_orchestrator(store)


@pytest.fixture
def hub(orchestrator):
    """ConnectionHub over the canned-reply orchestrator."""
    return ConnectionHub(orchestrator, max_message_length=1000)
