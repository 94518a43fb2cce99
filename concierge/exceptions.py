"""Exception types raised inside the concierge core."""


class ConciergeError(Exception):
    """Base exception for concierge errors."""


class PersistenceError(ConciergeError):
    """Raised when the conversation store cannot read or write."""


class ConversationNotFoundError(ConciergeError):
    """Raised by direct lookups of a conversation id that does not exist."""

    def __init__(self, conversation_id: str):
        super().__init__(f"Conversation not found: {conversation_id}")
        self.conversation_id = conversation_id


class TextGenerationError(ConciergeError):
    """Raised when the text-generation service fails or times out."""

    def __init__(self, message: str, model: str = "", is_timeout: bool = False):
        super().__init__(message)
        self.model = model
        self.is_timeout = is_timeout
