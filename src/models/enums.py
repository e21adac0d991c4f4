import enum


class ConversationStatus(str, enum.Enum):
    OPEN = "OPEN"
    ENDED = "ENDED"


class SenderRole(str, enum.Enum):
    CUSTOMER = "customer"
    AGENT = "agent"
    BOT = "bot"
    SYSTEM = "system"


class ChatParticipant(str, enum.Enum):
    """A human side of a conversation: who ended it, or who is reading it."""

    CUSTOMER = "customer"
    AGENT = "agent"
