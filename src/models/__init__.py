# Import all models so SQLAlchemy metadata is populated for Alembic autogenerate
from src.models.chat_message import ChatMessage
from src.models.conversation import Conversation
from src.models.enums import ChatParticipant, ConversationStatus, SenderRole

__all__ = [
    "ChatMessage",
    "ChatParticipant",
    "Conversation",
    "ConversationStatus",
    "SenderRole",
]
