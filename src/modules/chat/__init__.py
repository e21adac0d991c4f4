"""Chat module — customer support conversations with a keyword auto-responder."""

from src.modules.chat.conversation_store import ConversationStore
from src.modules.chat.message_store import MessageStore
from src.modules.chat.responder import ResponderEngine, get_responder
from src.modules.chat.service import ChatService

__all__ = [
    "ChatService",
    "ConversationStore",
    "MessageStore",
    "ResponderEngine",
    "get_responder",
]
