"""Live chat service: conversation state machine and agent hand-off.

States per conversation:

* OPEN, no agent:  customer messages get a keyword auto-reply.
* OPEN, agent set: the first agent reply bound the agent; auto-replies stop.
* ENDED:           terminal; every further send is rejected.
"""

from __future__ import annotations

import logging
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.exceptions import (
    ConversationEndedException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from src.models.chat_message import ChatMessage
from src.models.conversation import Conversation
from src.models.enums import ChatParticipant, ConversationStatus, SenderRole
from src.modules.chat.constants import (
    AGENT_JOINED_TEXT,
    CHAT_ENDED_TEXTS,
    TERMINAL_STATUSES,
    WELCOME_TEXT,
)
from src.modules.chat.conversation_store import ConversationStore
from src.modules.chat.message_store import MessageStore
from src.modules.chat.responder import ResponderEngine, get_responder

logger = logging.getLogger(__name__)


def clean_text(text: str | None) -> str:
    """Trim a message body; reject it if empty, truncate it past the length cap."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationException("Message is empty")
    return cleaned[: settings.chat_message_max_length]


class ChatService:
    """The only entry point callers use; all chat writes go through here."""

    def __init__(self, db: AsyncSession, responder: ResponderEngine | None = None) -> None:
        self.db = db
        self.conversations = ConversationStore(db)
        self.messages = MessageStore(db)
        self.responder = responder or get_responder()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_conversation(
        self, conversation_id: uuid.UUID, lock: bool = False
    ) -> Conversation:
        conversation = await self.conversations.get(conversation_id, lock=lock)
        if conversation is None:
            raise NotFoundException(f"Conversation {conversation_id} not found")
        return conversation

    async def get_customer_conversation(
        self, customer_id: str, conversation_id: uuid.UUID, lock: bool = False
    ) -> Conversation:
        """Fetch a conversation and check that ``customer_id`` owns it."""
        conversation = await self.get_conversation(conversation_id, lock=lock)
        if conversation.customer_id != customer_id:
            raise ForbiddenException("You do not have access to this conversation")
        return conversation

    async def list_for_customer(self, customer_id: str) -> list[Conversation]:
        return await self.conversations.list_for_customer(
            customer_id, limit=settings.chat_customer_list_limit
        )

    async def list_for_admin(
        self, status: ConversationStatus | None = None
    ) -> list[Conversation]:
        return await self.conversations.list_for_admin(
            limit=settings.chat_admin_list_limit, status=status
        )

    async def get_messages(
        self, conversation_id: uuid.UUID, limit: int | None = None
    ) -> list[ChatMessage]:
        """Chronological history. Ownership is the transport layer's job."""
        await self.get_conversation(conversation_id)
        return await self.messages.list_by_conversation(conversation_id, limit)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open_for_customer(
        self, customer_id: str, order_context_id: str | None = None
    ) -> Conversation:
        """Resume the customer's OPEN conversation (for this order) or start a new one."""
        existing = await self.conversations.find_open_conversation(customer_id, order_context_id)
        if existing is not None:
            return existing

        conversation = await self.conversations.create(customer_id, order_context_id)
        await self.messages.append(
            conversation.id,
            SenderRole.SYSTEM,
            None,
            WELCOME_TEXT,
            read_by_customer=True,
        )
        logger.info(
            "Opened conversation %s for customer %s (order=%s)",
            conversation.id,
            customer_id,
            order_context_id,
        )
        return conversation

    async def end_chat(
        self,
        conversation_id: uuid.UUID,
        ended_by: ChatParticipant,
        caller_id: str | None = None,
    ) -> Conversation:
        """End a conversation. Ending an already ENDED conversation changes nothing."""
        conversation = await self.get_conversation(conversation_id, lock=True)
        if (
            ended_by == ChatParticipant.CUSTOMER
            and caller_id is not None
            and conversation.customer_id != caller_id
        ):
            raise ForbiddenException("You do not have access to this conversation")

        if conversation.status in TERMINAL_STATUSES:
            return conversation

        ended = await self.conversations.set_status(
            conversation.id, ConversationStatus.ENDED, ended_by=ended_by
        )
        if ended:
            await self.messages.append(
                conversation.id,
                SenderRole.SYSTEM,
                None,
                CHAT_ENDED_TEXTS[ended_by],
                read_by_customer=True,
                read_by_agent=True,
            )
            logger.info("Conversation %s ended by %s", conversation.id, ended_by.value)
        return await self.get_conversation(conversation.id)

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def _ensure_open(self, conversation: Conversation) -> None:
        if conversation.status in TERMINAL_STATUSES:
            raise ConversationEndedException("This chat has ended")

    async def customer_send(
        self, customer_id: str, conversation_id: uuid.UUID, text: str
    ) -> ChatMessage:
        """Append a customer message, plus a keyword auto-reply while no agent is bound.

        Returns the customer's own message; the auto-reply shows up in history.
        """
        body = clean_text(text)
        # Row lock serializes this send against a concurrent end_chat
        conversation = await self.get_customer_conversation(
            customer_id, conversation_id, lock=True
        )
        self._ensure_open(conversation)

        message = await self.messages.append(
            conversation.id,
            SenderRole.CUSTOMER,
            customer_id,
            body,
            read_by_customer=True,
        )
        await self.conversations.touch_last_message(conversation.id, body, message.created_at)

        # Re-read: an agent may have bound while the customer message was written
        current = await self.get_conversation(conversation.id)
        if current.agent_id is None:
            await self.messages.append(
                conversation.id,
                SenderRole.SYSTEM,
                None,
                self.responder.reply(body),
                read_by_customer=True,
            )
        return message

    async def admin_send(
        self, agent_id: str, conversation_id: uuid.UUID, text: str
    ) -> ChatMessage:
        """Append an agent reply. The first agent to reply is bound to the conversation."""
        body = clean_text(text)
        conversation = await self.get_conversation(conversation_id, lock=True)
        self._ensure_open(conversation)

        if conversation.agent_id is None:
            if await self.conversations.bind_agent(conversation.id, agent_id):
                await self.messages.append(
                    conversation.id,
                    SenderRole.SYSTEM,
                    None,
                    AGENT_JOINED_TEXT,
                    read_by_customer=True,
                    read_by_agent=True,
                )
                logger.info("Agent %s joined conversation %s", agent_id, conversation.id)
            else:
                logger.info(
                    "Agent %s lost the bind on conversation %s to another agent",
                    agent_id,
                    conversation.id,
                )

        await self.conversations.mark_unread_by_customer(conversation.id, True)
        message = await self.messages.append(
            conversation.id,
            SenderRole.AGENT,
            agent_id,
            body,
            read_by_agent=True,
        )
        await self.conversations.touch_last_message(conversation.id, body, message.created_at)
        return message

    # ------------------------------------------------------------------
    # Read bookkeeping
    # ------------------------------------------------------------------

    async def mark_read(
        self,
        conversation_id: uuid.UUID,
        reader: ChatParticipant,
        caller_id: str | None = None,
    ) -> int:
        """Flag messages as read by ``reader``. Best effort: store errors are logged only."""
        if reader == ChatParticipant.CUSTOMER and caller_id is not None:
            conversation = await self.get_customer_conversation(caller_id, conversation_id)
        else:
            conversation = await self.get_conversation(conversation_id)

        try:
            async with self.db.begin_nested():
                updated = await self.messages.mark_read(conversation.id, reader)
                if reader == ChatParticipant.CUSTOMER:
                    await self.conversations.mark_unread_by_customer(conversation.id, False)
        except SQLAlchemyError as exc:
            logger.warning(
                "Read flags not updated for conversation %s: %s", conversation.id, exc
            )
            return 0
        return updated
