"""Message store — append-only chat log."""

from __future__ import annotations

import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.models.chat_message import ChatMessage
from src.models.enums import ChatParticipant, SenderRole


def clamp_limit(limit: int | None) -> int:
    """Bound a caller-supplied history size to [1, chat_messages_max_limit]."""
    if limit is None:
        limit = settings.chat_messages_default_limit
    return max(1, min(settings.chat_messages_max_limit, limit))


class MessageStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def append(
        self,
        conversation_id: uuid.UUID,
        sender_role: SenderRole,
        sender_id: str | None,
        text: str,
        *,
        read_by_customer: bool = False,
        read_by_agent: bool = False,
    ) -> ChatMessage:
        """Insert one message and flush so its created_at is fixed before returning."""
        message = ChatMessage(
            conversation_id=conversation_id,
            sender_role=sender_role,
            sender_id=sender_id,
            text=text,
            read_by_customer=read_by_customer,
            read_by_agent=read_by_agent,
        )
        self.db.add(message)
        await self.db.flush()
        return message

    async def list_by_conversation(
        self,
        conversation_id: uuid.UUID,
        limit: int | None = None,
    ) -> list[ChatMessage]:
        """The newest ``clamp_limit(limit)`` messages, returned oldest first.

        Messages sharing a ``created_at`` fall back to id order.
        """
        result = await self.db.execute(
            select(ChatMessage)
            .where(ChatMessage.conversation_id == conversation_id)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(clamp_limit(limit))
            .execution_options(populate_existing=True)
        )
        return list(reversed(result.scalars().all()))

    async def mark_read(self, conversation_id: uuid.UUID, reader: ChatParticipant) -> int:
        """Flag every message of the conversation as read by ``reader``."""
        column = (
            ChatMessage.read_by_customer
            if reader == ChatParticipant.CUSTOMER
            else ChatMessage.read_by_agent
        )
        result = await self.db.execute(
            update(ChatMessage)
            .where(ChatMessage.conversation_id == conversation_id, column.is_(False))
            .values({column: True})
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
