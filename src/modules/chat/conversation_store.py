"""Conversation store — persistence and lookup of chat conversations."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.database.base import utcnow
from src.models.conversation import Conversation
from src.models.enums import ChatParticipant, ConversationStatus

logger = logging.getLogger(__name__)


class ConversationStore:
    """CRUD for conversations. Writes that race go through conditional UPDATEs."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def find_open_conversation(
        self,
        customer_id: str,
        order_context_id: str | None = None,
    ) -> Conversation | None:
        """Return the customer's most recent OPEN conversation (for that order, if given)."""
        query = select(Conversation).where(
            Conversation.customer_id == customer_id,
            Conversation.status == ConversationStatus.OPEN,
        )
        if order_context_id is not None:
            query = query.where(Conversation.order_context_id == order_context_id)
        query = (
            query.order_by(Conversation.updated_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def create(
        self,
        customer_id: str,
        order_context_id: str | None = None,
    ) -> Conversation:
        conversation = Conversation(
            customer_id=customer_id,
            order_context_id=order_context_id,
            status=ConversationStatus.OPEN,
        )
        self.db.add(conversation)
        await self.db.flush()
        return conversation

    async def get(self, conversation_id: uuid.UUID, lock: bool = False) -> Conversation | None:
        """Load a conversation. ``lock`` takes a row lock held until the transaction ends."""
        return await self.db.get(
            Conversation,
            conversation_id,
            populate_existing=True,
            with_for_update=lock or None,
        )

    async def list_for_customer(self, customer_id: str, limit: int) -> list[Conversation]:
        result = await self.db.execute(
            select(Conversation)
            .where(Conversation.customer_id == customer_id)
            .order_by(Conversation.updated_at.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def list_for_admin(
        self,
        limit: int,
        status: ConversationStatus | None = None,
    ) -> list[Conversation]:
        query = select(Conversation)
        if status is not None:
            query = query.where(Conversation.status == status)
        result = await self.db.execute(
            query.order_by(Conversation.updated_at.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def bind_agent(self, conversation_id: uuid.UUID, agent_id: str) -> bool:
        """Set agent_id only if it is still NULL. Returns True for the winning caller."""
        result = await self.db.execute(
            update(Conversation)
            .where(
                Conversation.id == conversation_id,
                Conversation.agent_id.is_(None),
            )
            .values(agent_id=agent_id, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def touch_last_message(
        self,
        conversation_id: uuid.UUID,
        text: str,
        at: datetime,
    ) -> None:
        await self.db.execute(
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(last_message_preview=text, last_message_at=at, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )

    async def set_status(
        self,
        conversation_id: uuid.UUID,
        status: ConversationStatus,
        ended_by: ChatParticipant | None = None,
    ) -> bool:
        """Move an OPEN conversation forward. Returns False if it was already terminal."""
        values: dict = {"status": status, "updated_at": utcnow()}
        if status == ConversationStatus.ENDED:
            values["ended_by"] = ended_by
            values["ended_at"] = values["updated_at"]
        result = await self.db.execute(
            update(Conversation)
            .where(
                Conversation.id == conversation_id,
                Conversation.status == ConversationStatus.OPEN,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def mark_unread_by_customer(self, conversation_id: uuid.UUID, unread: bool) -> None:
        await self.db.execute(
            update(Conversation)
            .where(Conversation.id == conversation_id)
            # Read bookkeeping must not reorder list views
            .values(unread_by_customer=unread, updated_at=Conversation.updated_at)
            .execution_options(synchronize_session=False)
        )
