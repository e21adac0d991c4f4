"""Conversation model — one customer-support thread, optionally scoped to an order."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column

from src.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from src.models.enums import ChatParticipant, ConversationStatus


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class Conversation(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "chat_conversations"

    # Identities come from the auth service and are opaque here
    customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    agent_id: Mapped[str | None] = mapped_column(String(64))

    status: Mapped[ConversationStatus] = mapped_column(
        SQLAlchemyEnum(
            ConversationStatus,
            name="chat_conversation_status",
            values_callable=_enum_values,
        ),
        nullable=False,
        default=ConversationStatus.OPEN,
        server_default=ConversationStatus.OPEN.value,
    )
    order_context_id: Mapped[str | None] = mapped_column(String(64))

    # Denormalized preview for list views
    last_message_preview: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )
    last_message_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    unread_by_customer: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )

    ended_by: Mapped[ChatParticipant | None] = mapped_column(
        SQLAlchemyEnum(
            ChatParticipant,
            name="chat_participant",
            values_callable=_enum_values,
        )
    )
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        Index("ix_chat_conversations_customer", "customer_id", "status", "updated_at"),
        Index("ix_chat_conversations_agent", "agent_id", "status", "updated_at"),
        Index("ix_chat_conversations_order_context_id", "order_context_id"),
    )

    @property
    def is_open(self) -> bool:
        return self.status == ConversationStatus.OPEN

    def __repr__(self) -> str:
        return (
            f"<Conversation id={self.id} customer={self.customer_id} "
            f"agent={self.agent_id} status={self.status}>"
        )
