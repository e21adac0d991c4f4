"""Pydantic v2 schemas for the customer and admin chat endpoints."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import ChatParticipant, ConversationStatus, SenderRole

# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class OpenChatRequest(BaseModel):
    """Request body for POST /chat/open."""

    model_config = ConfigDict(populate_by_name=True)

    order_id: str | None = Field(None, alias="orderId", max_length=64)

    @field_validator("order_id", mode="before")
    @classmethod
    def blank_order_id_is_none(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None


class SendMessageRequest(BaseModel):
    """Request body for both send endpoints. Emptiness and length are checked by the service."""

    text: str


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class ConversationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    customer_id: str = Field(serialization_alias="customerId")
    agent_id: str | None = Field(None, serialization_alias="agentId")
    status: ConversationStatus
    order_context_id: str | None = Field(None, serialization_alias="orderContextId")
    last_message_preview: str = Field("", serialization_alias="lastMessagePreview")
    last_message_at: datetime | None = Field(None, serialization_alias="lastMessageAt")
    unread_by_customer: bool = Field(False, serialization_alias="unreadByCustomer")
    ended_by: ChatParticipant | None = Field(None, serialization_alias="endedBy")
    ended_at: datetime | None = Field(None, serialization_alias="endedAt")
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime = Field(serialization_alias="updatedAt")


class MessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    conversation_id: uuid.UUID = Field(serialization_alias="conversationId")
    sender_role: SenderRole = Field(serialization_alias="senderRole")
    sender_id: str | None = Field(None, serialization_alias="senderId")
    text: str
    read_by_customer: bool = Field(serialization_alias="readByCustomer")
    read_by_agent: bool = Field(serialization_alias="readByAgent")
    created_at: datetime = Field(serialization_alias="createdAt")


# ---------------------------------------------------------------------------
# Envelopes: every response carries ``success``
# ---------------------------------------------------------------------------


class ConversationEnvelope(BaseModel):
    success: bool = True
    conversation: ConversationResponse


class ConversationListEnvelope(BaseModel):
    success: bool = True
    conversations: list[ConversationResponse]


class MessageEnvelope(BaseModel):
    success: bool = True
    message: MessageResponse


class MessageListEnvelope(BaseModel):
    success: bool = True
    messages: list[MessageResponse]


class ReadReceiptEnvelope(BaseModel):
    success: bool = True
    updated: int = 0
