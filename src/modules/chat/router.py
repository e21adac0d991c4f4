"""Live chat routers — customer surface (/chat) and admin console surface (/admin/chat)."""

import uuid

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.database.session import get_db
from src.models.enums import ChatParticipant, ConversationStatus
from src.modules.chat.schemas import (
    ConversationEnvelope,
    ConversationListEnvelope,
    ConversationResponse,
    MessageEnvelope,
    MessageListEnvelope,
    MessageResponse,
    OpenChatRequest,
    ReadReceiptEnvelope,
    SendMessageRequest,
)
from src.modules.chat.service import ChatService
from src.modules.identity.auth import CallerIdentity, require_admin, require_customer

customer_router = APIRouter(prefix="/chat", tags=["chat"])
admin_router = APIRouter(prefix="/admin/chat", tags=["admin-chat"])


def _caller_key(request: Request) -> str:
    """Rate-limit per authenticated caller, falling back to the client address."""
    caller = getattr(request.state, "caller", None)
    if caller is not None:
        return f"caller:{caller.id}"
    return get_remote_address(request)


limiter = Limiter(key_func=_caller_key)

_LIMIT_DESCRIPTION = f"Newest N messages, capped at {settings.chat_messages_max_limit}"


def _conversation(conversation) -> ConversationEnvelope:
    return ConversationEnvelope(conversation=ConversationResponse.model_validate(conversation))


def _messages(messages) -> MessageListEnvelope:
    return MessageListEnvelope(messages=[MessageResponse.model_validate(m) for m in messages])


# ---------------------------------------------------------------------------
# Customer surface
# ---------------------------------------------------------------------------


@customer_router.post("/open", response_model=ConversationEnvelope)
async def open_chat(
    body: OpenChatRequest | None = None,
    caller: CallerIdentity = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
):
    """Resume the caller's open conversation (for the given order) or start one."""
    svc = ChatService(db)
    conversation = await svc.open_for_customer(
        caller.id, order_context_id=body.order_id if body else None
    )
    return _conversation(conversation)


@customer_router.get("/mine", response_model=ConversationListEnvelope)
async def list_my_conversations(
    caller: CallerIdentity = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
):
    svc = ChatService(db)
    conversations = await svc.list_for_customer(caller.id)
    return ConversationListEnvelope(
        conversations=[ConversationResponse.model_validate(c) for c in conversations]
    )


@customer_router.get("/{conversation_id}/messages", response_model=MessageListEnvelope)
async def list_my_messages(
    conversation_id: uuid.UUID,
    limit: int | None = Query(None, ge=1, description=_LIMIT_DESCRIPTION),
    caller: CallerIdentity = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
):
    """Poll the history of one of the caller's conversations."""
    svc = ChatService(db)
    await svc.get_customer_conversation(caller.id, conversation_id)
    return _messages(await svc.get_messages(conversation_id, limit))


@customer_router.post("/{conversation_id}/messages", response_model=MessageEnvelope)
@limiter.limit(settings.chat_send_rate_limit)
async def customer_send(
    request: Request,
    conversation_id: uuid.UUID,
    body: SendMessageRequest,
    caller: CallerIdentity = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
):
    svc = ChatService(db)
    message = await svc.customer_send(caller.id, conversation_id, body.text)
    return MessageEnvelope(message=MessageResponse.model_validate(message))


@customer_router.patch("/{conversation_id}/end", response_model=ConversationEnvelope)
async def customer_end(
    conversation_id: uuid.UUID,
    caller: CallerIdentity = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
):
    svc = ChatService(db)
    conversation = await svc.end_chat(
        conversation_id, ChatParticipant.CUSTOMER, caller_id=caller.id
    )
    return _conversation(conversation)


@customer_router.patch("/{conversation_id}/read", response_model=ReadReceiptEnvelope)
async def customer_mark_read(
    conversation_id: uuid.UUID,
    caller: CallerIdentity = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
):
    svc = ChatService(db)
    updated = await svc.mark_read(conversation_id, ChatParticipant.CUSTOMER, caller_id=caller.id)
    return ReadReceiptEnvelope(updated=updated)


# ---------------------------------------------------------------------------
# Admin surface
# ---------------------------------------------------------------------------


@admin_router.get("/conversations", response_model=ConversationListEnvelope)
async def admin_list_conversations(
    status: ConversationStatus | None = Query(None),
    _admin: CallerIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """All conversations, most recently updated first."""
    svc = ChatService(db)
    conversations = await svc.list_for_admin(status=status)
    return ConversationListEnvelope(
        conversations=[ConversationResponse.model_validate(c) for c in conversations]
    )


@admin_router.get(
    "/conversations/{conversation_id}/messages", response_model=MessageListEnvelope
)
async def admin_list_messages(
    conversation_id: uuid.UUID,
    limit: int | None = Query(None, ge=1, description=_LIMIT_DESCRIPTION),
    _admin: CallerIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = ChatService(db)
    return _messages(await svc.get_messages(conversation_id, limit))


@admin_router.post("/conversations/{conversation_id}/messages", response_model=MessageEnvelope)
@limiter.limit(settings.chat_send_rate_limit)
async def admin_send(
    request: Request,
    conversation_id: uuid.UUID,
    body: SendMessageRequest,
    admin: CallerIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Reply as an agent. The first reply binds the agent and silences the auto-responder."""
    svc = ChatService(db)
    message = await svc.admin_send(admin.id, conversation_id, body.text)
    return MessageEnvelope(message=MessageResponse.model_validate(message))


@admin_router.patch("/conversations/{conversation_id}/end", response_model=ConversationEnvelope)
async def admin_end(
    conversation_id: uuid.UUID,
    _admin: CallerIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = ChatService(db)
    conversation = await svc.end_chat(conversation_id, ChatParticipant.AGENT)
    return _conversation(conversation)


@admin_router.patch("/conversations/{conversation_id}/read", response_model=ReadReceiptEnvelope)
async def admin_mark_read(
    conversation_id: uuid.UUID,
    _admin: CallerIdentity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    svc = ChatService(db)
    updated = await svc.mark_read(conversation_id, ChatParticipant.AGENT)
    return ReadReceiptEnvelope(updated=updated)
