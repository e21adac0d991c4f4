"""Tests for MessageStore: append ordering, history limits and read flags."""

from unittest.mock import patch

import pytest

from src.models.enums import ChatParticipant, SenderRole
from src.modules.chat.conversation_store import ConversationStore
from src.modules.chat.message_store import MessageStore, clamp_limit


class TestClampLimit:
    def test_none_uses_default(self):
        with patch("src.modules.chat.message_store.settings") as mock_settings:
            mock_settings.chat_messages_default_limit = 50
            mock_settings.chat_messages_max_limit = 200
            assert clamp_limit(None) == 50

    @pytest.mark.parametrize("requested, expected", [(0, 1), (-5, 1), (10, 10), (200, 200), (5000, 200)])
    def test_bounds(self, requested, expected):
        with patch("src.modules.chat.message_store.settings") as mock_settings:
            mock_settings.chat_messages_default_limit = 50
            mock_settings.chat_messages_max_limit = 200
            assert clamp_limit(requested) == expected


class TestAppendAndList:
    @pytest.mark.asyncio
    async def test_history_is_in_append_order(self, async_test_session):
        conversation = await ConversationStore(async_test_session).create("cust-1")
        store = MessageStore(async_test_session)

        texts = ["one", "two", "three", "four"]
        for text in texts:
            await store.append(conversation.id, SenderRole.CUSTOMER, "cust-1", text)

        history = await store.list_by_conversation(conversation.id)
        assert [m.text for m in history] == texts
        assert all(
            earlier.created_at < later.created_at
            for earlier, later in zip(history, history[1:])
        )

    @pytest.mark.asyncio
    async def test_limit_keeps_newest_in_ascending_order(self, async_test_session):
        conversation = await ConversationStore(async_test_session).create("cust-1")
        store = MessageStore(async_test_session)
        for i in range(5):
            await store.append(conversation.id, SenderRole.CUSTOMER, "cust-1", f"msg {i}")

        history = await store.list_by_conversation(conversation.id, limit=2)

        assert [m.text for m in history] == ["msg 3", "msg 4"]

    @pytest.mark.asyncio
    async def test_same_timestamp_falls_back_to_id_order(self, async_test_session):
        conversation = await ConversationStore(async_test_session).create("cust-1")
        store = MessageStore(async_test_session)
        first = await store.append(conversation.id, SenderRole.CUSTOMER, "cust-1", "a")
        second = await store.append(conversation.id, SenderRole.SYSTEM, None, "b")
        second.created_at = first.created_at
        await async_test_session.flush()

        history = await store.list_by_conversation(conversation.id)
        newest = await store.list_by_conversation(conversation.id, limit=1)

        expected = sorted([first.id, second.id])
        assert [m.id for m in history] == expected
        assert [m.id for m in newest] == expected[-1:]

    @pytest.mark.asyncio
    async def test_history_is_per_conversation(self, async_test_session):
        conversations = ConversationStore(async_test_session)
        first = await conversations.create("cust-1")
        second = await conversations.create("cust-2")
        store = MessageStore(async_test_session)

        await store.append(first.id, SenderRole.CUSTOMER, "cust-1", "mine")
        await store.append(second.id, SenderRole.CUSTOMER, "cust-2", "theirs")

        assert [m.text for m in await store.list_by_conversation(first.id)] == ["mine"]

    @pytest.mark.asyncio
    async def test_system_messages_have_no_sender(self, async_test_session):
        conversation = await ConversationStore(async_test_session).create("cust-1")
        store = MessageStore(async_test_session)

        message = await store.append(conversation.id, SenderRole.SYSTEM, None, "Chat started.")

        assert message.sender_id is None
        assert message.sender_role == SenderRole.SYSTEM
        assert message.read_by_customer is False
        assert message.read_by_agent is False


class TestMarkRead:
    @pytest.mark.asyncio
    async def test_marks_only_the_reader_side(self, async_test_session):
        conversation = await ConversationStore(async_test_session).create("cust-1")
        store = MessageStore(async_test_session)
        await store.append(conversation.id, SenderRole.AGENT, "agent-a", "hello", read_by_agent=True)
        await store.append(conversation.id, SenderRole.AGENT, "agent-a", "still there?", read_by_agent=True)

        assert await store.mark_read(conversation.id, ChatParticipant.CUSTOMER) == 2
        assert await store.mark_read(conversation.id, ChatParticipant.CUSTOMER) == 0
        assert await store.mark_read(conversation.id, ChatParticipant.AGENT) == 0

        history = await store.list_by_conversation(conversation.id)
        assert all(m.read_by_customer and m.read_by_agent for m in history)
