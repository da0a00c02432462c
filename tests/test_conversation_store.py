"""
Unit tests for the in-memory conversation store
"""

import pytest
from concurrent.futures import ThreadPoolExecutor

from reex.core.exceptions import ConversationNotFoundError
from reex.services.conversation_store import ConversationStore


class TestConversations:
    """Test conversation creation and listing"""

    def test_ids_start_at_one_and_increase(self, store):
        first = store.create_conversation("octocat/Hello-World")
        second = store.create_conversation("octocat/Spoon-Knife")
        assert (first.id, second.id) == (1, 2)
        assert first.title == "octocat/Hello-World"
        assert first.created_at <= second.created_at

    def test_get_conversation(self, store):
        created = store.create_conversation("a/b")
        assert store.get_conversation(created.id) == created
        assert store.get_conversation(999) is None

    def test_list_newest_first(self, store):
        titles = ["first", "second", "third"]
        for title in titles:
            store.create_conversation(title)
        assert [c.title for c in store.list_conversations()] == list(reversed(titles))

    def test_list_empty(self, store):
        assert store.list_conversations() == []

    def test_concurrent_creates_get_distinct_contiguous_ids(self):
        store = ConversationStore()
        count = 200
        with ThreadPoolExecutor(max_workers=16) as executor:
            conversations = list(executor.map(lambda i: store.create_conversation(f"repo-{i}"), range(count)))

        ids = [c.id for c in conversations]
        assert len(set(ids)) == count
        assert set(ids) == set(range(1, count + 1))
        assert len(store.list_conversations()) == count


class TestMessages:
    """Test message creation and retrieval"""

    def test_create_message(self, store):
        conversation = store.create_conversation("a/b")
        message = store.create_message(conversation.id, "hi", is_user=True)
        assert message.id == 1
        assert message.conversation_id == conversation.id
        assert message.is_user is True
        assert message.content == "hi"

    def test_rejects_unknown_conversation(self, store):
        with pytest.raises(ConversationNotFoundError):
            store.create_message(42, "orphan", is_user=True)
        with pytest.raises(ConversationNotFoundError):
            store.append_exchange(42, "q", "a")
        assert store.list_messages(42) == []

    def test_append_exchange_orders_user_then_assistant(self, store):
        conversation = store.create_conversation("a/b")
        user_msg, assistant_msg = store.append_exchange(conversation.id, "question", "answer")
        assert user_msg.is_user and not assistant_msg.is_user
        assert assistant_msg.id == user_msg.id + 1
        assert [m.content for m in store.list_messages(conversation.id)] == ["question", "answer"]

    def test_messages_isolated_and_ordered(self, store):
        first = store.create_conversation("a/b")
        second = store.create_conversation("c/d")
        store.append_exchange(first.id, "q1", "a1")
        store.append_exchange(second.id, "other-q", "other-a")
        store.append_exchange(first.id, "q2", "a2")

        messages = store.list_messages(first.id)
        assert [m.content for m in messages] == ["q1", "a1", "q2", "a2"]
        assert all(m.conversation_id == first.id for m in messages)
        assert [m.id for m in messages] == sorted(m.id for m in messages)
        assert all(a.created_at <= b.created_at for a, b in zip(messages, messages[1:]))

    def test_message_ids_never_repeat_across_conversations(self, store):
        first = store.create_conversation("a/b")
        second = store.create_conversation("c/d")
        ids = []
        for conversation in (first, second, first):
            ids.extend(m.id for m in store.append_exchange(conversation.id, "q", "a"))
        assert ids == [1, 2, 3, 4, 5, 6]

    def test_concurrent_exchanges_stay_paired(self):
        store = ConversationStore()
        conversation = store.create_conversation("a/b")
        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(
                lambda i: store.append_exchange(conversation.id, f"q{i}", f"a{i}"),
                range(50),
            ))

        messages = store.list_messages(conversation.id)
        assert len(messages) == 100
        assert len({m.id for m in messages}) == 100
        for user_msg, assistant_msg in zip(messages[::2], messages[1::2]):
            assert user_msg.is_user and not assistant_msg.is_user
            assert assistant_msg.content == "a" + user_msg.content[1:]

    def test_serializes_with_camel_case_aliases(self, store):
        conversation = store.create_conversation("a/b")
        message = store.create_message(conversation.id, "hi", is_user=False)
        data = message.model_dump(by_alias=True)
        assert set(data) == {"id", "conversationId", "content", "isUser", "createdAt"}
        assert set(conversation.model_dump(by_alias=True)) == {"id", "title", "createdAt"}
