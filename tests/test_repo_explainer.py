"""
Unit tests for the explain/chat orchestration
"""

import asyncio
import pytest
from unittest.mock import AsyncMock

from conftest import TEST_URL
from reex.core.exceptions import (
    CompletionError,
    ConversationNotFoundError,
    InvalidUrlError,
    ReadmeNotFoundError,
    RepositoryNotFoundError,
)
from reex.services.repo_explainer import CHAT_ERROR, EXPLAIN_ERROR, EXPLAIN_FALLBACK, RepoExplainService


class TestExplain:
    """Test RepoExplainService.explain"""

    def test_first_explain_creates_conversation(self, explain_service, store, mock_github):
        result = asyncio.run(explain_service.explain(TEST_URL))

        assert result.model_dump(by_alias=True, exclude_none=True) == {
            "explanation": "World",
            "conversationId": 1,
            "repoContext": "Hello",
        }
        conversations = store.list_conversations()
        assert len(conversations) == 1
        assert conversations[0].title == "octocat/Hello-World"

        messages = store.list_messages(1)
        assert [(m.is_user, m.content) for m in messages] == [(True, TEST_URL), (False, "World")]
        mock_github.check_exists.assert_called_once_with("octocat", "Hello-World")
        mock_github.fetch_readme.assert_called_once_with("octocat", "Hello-World")
        mock_github.fetch_structure.assert_not_called()

    def test_explain_reuses_given_conversation(self, explain_service, store):
        first = asyncio.run(explain_service.explain(TEST_URL))
        second = asyncio.run(explain_service.explain(TEST_URL, conversation_id=first.conversation_id))

        assert second.conversation_id == first.conversation_id
        assert len(store.list_conversations()) == 1
        assert len(store.list_messages(first.conversation_id)) == 4

    def test_unknown_conversation_rejected_before_network(self, explain_service, store, mock_github, mock_llm):
        with pytest.raises(ConversationNotFoundError):
            asyncio.run(explain_service.explain(TEST_URL, conversation_id=999))
        mock_github.check_exists.assert_not_called()
        mock_llm.complete.assert_not_called()
        assert store.list_conversations() == []

    def test_non_github_url_touches_nothing(self, explain_service, store, mock_github, mock_llm):
        with pytest.raises(InvalidUrlError):
            asyncio.run(explain_service.explain("https://gitlab.com/x/y"))

        mock_github.check_exists.assert_not_called()
        mock_github.fetch_readme.assert_not_called()
        mock_llm.complete.assert_not_called()
        assert store.list_conversations() == []

    def test_missing_repository(self, explain_service, store, mock_github, mock_llm):
        mock_github.check_exists.return_value = False
        with pytest.raises(RepositoryNotFoundError):
            asyncio.run(explain_service.explain(TEST_URL))
        mock_github.fetch_readme.assert_not_called()
        mock_llm.complete.assert_not_called()
        assert store.list_conversations() == []

    def test_missing_readme(self, explain_service, store, mock_github, mock_llm):
        mock_github.fetch_readme.side_effect = ReadmeNotFoundError()
        with pytest.raises(ReadmeNotFoundError):
            asyncio.run(explain_service.explain(TEST_URL))
        mock_llm.complete.assert_not_called()
        assert store.list_conversations() == []

    def test_completion_failure_writes_nothing(self, explain_service, store, mock_llm):
        mock_llm.complete.side_effect = CompletionError(EXPLAIN_ERROR)
        with pytest.raises(CompletionError):
            asyncio.run(explain_service.explain(TEST_URL))
        assert store.list_conversations() == []

    def test_passes_explain_fallback_and_error_message(self, explain_service, mock_llm):
        asyncio.run(explain_service.explain(TEST_URL))
        kwargs = mock_llm.complete.call_args.kwargs
        assert kwargs["fallback"] == EXPLAIN_FALLBACK
        assert kwargs["error_message"] == EXPLAIN_ERROR

    def test_includes_repo_details_when_enabled(self, store, mock_github, mock_llm):
        mock_github.fetch_structure.return_value = "src/main.py"
        mock_github.fetch_key_files.return_value = {"package.json": '{"name": "hello"}'}
        service = RepoExplainService(store, mock_github, mock_llm, include_repo_details=True)

        result = asyncio.run(service.explain(TEST_URL))

        assert result.repo_structure == "src/main.py"
        assert result.key_files == {"package.json": '{"name": "hello"}'}
        prompt = mock_llm.complete.call_args.args[0]
        assert "src/main.py" in prompt
        assert "### package.json" in prompt

    def test_repo_detail_failures_degrade_gracefully(self, store, mock_github, mock_llm):
        mock_github.fetch_structure.side_effect = RuntimeError("tree exploded")
        mock_github.fetch_key_files.side_effect = RuntimeError("raw host down")
        service = RepoExplainService(store, mock_github, mock_llm, include_repo_details=True)

        result = asyncio.run(service.explain(TEST_URL))

        assert result.explanation == "World"
        assert result.repo_structure is None
        assert result.key_files is None


class TestChat:
    """Test RepoExplainService.chat"""

    def test_chat_appends_exchange(self, explain_service, store, mock_llm):
        conversation_id = asyncio.run(explain_service.explain(TEST_URL)).conversation_id
        mock_llm.complete = AsyncMock(return_value="MIT")

        response = asyncio.run(explain_service.chat("What license?", conversation_id, repo_context="Hello"))

        assert response == "MIT"
        messages = store.list_messages(conversation_id)
        assert [(m.is_user, m.content) for m in messages[-2:]] == [(True, "What license?"), (False, "MIT")]
        prompt = mock_llm.complete.call_args.args[0]
        assert "**Repository README:**\nHello" in prompt
        assert prompt.endswith("User question: What license?")

    def test_chat_without_context_uses_generic_prompt(self, explain_service, store, mock_llm):
        conversation = store.create_conversation("Scratch")
        asyncio.run(explain_service.chat("What is CI?", conversation.id))
        prompt = mock_llm.complete.call_args.args[0]
        assert "coding in general" in prompt

    def test_unknown_conversation_writes_nothing(self, explain_service, store, mock_llm):
        with pytest.raises(ConversationNotFoundError) as exc_info:
            asyncio.run(explain_service.chat("What license?", 999))
        assert exc_info.value.status_code == 404
        mock_llm.complete.assert_not_called()
        assert store.list_messages(999) == []

    def test_completion_failure_writes_nothing(self, explain_service, store, mock_llm):
        conversation = store.create_conversation("a/b")
        mock_llm.complete.side_effect = CompletionError(CHAT_ERROR)
        with pytest.raises(CompletionError):
            asyncio.run(explain_service.chat("hi", conversation.id))
        assert store.list_messages(conversation.id) == []
