"""
Test configuration and fixtures for the ReEx test suite
"""

import os

# Keep test runs from writing a log file or picking up a real key
os.environ["LOG_FILE"] = ""
os.environ["GOOGLE_API_KEY"] = "test-key-123"

import pytest
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

from reex.services.conversation_store import ConversationStore
from reex.services.github import GitHubService
from reex.services.llm_service import LlmService
from reex.services.repo_explainer import RepoExplainService

TEST_URL = "https://github.com/octocat/Hello-World"


def make_response(status_code: int = 200, text: str = "", json_data=None):
    """Builds a stand-in for requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    response.json.return_value = json_data if json_data is not None else {}
    return response


@pytest.fixture
def store():
    return ConversationStore()


@pytest.fixture
def mock_github():
    """GitHub service stub: repo exists, README is 'Hello', no extra context"""
    github = Mock(spec=GitHubService)
    github.check_exists.return_value = True
    github.fetch_readme.return_value = "Hello"
    github.fetch_structure.return_value = ""
    github.fetch_key_files.return_value = {}
    return github


@pytest.fixture
def mock_llm():
    """Completion client stub that always answers 'World'"""
    llm = Mock(spec=LlmService)
    llm.complete = AsyncMock(return_value="World")
    return llm


@pytest.fixture
def explain_service(store, mock_github, mock_llm):
    return RepoExplainService(
        store=store,
        github_svc=mock_github,
        llm_svc=mock_llm,
        include_repo_details=False,
    )


@pytest.fixture
def mock_genai_client():
    """Mock google-genai client whose generate_content returns 'Generated text'"""
    client = Mock()
    client.models.generate_content.return_value = SimpleNamespace(text="Generated text", candidates=None)
    return client
