import logging
import asyncio
from typing import Callable, Dict, Optional

from reex.core.exceptions import ConversationNotFoundError, RepositoryNotFoundError
from reex.schemas.explain import ExplainResponse
from reex.services.conversation_store import ConversationStore
from reex.services.github import GitHubService, parse_github_url
from reex.services.llm_service import LlmService
from reex.services.prompts import build_chat_prompt, build_explain_prompt
from reex.utils.tokenizer_service import TokenizerService

logger = logging.getLogger(__name__)

__all__ = ["RepoExplainService"]

EXPLAIN_FALLBACK = "I couldn't generate an explanation for this repository. Please try again."
EXPLAIN_ERROR = "Failed to generate repository explanation. Please check your API key and try again."
CHAT_FALLBACK = "I'm sorry, I couldn't process your question. Please try asking in a different way."
CHAT_ERROR = "Failed to process your message. Please try again."

class RepoExplainService:
    """
    Wires URL parsing, GitHub fetching, prompt building, completion and the
    conversation store together for the two request types: explaining a
    repository and chatting about it.

    Steps within one request run strictly in order; blocking GitHub calls are
    moved to worker threads so other requests keep making progress.
    """
    def __init__(
        self,
        store: ConversationStore,
        github_svc: GitHubService,
        llm_svc: Optional[LlmService] = None,
        include_repo_details: bool = True,
        tokenizer_svc: Optional[TokenizerService] = None,
        llm_provider: Optional[Callable[[], LlmService]] = None,
    ):
        if llm_svc is None and llm_provider is None:
            raise ValueError("RepoExplainService requires llm_svc or llm_provider.")
        self.store = store
        self.github_svc = github_svc
        self.llm_svc = llm_svc
        self.llm_provider = llm_provider
        self.include_repo_details = include_repo_details
        self.tokenizer_svc = tokenizer_svc

    async def explain(self, url: str, conversation_id: Optional[int] = None) -> ExplainResponse:
        """
        Explains the repository at ``url`` and records the exchange.

        Raises:
            InvalidUrlError: If ``url`` is not a GitHub repository URL.
            ConversationNotFoundError: If ``conversation_id`` is given but unknown.
            RepositoryNotFoundError: If the repository is missing or private.
            ReadmeNotFoundError: If no README candidate could be fetched.
            CompletionError: If the model call fails.
            ServiceUnavailableError: If the LLM client is not configured.
        """
        repo_info = parse_github_url(url)
        owner, repo = repo_info.owner, repo_info.repo

        if conversation_id is not None and self.store.get_conversation(conversation_id) is None:
            logger.warning(f"Explain requested for unknown conversation {conversation_id}")
            raise ConversationNotFoundError()

        exists = await asyncio.to_thread(self.github_svc.check_exists, owner, repo)
        if not exists:
            raise RepositoryNotFoundError()

        readme = await asyncio.to_thread(self.github_svc.fetch_readme, owner, repo)

        structure = ""
        key_files: Dict[str, str] = {}
        if self.include_repo_details:
            structure, key_files = await self._fetch_repo_details(owner, repo)

        prompt = build_explain_prompt(url, readme, structure, key_files)
        self._log_prompt_size("explain", prompt)
        explanation = await self._get_llm().complete(
            prompt,
            fallback=EXPLAIN_FALLBACK,
            error_message=EXPLAIN_ERROR,
        )

        if conversation_id is not None:
            conversation = self.store.get_conversation(conversation_id)
            if conversation is None:
                raise ConversationNotFoundError()
        else:
            conversation = self.store.create_conversation(title=repo_info.full_name)

        self.store.append_exchange(conversation.id, url, explanation)
        logger.info(f"Explained {repo_info.full_name} in conversation {conversation.id}")

        return ExplainResponse(
            explanation=explanation,
            conversation_id=conversation.id,
            repo_context=readme,
            repo_structure=structure or None,
            key_files=key_files or None,
        )

    async def chat(
        self,
        message: str,
        conversation_id: int,
        repo_context: Optional[str] = None,
        repo_structure: Optional[str] = None,
        key_files: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Answers a follow-up question, grounded in whatever context the caller
        resupplies, and records the exchange.

        Raises:
            ConversationNotFoundError: If the conversation does not exist. Nothing is written.
            CompletionError: If the model call fails.
            ServiceUnavailableError: If the LLM client is not configured.
        """
        if self.store.get_conversation(conversation_id) is None:
            logger.warning(f"Chat requested for unknown conversation {conversation_id}")
            raise ConversationNotFoundError()

        prompt = build_chat_prompt(message, repo_context, repo_structure, key_files)
        self._log_prompt_size("chat", prompt)
        response = await self._get_llm().complete(
            prompt,
            fallback=CHAT_FALLBACK,
            error_message=CHAT_ERROR,
        )

        self.store.append_exchange(conversation_id, message, response)
        return response

    def _get_llm(self) -> LlmService:
        # Resolved at completion time so input validation never waits on LLM configuration
        if self.llm_svc is None:
            self.llm_svc = self.llm_provider()
        return self.llm_svc

    async def _fetch_repo_details(self, owner: str, repo: str):
        """Structure listing and key files. Supplementary, so failures only degrade the prompt."""
        try:
            structure = await asyncio.to_thread(self.github_svc.fetch_structure, owner, repo)
        except Exception as e:
            logger.warning(f"Could not fetch structure for {owner}/{repo}: {e}", exc_info=True)
            structure = ""
        try:
            key_files = await asyncio.to_thread(self.github_svc.fetch_key_files, owner, repo)
        except Exception as e:
            logger.warning(f"Could not fetch key files for {owner}/{repo}: {e}", exc_info=True)
            key_files = {}
        return structure, key_files

    def _log_prompt_size(self, mode: str, prompt: str):
        if self.tokenizer_svc:
            logger.info(f"Built {mode} prompt ({self.tokenizer_svc.describe(prompt)})")
        else:
            logger.info(f"Built {mode} prompt ({len(prompt)} chars)")
