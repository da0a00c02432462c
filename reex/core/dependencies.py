import logging
import threading
from typing import Optional
from fastapi import Depends
from reex.core.config import settings
from reex.core.exceptions import ServiceUnavailableError
from reex.services.conversation_store import ConversationStore
from reex.services.github import GitHubService
from reex.services.llm_service import LlmService
from reex.services.repo_explainer import RepoExplainService
from reex.utils.tokenizer_service import TokenizerService

logger = logging.getLogger(__name__)

# --- Caching Instances ---
# One instance of each per process; the store is the only shared mutable state.
# Sync dependencies run in threadpool workers, so first-time creation is locked.
_conversation_store_instance: Optional[ConversationStore] = None
_github_service_instance: Optional[GitHubService] = None
_llm_service_instance: Optional[LlmService] = None
_tokenizer_service_instance: Optional[TokenizerService] = None
_instance_lock = threading.Lock()
# --- End Caching Instances ---

def get_conversation_store() -> ConversationStore:
    """
    Dependency function to get the process-wide ConversationStore.
    """
    global _conversation_store_instance
    if _conversation_store_instance is None:
        with _instance_lock:
            if _conversation_store_instance is None:
                _conversation_store_instance = ConversationStore()
                logger.info("ConversationStore initialized (in-memory, not persisted).")
    return _conversation_store_instance

def get_github_service() -> GitHubService:
    """
    Dependency function to get the GitHubService instance.
    Initializes it on first call from settings.
    """
    global _github_service_instance
    if _github_service_instance is None:
        with _instance_lock:
            if _github_service_instance is None:
                _github_service_instance = GitHubService(
                    api_url=settings.GITHUB_API_URL,
                    raw_url=settings.GITHUB_RAW_URL,
                    token=settings.GITHUB_TOKEN,
                    timeout=settings.HTTP_TIMEOUT_SECONDS,
                    max_tree_entries=settings.STRUCTURE_MAX_FILES,
                    max_file_chars=settings.KEY_FILE_MAX_CHARS,
                    key_files_budget=settings.KEY_FILES_TIME_BUDGET_SECONDS,
                )
    return _github_service_instance

def get_llm_service() -> LlmService:
    """
    Provides a singleton instance of LlmService.

    RepoExplainService calls this only when it is about to run a completion,
    so request validation is never blocked by missing LLM configuration.

    Raises:
        ServiceUnavailableError: 503 if the API key is missing or the client cannot be created.
    """
    global _llm_service_instance
    if _llm_service_instance is None:
        with _instance_lock:
            if _llm_service_instance is None:
                if not settings.GOOGLE_API_KEY or not settings.MODEL_NAME:
                    logger.error("LLM configuration is missing: set GOOGLE_API_KEY (or GEMINI_API_KEY) and MODEL_NAME.")
                    raise ServiceUnavailableError("LLM configuration is missing in environment variables.")

                try:
                    _llm_service_instance = LlmService(
                        api_key=settings.GOOGLE_API_KEY,
                        default_model=settings.MODEL_NAME,
                        timeout_seconds=settings.LLM_TIMEOUT_SECONDS,
                    )
                except ConnectionError as e:
                    logger.error(f"Could not initialize LlmService: {e}")
                    raise ServiceUnavailableError("Could not initialize LLM service.") from e

    return _llm_service_instance

def get_tokenizer_service() -> TokenizerService:
    global _tokenizer_service_instance
    if _tokenizer_service_instance is None:
        with _instance_lock:
            if _tokenizer_service_instance is None:
                _tokenizer_service_instance = TokenizerService()
    return _tokenizer_service_instance

def get_repo_explain_service(
    store: ConversationStore = Depends(get_conversation_store),
    github_svc: GitHubService = Depends(get_github_service),
    tokenizer_svc: TokenizerService = Depends(get_tokenizer_service),
) -> RepoExplainService:
    """
    Provides a RepoExplainService per request, built from the shared store and clients.
    The LLM client is resolved on first use rather than here.
    """
    return RepoExplainService(
        store=store,
        github_svc=github_svc,
        llm_provider=get_llm_service,
        include_repo_details=settings.INCLUDE_REPO_DETAILS,
        tokenizer_svc=tokenizer_svc,
    )
