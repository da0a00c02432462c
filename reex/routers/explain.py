import logging
from fastapi import APIRouter, Depends
from reex.core.dependencies import get_repo_explain_service
from reex.core.exceptions import InternalError, ReexError
from reex.schemas.explain import ExplainRequest, ExplainResponse
from reex.services.repo_explainer import RepoExplainService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["explain"])

@router.post(
    "/explain",
    response_model=ExplainResponse,
    response_model_exclude_none=True,
    summary="Explain a GitHub repository",
)
async def explain_repository(
    request: ExplainRequest,
    explain_service: RepoExplainService = Depends(get_repo_explain_service),
):
    """
    Fetches the repository README (plus structure and key files when enabled),
    asks the model for a structured write-up and records it in a conversation.
    """
    logger.info(f"Received explain request for '{request.url}' (conversation={request.conversation_id})")
    try:
        return await explain_service.explain(request.url, request.conversation_id)
    except ReexError:
        raise
    except Exception as e:
        logger.exception("Explain repository error:")
        raise InternalError(str(e) or "Failed to explain repository") from e
