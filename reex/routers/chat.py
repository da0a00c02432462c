from fastapi import APIRouter, Depends
from reex.services.repo_explainer import RepoExplainService
import logging
from reex.schemas.chat import ChatRequest, ChatResponse
from reex.core.dependencies import get_repo_explain_service
from reex.core.exceptions import InternalError, ReexError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

@router.post("/chat", response_model=ChatResponse, summary="Ask a follow-up question")
async def chat_endpoint(
    request: ChatRequest,
    explain_service: RepoExplainService = Depends(get_repo_explain_service),
):
    """
    Answers a question within an existing conversation, grounded in the
    repository context the client sends back.
    """
    logger.info(f"Received chat request for conversation {request.conversation_id}")
    try:
        response = await explain_service.chat(
            message=request.message,
            conversation_id=request.conversation_id,
            repo_context=request.repo_context,
            repo_structure=request.repo_structure,
            key_files=request.key_files,
        )
        return ChatResponse(response=response)
    except ReexError:
        raise
    except Exception as e:
        logger.exception("Chat error:")
        raise InternalError(str(e) or "Failed to process chat message") from e
