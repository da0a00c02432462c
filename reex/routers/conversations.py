import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from reex.core.dependencies import get_conversation_store
from reex.core.exceptions import InternalError
from reex.models import Conversation, Message
from reex.schemas.conversation import ConversationCreate
from reex.services.conversation_store import ConversationStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@router.get("", response_model=List[Conversation], summary="List conversations, newest first")
async def list_conversations(store: ConversationStore = Depends(get_conversation_store)):
    try:
        return store.list_conversations()
    except Exception as e:
        logger.error(f"Get conversations error: {e}", exc_info=True)
        raise InternalError("Failed to fetch conversations") from e


@router.get(
    "/{conversation_id}/messages",
    response_model=List[Message],
    summary="List the messages of a conversation, oldest first",
)
async def list_messages(
    conversation_id: str,
    store: ConversationStore = Depends(get_conversation_store),
):
    """
    Unknown conversations yield an empty list; a non-numeric id is a 400.
    """
    try:
        parsed_id = int(conversation_id)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid conversation ID")

    try:
        return store.list_messages(parsed_id)
    except Exception as e:
        logger.error(f"Get messages error for conversation {parsed_id}: {e}", exc_info=True)
        raise InternalError("Failed to fetch messages") from e


@router.post("", response_model=Conversation, summary="Create an empty conversation")
async def create_conversation(
    conversation_data: ConversationCreate,
    store: ConversationStore = Depends(get_conversation_store),
):
    try:
        return store.create_conversation(title=conversation_data.title)
    except Exception as e:
        logger.error(f"Create conversation error: {e}", exc_info=True)
        raise InternalError("Failed to create conversation") from e
