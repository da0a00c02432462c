import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from reex.core.exceptions import ConversationNotFoundError
from reex.models.conversation import Conversation
from reex.models.message import Message

logger = logging.getLogger(__name__)

__all__ = ["ConversationStore"]

class ConversationStore:
    """
    Volatile, process-local store for conversations and their messages.

    Ids come from one counter per entity type, starting at 1 and never reused.
    Every write takes the same lock, so an id is assigned and its record
    inserted in one step even when handlers run in worker threads.
    Nothing survives a process restart.
    """
    def __init__(self):
        self._conversations: Dict[int, Conversation] = {}
        self._messages: Dict[int, Message] = {}
        self._next_conversation_id = 1
        self._next_message_id = 1
        self._lock = threading.Lock()

    # --- Conversations ---

    def create_conversation(self, title: str) -> Conversation:
        with self._lock:
            conversation = Conversation(
                id=self._next_conversation_id,
                title=title,
                created_at=datetime.now(timezone.utc),
            )
            self._next_conversation_id += 1
            self._conversations[conversation.id] = conversation
        logger.info(f"Created conversation {conversation.id} titled '{title}'")
        return conversation

    def get_conversation(self, conversation_id: int) -> Optional[Conversation]:
        return self._conversations.get(conversation_id)

    def list_conversations(self) -> List[Conversation]:
        """Returns all conversations, newest first."""
        with self._lock:
            conversations = list(self._conversations.values())
        return sorted(conversations, key=lambda c: (c.created_at, c.id), reverse=True)

    # --- Messages ---

    def create_message(self, conversation_id: int, content: str, is_user: bool) -> Message:
        """
        Appends a single message to an existing conversation.

        Raises:
            ConversationNotFoundError: If the conversation does not exist.
        """
        with self._lock:
            return self._insert_message(conversation_id, content, is_user)

    def append_exchange(
        self,
        conversation_id: int,
        user_content: str,
        assistant_content: str,
    ) -> Tuple[Message, Message]:
        """
        Appends a user message immediately followed by the assistant reply.

        Both are written under one lock acquisition, so concurrent requests on
        the same conversation never interleave inside a pair.
        """
        with self._lock:
            user_message = self._insert_message(conversation_id, user_content, True)
            assistant_message = self._insert_message(conversation_id, assistant_content, False)
        logger.debug(
            f"Appended messages {user_message.id}/{assistant_message.id} to conversation {conversation_id}"
        )
        return user_message, assistant_message

    def list_messages(self, conversation_id: int) -> List[Message]:
        """Returns the messages of one conversation, oldest first."""
        with self._lock:
            messages = [m for m in self._messages.values() if m.conversation_id == conversation_id]
        return sorted(messages, key=lambda m: (m.created_at, m.id))

    def _insert_message(self, conversation_id: int, content: str, is_user: bool) -> Message:
        # Caller holds self._lock
        if conversation_id not in self._conversations:
            raise ConversationNotFoundError()
        message = Message(
            id=self._next_message_id,
            conversation_id=conversation_id,
            content=content,
            is_user=is_user,
            created_at=datetime.now(timezone.utc),
        )
        self._next_message_id += 1
        self._messages[message.id] = message
        return message
