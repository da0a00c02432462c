# reex/models/message.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class Message(BaseModel):
    """
    One turn within a conversation, authored by the user or the assistant.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    conversation_id: int
    content: str
    is_user: bool
    created_at: datetime

    def __repr__(self):
        return f"<Message(id={self.id}, convo_id={self.conversation_id}, is_user={self.is_user})>"
