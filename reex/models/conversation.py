# reex/models/conversation.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class Conversation(BaseModel):
    """
    A chat thread about one repository. Immutable once created.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    title: str
    created_at: datetime

    def __repr__(self):
        return f"<Conversation(id={self.id}, title='{self.title}')>"
