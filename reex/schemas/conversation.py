from pydantic import BaseModel, Field

class ConversationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200, examples=["octocat/Hello-World"])
