from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class ChatRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str = Field(..., min_length=1, examples=["What license does this project use?"])
    conversation_id: int = Field(..., description="Conversation the question belongs to.", examples=[1])
    repo_context: Optional[str] = Field(
        None,
        description="README text returned by /api/explain. Without it the assistant answers generically.",
    )
    repo_structure: Optional[str] = None
    key_files: Optional[Dict[str, str]] = None

class ChatResponse(BaseModel):
    response: str
