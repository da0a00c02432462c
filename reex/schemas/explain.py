from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

class ExplainRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str = Field(
        ...,
        min_length=1,
        description="GitHub repository URL to explain.",
        examples=["https://github.com/octocat/Hello-World"],
    )
    conversation_id: Optional[int] = Field(
        None,
        description="Optional conversation to append the explanation to. A new one is created when omitted.",
        examples=[1],
    )

class ExplainResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    explanation: str
    conversation_id: int
    repo_context: str = Field(..., description="Raw README text, to be sent back with follow-up chat requests.")
    repo_structure: Optional[str] = Field(None, description="Newline-separated file paths, when available.")
    key_files: Optional[Dict[str, str]] = Field(None, description="Well-known project files by name, when available.")
