from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings
from typing import Optional

load_dotenv()

class Settings(BaseSettings):
    # LLM settings
    GOOGLE_API_KEY: str = Field(
        default="",
        validation_alias=AliasChoices("GOOGLE_API_KEY", "GEMINI_API_KEY", "GOOGLE_AI_API_KEY"),
    )
    MODEL_NAME: str = "gemini-2.5-flash"
    LLM_TIMEOUT_SECONDS: float = 60.0

    # GitHub settings
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_RAW_URL: str = "https://raw.githubusercontent.com"
    GITHUB_TOKEN: Optional[str] = None # Optional, raises the API rate limit
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Context assembly
    INCLUDE_REPO_DETAILS: bool = True
    STRUCTURE_MAX_FILES: int = 100
    KEY_FILE_MAX_CHARS: int = 10000
    KEY_FILES_TIME_BUDGET_SECONDS: float = 20.0 # Total wall time for key file lookups

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "reex.log"

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
