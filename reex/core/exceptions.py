"""Domain errors raised by the ReEx services.

Each error carries the HTTP status it maps to and a human-readable message
that is safe to show to the user. ``reex.main`` turns them into
``{"message": ...}`` JSON responses.
"""
from typing import Optional
from fastapi import status

__all__ = [
    "ReexError",
    "InvalidUrlError",
    "RepositoryNotFoundError",
    "ReadmeNotFoundError",
    "ConversationNotFoundError",
    "CompletionError",
    "ServiceUnavailableError",
    "InternalError",
]


class ReexError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidUrlError(ReexError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid GitHub repository URL"


class RepositoryNotFoundError(ReexError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Repository not found or is private"


class ReadmeNotFoundError(ReexError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "README.md not found in this repository"


class ConversationNotFoundError(ReexError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Conversation not found"


class CompletionError(ReexError):
    default_message = "Failed to generate a response. Please try again."


class ServiceUnavailableError(ReexError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service is not configured. Please try again later."


class InternalError(ReexError):
    pass
