import logging
import asyncio
from typing import Optional
from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from google.genai.types import GenerateContentResponse
from google.api_core import exceptions as google_exceptions

from reex.core.exceptions import CompletionError

logger = logging.getLogger(__name__)

__all__ = ['LlmService', 'DEFAULT_EMPTY_FALLBACK']

DEFAULT_EMPTY_FALLBACK = "I couldn't generate a response. Please try again."

class LlmService:
    """
    Sends assembled prompts to Google's Generative AI models and returns text.

    Provider failures of any kind surface as CompletionError with a message
    that is safe to show to the user; the provider error itself is only
    logged.
    """
    def __init__(
        self,
        api_key: str,
        default_model: str,
        timeout_seconds: Optional[float] = None,
        client: Optional[genai.Client] = None,
    ):
        """
        Initializes the LlmService.

        Args:
            api_key (str): Google API Key for authenticating with the Google GenAI service.
            default_model (str): Default model name for text generation.
            timeout_seconds (Optional[float]): Per-request timeout for the GenAI HTTP client.
            client (Optional[genai.Client]): Pre-built client, mainly for tests.

        Raises:
            ConnectionError: If initialization of Google GenAI Client fails.
        """
        self.default_model = default_model

        logger.info(f"Initializing LlmService with default_model='{self.default_model}'")

        if client is not None:
            self.client = client
            return

        http_options = None
        if timeout_seconds:
            # HttpOptions.timeout is expressed in milliseconds
            http_options = genai_types.HttpOptions(timeout=int(timeout_seconds * 1000))

        try:
            self.client = genai.Client(api_key=api_key, http_options=http_options)
        except Exception as e:
            logger.error(f"Failed to initialize Google GenAI Client: {e}", exc_info=True)
            raise ConnectionError(f"Failed to initialize Google GenAI Client: {e}") from e

    async def complete(
        self,
        prompt: str,
        model: Optional[str] = None,
        fallback: str = DEFAULT_EMPTY_FALLBACK,
        error_message: Optional[str] = None,
    ) -> str:
        """
        Generates a non-streaming response for a fully assembled prompt.

        Args:
            prompt: The prompt text.
            model: LLM model name (defaults to instance default).
            fallback: Returned when the model succeeds but produces no text.
            error_message: User-facing message for the CompletionError raised on failure.

        Returns:
            The generated text, or ``fallback`` if it was empty.

        Raises:
            CompletionError: If the provider call fails for any reason.
        """
        effective_model = model or self.default_model
        logger.info(f"Generating response with model {effective_model}")
        logger.debug(f"Full Prompt:\n{prompt}")

        try:
            # Use asyncio.to_thread for the blocking SDK call
            response: GenerateContentResponse = await asyncio.to_thread(
                self.client.models.generate_content,
                model=effective_model,
                contents=prompt,
            )
            text_response = self._extract_text(response)
        except (genai_errors.APIError, google_exceptions.GoogleAPIError) as api_err:
            logger.error(f"Google API Error during generation with {effective_model}: {api_err}", exc_info=True)
            raise CompletionError(error_message) from api_err
        except Exception as e:
            logger.error(f"Unexpected error during generation with {effective_model}: {e}", exc_info=True)
            raise CompletionError(error_message) from e

        if not text_response or not text_response.strip():
            logger.warning(f"LLM returned no text with {effective_model}, using fallback response.")
            return fallback
        return text_response

    @staticmethod
    def _extract_text(response: GenerateContentResponse) -> Optional[str]:
        # Safer access to response text, common for Google GenAI library
        text = getattr(response, 'text', None)
        if text:
            return text
        candidates = getattr(response, 'candidates', None)
        if candidates:
            content = getattr(candidates[0], 'content', None)
            parts = getattr(content, 'parts', None) if content else None
            if parts:
                return getattr(parts[0], 'text', None)
        return None
