import logging
from typing import Optional
import tiktoken
from tiktoken import Encoding

logger = logging.getLogger(__name__)

class TokenizerService:
    """Approximate token counts for prompts, used to log how large each request is."""

    def __init__(self, tokenizer_encoding: str = "cl100k_base"):
        self.tokenizer: Optional[Encoding] = self._load_tokenizer(tokenizer_encoding)
        if not self.tokenizer:
            logger.warning(
                f"Tokenizer with encoding '{tokenizer_encoding}' not available. "
                "Prompt sizes will be reported in characters only."
            )

    def _load_tokenizer(self, encoding_name: str) -> Optional[Encoding]:
        # get_encoding downloads the BPE file on first use, which can fail offline
        try:
            tokenizer = tiktoken.get_encoding(encoding_name)
            logger.info(f"Loaded tiktoken tokenizer with encoding: {encoding_name}")
            return tokenizer
        except Exception as e:
            logger.error(f"Failed to load tiktoken tokenizer encoding '{encoding_name}': {e}", exc_info=True)
            return None

    def count_tokens(self, text: str) -> Optional[int]:
        """Returns the token count of ``text``, or None when no tokenizer is loaded."""
        if not self.tokenizer:
            return None
        try:
            return len(self.tokenizer.encode(text))
        except Exception as e:
            logger.error(f"Error encoding text for token count: {e}", exc_info=True)
            return None

    def describe(self, text: str) -> str:
        tokens = self.count_tokens(text)
        if tokens is None:
            return f"{len(text)} chars"
        return f"{len(text)} chars, ~{tokens} tokens"
