import logging
from typing import Any

logger = logging.getLogger(__name__)

PING_PROMPT = "Say hello in 5 words"


class AIServiceError(Exception):
    """Raised when the generative AI backend fails or returns nothing usable."""


class AIService:
    """Single request/response wrapper around a crewai LLM.

    No retries and no streaming: a failed call raises AIServiceError and the
    caller decides how to degrade.
    """

    def __init__(self, llm: Any):
        if llm is None:
            raise ValueError("AIService requires a configured LLM instance.")
        self.llm = llm

    def generate(self, prompt: str) -> str:
        try:
            response = self.llm.call(prompt)
        except Exception as e:
            raise AIServiceError(f"AI generation error: {str(e)}") from e

        text = self._extract_text(response)
        if not text:
            raise AIServiceError("AI generation error: empty response")
        return text

    def ping(self) -> bool:
        try:
            reply = self.generate(PING_PROMPT)
        except AIServiceError as e:
            logger.warning("AI backend ping failed: %s", e)
            return False
        logger.info("AI backend responded: %s", reply[:100])
        return True

    def _extract_text(self, response: Any) -> str:
        if response is None:
            return ""
        if hasattr(response, "raw"):
            response = response.raw
        return str(response).strip()
