import logging
import os
from typing import Optional

from crewai import LLM
from dotenv import load_dotenv

from bloomcare.config.constants import (
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_TEMPERATURE,
    GEMINI_KEY_PLACEHOLDER,
)

load_dotenv()

logger = logging.getLogger(__name__)


def has_valid_api_key(api_key: Optional[str]) -> bool:
    return bool(api_key) and api_key != GEMINI_KEY_PLACEHOLDER and len(api_key) > 10


def get_llm() -> Optional[LLM]:
    """
    Configures the LLM used for reports and chat, Gemini through LiteLLM.

    CrewAI accepts LiteLLM model strings, so any provider can be selected with
    LLM_MODEL. Returns None when no usable key is configured, which keeps the
    application on its deterministic path.

    Environment variables:
    - GEMINI_API_KEY: Gemini key (required for the AI path)
    - LLM_MODEL: LiteLLM model string (default gemini/gemini-1.5-flash)
    - LLM_TEMPERATURE: sampling temperature (default 0.4)
    """
    api_key = os.getenv("GEMINI_API_KEY")
    if not has_valid_api_key(api_key):
        logger.info("GEMINI_API_KEY missing or invalid, AI responses disabled")
        return None

    return LLM(
        model=os.getenv("LLM_MODEL", DEFAULT_LLM_MODEL),
        api_key=api_key,
        temperature=float(os.getenv("LLM_TEMPERATURE", DEFAULT_LLM_TEMPERATURE)),
    )
