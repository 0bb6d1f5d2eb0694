import logging
import os

from finpal.config import settings
from finpal.providers.hf_llm import DisabledLlmClient, HuggingFaceClient

logger = logging.getLogger(__name__)


def get_llm_client():
    """Factory to return the text-generation client for the configured provider."""
    provider = os.getenv("LLM_PROVIDER", settings.LLM_PROVIDER).strip().lower()
    if provider in ("none", "off", "disabled"):
        return DisabledLlmClient("LLM_PROVIDER disabled")
    if provider != "huggingface":
        logger.warning("unknown LLM_PROVIDER %r; general chat will use canned replies", provider)
        return DisabledLlmClient(f"unknown provider {provider!r}")
    try:
        return HuggingFaceClient()
    except ValueError as e:
        logger.info("text generation unavailable: %s", e)
        return DisabledLlmClient(str(e))
