"""Hugging Face Inference API client for free-form chat replies."""

import logging
from typing import Any, Optional

import httpx

from finpal.config import settings

logger = logging.getLogger(__name__)


class LlmServiceError(Exception):
    """Text generation failed: transport error, bad status or unusable payload."""


class HuggingFaceClient:
    """Text-generation client for the hosted inference endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.HF_API_KEY or ""
        self.base_url = (base_url or settings.HF_BASE_URL).rstrip("/")
        self.model = model or settings.HF_TEXT_MODEL
        self.timeout = timeout if timeout is not None else settings.LLM_TIMEOUT_SEC
        self._transport = transport
        if not self.api_key:
            raise ValueError("HF_API_KEY not set")

    async def generate(
        self,
        prompt: str,
        max_new_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        top_p: Optional[float] = None,
    ) -> str:
        """
        Generate a completion for `prompt`.
        Returns:
            The generated text, stripped.
        Raises:
            LlmServiceError on any failure, including an empty completion.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": max_new_tokens or settings.LLM_MAX_NEW_TOKENS,
                "temperature": temperature if temperature is not None else settings.LLM_TEMPERATURE,
                "top_p": top_p if top_p is not None else settings.LLM_TOP_P,
                "return_full_text": False,
                "do_sample": True,
            },
        }
        url = f"{self.base_url}/{self.model}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.post(url, headers=headers, json=payload)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise LlmServiceError(
                f"inference API returned {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise LlmServiceError(f"inference API call failed: {e}") from e

        text = _generated_text(data)
        if not text:
            raise LlmServiceError("inference API returned no generated_text")
        return text


class DisabledLlmClient:
    """Stand-in used when no provider is configured; every call fails."""

    def __init__(self, reason: str = "text generation disabled"):
        self.reason = reason

    async def generate(self, prompt: str, **_: Any) -> str:
        raise LlmServiceError(self.reason)


def _generated_text(data: Any) -> str:
    # The endpoint answers either [{"generated_text": ...}] or {"generated_text": ...}
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        text = data.get("generated_text")
        if isinstance(text, str):
            return text.strip()
    return ""
