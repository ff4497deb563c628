"""
app/services/llm_service.py

Purpose: Gemini text generation over the REST API

- Single-prompt generateContent call via httpx
- Raises ExternalServiceError on transport or API failure
"""

from typing import Optional

import httpx

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger

logger = get_logger(__name__)


class LLMService:
    """Thin client for the Gemini generateContent endpoint."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key or settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.base_url = settings.GEMINI_BASE_URL.rstrip("/")
        self.timeout = settings.GEMINI_TIMEOUT

    async def generate(self, prompt: str) -> str:
        """
        Sends a prompt and returns the first candidate's text.

        Raises:
            ExternalServiceError: If the key is missing, the call fails or the reply is empty
        """
        if not self.api_key:
            raise ExternalServiceError("GEMINI_API_KEY not configured")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        body = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, params={"key": self.api_key}, json=body)
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            raise ExternalServiceError("Gemini request failed") from e

        if response.status_code != 200:
            logger.error(f"❌ Gemini API error: {response.status_code} - {response.text}")
            raise ExternalServiceError(f"Gemini API error: {response.status_code}")

        data = response.json()
        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            raise ExternalServiceError("Gemini returned no candidates") from e

        return "".join(part.get("text", "") for part in parts).strip()


# Global service instance
_llm_service: Optional[LLMService] = None


def get_llm_service() -> LLMService:
    """Get or create LLM service instance."""
    global _llm_service
    if _llm_service is None:
        _llm_service = LLMService()
    return _llm_service
