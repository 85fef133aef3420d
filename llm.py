# llm.py
import logging
from typing import Optional

from google import genai

from settings import Settings

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Raised when the model could not produce a reply."""


class GeminiClient:
    """Single-shot text generation against the Gemini API."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.settings.API_KEY:
                raise LLMError("GEMINI_API_KEY environment variable is not set")
            self._client = genai.Client(api_key=self.settings.API_KEY)
        return self._client

    def generate(self, prompt: str) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.settings.MODEL_NAME,
                contents=prompt,
            )
        except LLMError:
            raise
        except Exception as e:
            raise LLMError(str(e)) from e

        text = response.text if hasattr(response, "text") else ""
        logger.info("Model %s replied with %s chars", self.settings.MODEL_NAME, len(text or ""))
        return text or ""
