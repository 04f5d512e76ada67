"""Google Gemini client wrapper."""

import os
import logging
from typing import Any, List, Optional

import httpx
from google import genai
from google.genai import errors, types

from .exceptions import AdapterFailure

logger = logging.getLogger(__name__)

DEFAULT_MODEL = 'gemini-2.0-flash'


class GeminiClient:
    """Thin wrapper around the google-genai client.

    The underlying client is created on first use so that Lambda cold starts
    and tests that never touch the AI service do not need an API key.
    """

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        self.api_key = api_key or os.environ.get('GEMINI_API_KEY')
        self.model_name = model_name or os.environ.get('GEMINI_MODEL', DEFAULT_MODEL)
        self._client = None

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise AdapterFailure("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(
        self,
        contents: List[Any],
        json_output: bool = False,
        temperature: float = 0.2
    ) -> str:
        """
        Generate content and return the response text.

        Args:
            contents: Prompt parts (strings and ``types.Part`` objects)
            json_output: Ask the model for an ``application/json`` response
            temperature: Sampling temperature

        Returns:
            Response text, stripped

        Raises:
            AdapterFailure: If the API call fails, times out or returns no text
        """
        config = types.GenerateContentConfig(
            temperature=temperature,
            response_mime_type='application/json' if json_output else None
        )

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=contents,
                config=config
            )
        except errors.APIError as e:
            logger.error(f"Gemini request failed: {e}")
            raise AdapterFailure(f"Gemini request failed: {str(e)}")
        except httpx.HTTPError as e:
            # Timeouts and connection errors from the transport
            logger.error(f"Gemini transport error: {e!r}")
            raise AdapterFailure(f"Gemini transport error: {type(e).__name__}")

        text = (response.text or '').strip()
        if not text:
            raise AdapterFailure("Empty response from Gemini")

        return text

    @staticmethod
    def image_part(image_bytes: bytes, mime_type: str) -> types.Part:
        """Build an inline image part."""
        return types.Part.from_bytes(data=image_bytes, mime_type=mime_type)
