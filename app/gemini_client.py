import json
import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from app.config import Config
from app.errors import (
    GENERATION_FAILED_MESSAGE,
    NETWORK_FAILED_MESSAGE,
    MalformedResponseError,
    TransportError,
)

logger = logging.getLogger(__name__)


class GeminiClient:
    def __init__(self, api_key: str = None, model: str = None, client=None):
        self.api_key = api_key or Config.GEMINI_API_KEY
        self.model = model or Config.GEMINI_MODEL
        if client is not None:
            self.client = client
        elif not self.api_key:
            logger.warning("GEMINI_API_KEY not set, generation will fail until it is configured")
            self.client = None
        else:
            self.client = genai.Client(api_key=self.api_key)

    def _require_client(self):
        if self.client is None:
            raise TransportError("GEMINI_API_KEY is missing", user_message=GENERATION_FAILED_MESSAGE)
        return self.client

    async def generate_json(self, instruction_text: str, output_schema: types.Schema) -> dict:
        """
        Single structured-output call. An empty answer decodes to {}.
        No retry: every failure goes straight back to the caller.
        """
        client = self._require_client()
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=instruction_text,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=output_schema,
                ),
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini returned {e.code}: {e}")
            raise TransportError(f"Gemini error {e.code}: {e}") from e
        except (httpx.TransportError, OSError) as e:
            logger.error(f"Gemini unreachable: {e}")
            raise TransportError(str(e), user_message=NETWORK_FAILED_MESSAGE) from e

        text = response.text or "{}"
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"Gemini payload is not JSON: {text[:200]}")
            raise MalformedResponseError(f"Invalid JSON from Gemini: {e}") from e

        if not isinstance(payload, dict):
            raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")
        return payload


gemini_client = GeminiClient()
