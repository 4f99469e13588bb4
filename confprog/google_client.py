"""Gemini API client wrapper for structured JSON generation."""

from __future__ import annotations

import json
from typing import Any

from google import genai
from google.genai.types import GenerateContentConfig
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from confprog.utils.config import config


class RetryableFinishReasonError(RuntimeError):
    """Raised when model output ended with a retryable finish reason."""


RETRYABLE_FINISH_REASONS = {"RECITATION", "MAX_TOKENS"}


def normalize_finish_reason_name(finish_reason: Any) -> str:
    """Normalize a finish reason (enum or string) to an uppercase name."""
    if finish_reason is None:
        return ""
    if hasattr(finish_reason, "name"):
        return str(getattr(finish_reason, "name")).upper()
    value = str(finish_reason).strip()
    if value.startswith("FinishReason."):
        value = value.split(".", 1)[1]
    return value.upper()


def _raise_if_retryable(response: Any) -> None:
    candidates = getattr(response, "candidates", None)
    if not candidates:
        return
    name = normalize_finish_reason_name(getattr(candidates[0], "finish_reason", None))
    if name in RETRYABLE_FINISH_REASONS:
        raise RetryableFinishReasonError(f"Retryable finish_reason encountered: {name}")


class GeminiClient:
    """Wrapper for Google Gemini text generation with JSON output."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: Any | None = None,
    ):
        """Initialize Gemini client.

        Args:
            api_key: Google API key (defaults to GOOGLE_API_KEY)
            model: Model name (defaults to GEMINI_MODEL)
            client: Pre-built genai client, mainly for tests
        """
        self.model = model or config.gemini.model
        if client is not None:
            self.client = client
            return

        self.api_key = api_key or config.gemini.api_key
        if not self.api_key:
            raise ValueError("GOOGLE_API_KEY must be provided or set in environment")
        self.client = genai.Client(api_key=self.api_key)

    @retry(
        stop=stop_after_attempt(config.gemini.max_attempts),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((RetryableFinishReasonError,)),
        reraise=True,
    )
    def generate_json(
        self,
        prompt: str,
        response_schema: dict | None = None,
        temperature: float = 0.0,
    ) -> dict[str, Any]:
        """Run a prompt and parse the model's JSON reply.

        Raises:
            ValueError: the reply was not valid JSON
        """
        config_kwargs: dict[str, Any] = {
            "temperature": temperature,
            "response_mime_type": "application/json",
        }
        if response_schema:
            config_kwargs["response_schema"] = response_schema

        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=GenerateContentConfig(**config_kwargs),
        )
        _raise_if_retryable(response)

        return self._safe_json_parse(response.text or "", context="JSON generation")

    def _safe_json_parse(self, response_text: str, context: str = "") -> dict[str, Any]:
        try:
            return json.loads(response_text)
        except json.JSONDecodeError:
            preview = response_text[:200] if response_text else ""
            raise ValueError(
                f"Failed to parse JSON response ({context}). Preview: {preview}..."
            )
