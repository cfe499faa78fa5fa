"""
Client for the external reasoning service (Google Gemini).

The rest of the game only sees the ReasoningService protocol, so tests
can swap in a fake that returns canned text.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, Optional, Protocol

from google import genai
from google.genai import types

from .config import OracleConfig


logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """Raised when the reasoning service cannot produce a response."""


class ReasoningService(Protocol):
    """A stateless text generation service."""

    def generate(
        self,
        prompt: str,
        *,
        model: str,
        temperature: float,
        response_schema: Optional[Dict[str, Any]] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        ...


class GeminiService:
    """
    ReasoningService backed by the google-genai SDK.

    The client is created on first use, so a missing API key only
    fails the remote calls and never the game start-up.
    """

    def __init__(self, config: Optional[OracleConfig] = None, client: Any = None):
        self.config = config or OracleConfig()
        self._client = client
        self._lock = threading.Lock()

    def _get_client(self):
        with self._lock:
            if self._client is None:
                api_key = self.config.get_api_key()
                if not api_key:
                    raise ServiceError(
                        "API key not set. Export one of: "
                        + ", ".join(self.config.API_KEY_ENV_VARS)
                    )
                self._client = genai.Client(
                    api_key=api_key,
                    http_options=types.HttpOptions(
                        timeout=int(self.config.REQUEST_TIMEOUT_S * 1000)
                    ),
                )
            return self._client

    def generate(
        self,
        prompt: str,
        *,
        model: str,
        temperature: float,
        response_schema: Optional[Dict[str, Any]] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: The full prompt.
            model: Model identifier, e.g. "gemini-2.5-flash".
            temperature: Sampling temperature.
            response_schema: Expected JSON shape; asks for a JSON response.
            max_output_tokens: Optional cap on the response length.

        Returns:
            The generated text.

        Raises:
            ServiceError: If no key is configured or the response is empty.
        """
        client = self._get_client()

        config_kwargs: Dict[str, Any] = {"temperature": temperature}
        if response_schema is not None:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_schema"] = response_schema
        if max_output_tokens is not None:
            config_kwargs["max_output_tokens"] = max_output_tokens

        logger.debug("Requesting %s (temperature=%s)", model, temperature)
        response = client.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(**config_kwargs),
        )

        text = response.text
        if not text:
            raise ServiceError(f"Empty response from {model}")
        return text
