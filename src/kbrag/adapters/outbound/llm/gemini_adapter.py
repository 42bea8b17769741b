"""Google Gemini answer generator using the google-genai SDK."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from ....common.rate_limiter import RateLimiter
from ....common.utils import clean_text
from ....core.domain.exceptions import (
    EmptyGenerationError,
    GenerationAPIError,
    GenerationError,
    GenerationRateLimitError,
    GenerationTimeoutError,
    MissingAPIKeyError,
)
from ....core.ports import GenerationPort

if TYPE_CHECKING:
    from google import genai

logger = logging.getLogger(__name__)


def _is_rate_limit(exc: Exception) -> bool:
    if getattr(exc, "code", None) == 429:
        return True
    message = str(exc).lower()
    return "quota" in message or "rate limit" in message or "resource_exhausted" in message


def _is_timeout(exc: Exception) -> bool:
    return isinstance(exc, TimeoutError) or "timeout" in type(exc).__name__.lower()


def _is_server_error(exc: Exception) -> bool:
    code = getattr(exc, "code", None)
    return isinstance(code, int) and code >= 500


class GeminiGenerationAdapter(GenerationPort):
    """Generate context-grounded answers with a Gemini model.

    Rate-limit, timeout and server errors are retried with exponential backoff
    up to ``max_retries`` attempts. Anything else, or exhausting the attempts,
    raises a GenerationError; no substitute text is ever returned.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        temperature: float = 0.0,
        max_output_tokens: int = 300,
        timeout_s: float = 30.0,
        max_retries: int = 3,
        backoff_base_s: float = 1.0,
        rate_limiter: RateLimiter | None = None,
        client: Any | None = None,
    ) -> None:
        if not api_key and client is None:
            raise MissingAPIKeyError(
                "Google API key not set. Get one at https://aistudio.google.com/ "
                "and set GOOGLE_API_KEY in your .env file."
            )
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.api_key = api_key
        self.model_name = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.backoff_base_s = backoff_base_s
        self.rate_limiter = rate_limiter or RateLimiter(None, name="generation")
        self._client = client
        if self.rate_limiter.enabled:
            logger.info(
                "Generation calls throttled to %d requests/minute",
                self.rate_limiter.requests_per_minute,
            )

    def _get_client(self) -> genai.Client:
        """Lazy load the Gemini client."""
        if self._client is None:
            from google import genai
            from google.genai.types import HttpOptions

            self._client = genai.Client(
                api_key=self.api_key,
                http_options=HttpOptions(timeout=int(self.timeout_s * 1000)),
            )
            logger.info("Gemini client initialized for model: %s", self.model_name)

        return self._client

    def generate(self, system_instruction: str, user_prompt: str) -> str:
        from google.genai.types import GenerateContentConfig

        client = self._get_client()
        config = GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )
        context = {"model": self.model_name}
        last_error: GenerationError | None = None

        for attempt in range(self.max_retries):
            if attempt:
                wait_time = self.backoff_base_s * 2 ** (attempt - 1)
                logger.warning(
                    "Generation attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt,
                    self.max_retries,
                    last_error.message if last_error else "unknown",
                    wait_time,
                )
                time.sleep(wait_time)

            self.rate_limiter.acquire()
            try:
                response = client.models.generate_content(
                    model=self.model_name,
                    contents=user_prompt,
                    config=config,
                )
            except Exception as e:
                if _is_rate_limit(e):
                    last_error = GenerationRateLimitError(
                        "Generation rate limit exceeded", cause=e, context=context
                    )
                elif _is_timeout(e):
                    last_error = GenerationTimeoutError(
                        f"Generation timed out after {self.timeout_s}s", cause=e, context=context
                    )
                elif _is_server_error(e):
                    last_error = GenerationAPIError(
                        f"Generation provider error: {e}", cause=e, context=context
                    )
                else:
                    raise GenerationAPIError(
                        f"Generation request failed: {e}", cause=e, context=context
                    ) from e
                continue

            text = response.text if response.candidates else None
            if not text or not text.strip():
                raise EmptyGenerationError(
                    "Generation provider returned no text (possibly filtered)", context=context
                )
            return clean_text(text).strip()

        assert last_error is not None
        raise last_error
