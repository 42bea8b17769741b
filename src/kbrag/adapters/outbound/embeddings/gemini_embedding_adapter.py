"""Google Gemini embedding adapter over the Generative Language REST API."""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from ....common.rate_limiter import RateLimiter
from ....core.domain.exceptions import (
    EmbeddingAPIError,
    EmbeddingError,
    EmbeddingRateLimitError,
    EmbeddingTimeoutError,
    MissingAPIKeyError,
)
from ....core.ports import EmbeddingPort

logger = logging.getLogger(__name__)

API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class GeminiEmbeddingAdapter(EmbeddingPort):
    """Embed text with a Gemini embedding model.

    Retries rate-limit, server and network failures with exponential backoff
    up to ``max_retries`` attempts; every other failure raises immediately.
    A failed call never yields a placeholder vector.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "models/text-embedding-004",
        timeout_s: float = 30.0,
        max_retries: int = 3,
        backoff_base_s: float = 1.0,
        rate_limiter: RateLimiter | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise MissingAPIKeyError(
                "Google API key not set. Set GOOGLE_API_KEY in the environment or .env file.",
            )
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.api_key = api_key
        self.model_name = model_name if model_name.startswith("models/") else f"models/{model_name}"
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.backoff_base_s = backoff_base_s
        self.rate_limiter = rate_limiter or RateLimiter(None, name="embedding")
        self._session = session or requests.Session()
        if self.rate_limiter.enabled:
            logger.info(
                "Embedding calls throttled to %d requests/minute",
                self.rate_limiter.requests_per_minute,
            )

    @property
    def endpoint(self) -> str:
        return f"{API_BASE_URL}/{self.model_name}:embedContent"

    def embed_query(self, text: str) -> list[float]:
        return self._embed(text, task_type="RETRIEVAL_QUERY")

    def embed_document(self, text: str) -> list[float]:
        return self._embed(text, task_type="RETRIEVAL_DOCUMENT")

    def _embed(self, text: str, task_type: str) -> list[float]:
        payload = {
            "model": self.model_name,
            "content": {"parts": [{"text": text}]},
            "taskType": task_type,
        }
        last_error: EmbeddingError | None = None

        for attempt in range(self.max_retries):
            if attempt:
                wait_time = self.backoff_base_s * 2 ** (attempt - 1)
                logger.warning(
                    "Embedding attempt %d/%d failed (%s), retrying in %.1fs",
                    attempt,
                    self.max_retries,
                    last_error.message if last_error else "unknown",
                    wait_time,
                )
                time.sleep(wait_time)

            self.rate_limiter.acquire()
            try:
                response = self._session.post(
                    self.endpoint,
                    json=payload,
                    headers={"x-goog-api-key": self.api_key},
                    timeout=self.timeout_s,
                )
            except requests.Timeout as e:
                last_error = EmbeddingTimeoutError(
                    f"Embedding request timed out after {self.timeout_s}s",
                    cause=e,
                    context={"model": self.model_name, "attempt": attempt + 1},
                )
                continue
            except requests.RequestException as e:
                last_error = EmbeddingAPIError(
                    f"Embedding request failed: {e}",
                    cause=e,
                    context={"model": self.model_name, "attempt": attempt + 1},
                )
                continue

            if response.status_code == 200:
                return self._parse_values(response)

            context = {
                "model": self.model_name,
                "status_code": response.status_code,
                "attempt": attempt + 1,
            }
            if response.status_code == 429:
                last_error = EmbeddingRateLimitError(
                    "Embedding API rate limit exceeded", context=context
                )
            else:
                last_error = EmbeddingAPIError(
                    f"Embedding API returned HTTP {response.status_code}: {response.text[:200]}",
                    context=context,
                )
            if response.status_code not in RETRYABLE_STATUS_CODES:
                raise last_error

        assert last_error is not None
        raise last_error

    def _parse_values(self, response: Any) -> list[float]:
        try:
            values = response.json()["embedding"]["values"]
        except (ValueError, KeyError, TypeError) as e:
            raise EmbeddingAPIError(
                "Embedding API response did not contain embedding values",
                cause=e,
                context={"model": self.model_name},
            ) from e
        if not values:
            raise EmbeddingAPIError(
                "Embedding API returned an empty vector", context={"model": self.model_name}
            )
        return [float(v) for v in values]
