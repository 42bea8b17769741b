"""Composition root wiring adapters to the RAG engine."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..adapters.outbound.embeddings.gemini_embedding_adapter import GeminiEmbeddingAdapter
from ..adapters.outbound.embeddings.sentence_transformer_adapter import (
    SentenceTransformerEmbeddingAdapter,
)
from ..adapters.outbound.llm.gemini_adapter import GeminiGenerationAdapter
from ..common.rate_limiter import RateLimiter
from ..config.settings import Settings, get_settings
from ..core.ports import EmbeddingPort, GenerationPort
from ..core.services.rag_engine import RagEngine

logger = logging.getLogger(__name__)


def build_embedder(settings: Settings) -> EmbeddingPort:
    if settings.embedding_backend == "local":
        logger.info("Using local embedding model %s", settings.local_embedding_model)
        return SentenceTransformerEmbeddingAdapter(settings.local_embedding_model)

    logger.info("Using Gemini embedding model %s", settings.embedding_model)
    return GeminiEmbeddingAdapter(
        api_key=settings.google_api_key,
        model_name=settings.embedding_model,
        timeout_s=settings.request_timeout_s,
        max_retries=settings.max_retries,
        rate_limiter=RateLimiter(settings.embedding_requests_per_minute, name="embedding"),
    )


def build_generator(settings: Settings) -> GenerationPort:
    return GeminiGenerationAdapter(
        api_key=settings.google_api_key,
        model=settings.generation_model,
        temperature=settings.temperature,
        max_output_tokens=settings.max_answer_tokens,
        timeout_s=settings.request_timeout_s,
        max_retries=settings.max_retries,
        rate_limiter=RateLimiter(settings.llm_requests_per_minute, name="generation"),
    )


def build_engine(settings: Settings) -> RagEngine:
    """Build a fully wired engine. Embeds the whole knowledge base."""
    logger.info("Initializing RagEngine from %s...", settings.kb_directory)
    return RagEngine.from_settings(settings, build_embedder(settings), build_generator(settings))


@lru_cache
def get_engine() -> RagEngine:
    """Process-wide engine singleton, built on first use."""
    return build_engine(get_settings())
