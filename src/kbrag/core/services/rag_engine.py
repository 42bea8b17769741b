"""Retrieval-augmented answer engine."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from ..domain import RagResult
from ..domain.exceptions import EmptyQueryError, InvalidArgumentError
from ..ports import EmbeddingPort, GenerationPort
from . import confidence
from .context_assembler import assemble
from .document_store import DocumentStore
from .prompts import DEFAULT_FALLBACK_ANSWER, build_system_instruction, build_user_prompt
from .similarity_index import SimilarityIndex, validate_top_k

if TYPE_CHECKING:
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 3


class PipelineStage(Enum):
    """Stages a single request moves through, in order."""

    IDLE = "idle"
    EMBEDDING = "embedding"
    RETRIEVING = "retrieving"
    ASSEMBLING = "assembling"
    GENERATING = "generating"
    SCORING = "scoring"
    DONE = "done"
    FAILED = "failed"


class RagEngine:
    """Answer questions from an immutable, pre-built similarity index.

    Each call to ``answer`` runs embed -> retrieve -> assemble -> generate ->
    score once, with no retries and no state carried between calls. Provider
    errors propagate to the caller unchanged.
    """

    def __init__(
        self,
        index: SimilarityIndex,
        embedder: EmbeddingPort,
        generator: GenerationPort,
        top_k: int = DEFAULT_TOP_K,
        fallback_answer: str = DEFAULT_FALLBACK_ANSWER,
    ) -> None:
        self.index = index
        self.embedder = embedder
        self.generator = generator
        self.top_k = validate_top_k(top_k)
        self.fallback_answer = fallback_answer
        self.system_instruction = build_system_instruction(fallback_answer)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        embedder: EmbeddingPort,
        generator: GenerationPort,
    ) -> RagEngine:
        """Load the configured knowledge base, index it and return an engine.

        A missing KB directory yields an engine with an empty index. A document
        that fails to embed aborts startup with IndexBuildError.
        """
        store = DocumentStore.from_directory(settings.kb_directory)
        index = SimilarityIndex.build(store, embedder)
        return cls(
            index,
            embedder,
            generator,
            top_k=settings.top_k,
            fallback_answer=settings.fallback_answer,
        )

    def handle_message(self, session_id: str, message: str) -> RagResult:
        """Inbound chat entry point. ``session_id`` is accepted but unused."""
        logger.debug("Message received for session %s", session_id)
        return self.answer(message)

    def answer(self, query: str) -> RagResult:
        """Answer ``query`` from the indexed documents.

        Raises:
            InvalidArgumentError: If the query is not a non-blank string.
            EmbeddingError: If the query could not be embedded.
            GenerationError: If the answer could not be generated.
        """
        if not isinstance(query, str):
            raise InvalidArgumentError(
                f"Query must be a string, got {type(query).__name__}",
            )
        question = query.strip()
        if not question:
            raise EmptyQueryError("Query cannot be empty or whitespace only")

        stage = PipelineStage.IDLE
        try:
            stage = self._enter(PipelineStage.EMBEDDING)
            query_embedding = self.embedder.embed_query(question)

            stage = self._enter(PipelineStage.RETRIEVING)
            ranked = self.index.top_k(query_embedding, self.top_k)

            stage = self._enter(PipelineStage.ASSEMBLING)
            context = assemble(ranked)
            if not context:
                logger.info("No context documents available; generating without context")

            stage = self._enter(PipelineStage.GENERATING)
            reply = self.generator.generate(
                self.system_instruction, build_user_prompt(context, question)
            )

            stage = self._enter(PipelineStage.SCORING)
            score = confidence.score(ranked)
        except Exception as e:
            logger.debug(
                "Pipeline %s at stage %s: %s",
                PipelineStage.FAILED.value,
                stage.value,
                type(e).__name__,
            )
            raise

        self._enter(PipelineStage.DONE)
        return RagResult(reply=reply, confidence=score, sources=tuple(ranked))

    @staticmethod
    def _enter(stage: PipelineStage) -> PipelineStage:
        logger.debug("Pipeline stage: %s", stage.value)
        return stage
