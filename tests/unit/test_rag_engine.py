"""Unit tests for the RagEngine pipeline, including end-to-end scenarios."""

import logging
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from kbrag.config.settings import Settings
from kbrag.core.domain import Document, RagResult
from kbrag.core.domain.exceptions import (
    EmbeddingAPIError,
    EmbeddingError,
    EmptyQueryError,
    GenerationAPIError,
    GenerationError,
    IndexBuildError,
    InvalidArgumentError,
    InvalidTopKError,
)
from kbrag.core.services.prompts import DEFAULT_FALLBACK_ANSWER
from kbrag.core.services.rag_engine import RagEngine
from kbrag.core.services.similarity_index import SimilarityIndex

pytestmark = pytest.mark.unit


def engine_for(kb_dir, embedder, generator, top_k=3):
    settings = Settings(kb_directory=kb_dir, top_k=top_k, _env_file=None)
    return RagEngine.from_settings(settings, embedder, generator)


class TestEndToEnd:
    def test_password_question_cites_document_with_positive_confidence(
        self, temp_dir, embedder, generator
    ):
        (temp_dir / "password_reset.txt").write_text(
            "To reset your password click Forgot password and follow the email link.",
            encoding="utf-8",
        )
        engine = engine_for(temp_dir, embedder, generator)

        result = engine.answer("how do I reset my password")

        assert isinstance(result, RagResult)
        assert "password_reset.txt" in result.reply
        assert result.confidence > 0
        assert result.source_ids == ["password_reset.txt"]

    def test_empty_kb_replies_fallback_with_zero_confidence(self, temp_dir, embedder, generator):
        engine = engine_for(temp_dir, embedder, generator)

        result = engine.answer("what is the refund policy?")

        assert result.reply == DEFAULT_FALLBACK_ANSWER
        assert result.confidence == 0.0
        assert result.sources == ()

    def test_missing_kb_directory_behaves_like_empty(self, temp_dir, embedder, generator):
        engine = engine_for(temp_dir / "absent", embedder, generator)

        result = engine.answer("anything")

        assert result.reply == DEFAULT_FALLBACK_ANSWER
        assert result.confidence == 0.0

    def test_query_embedding_failure_surfaces_embedding_error(self, kb_dir, generator):
        embedder = MagicMock()
        embedder.embed_document.return_value = [1.0, 0.0]
        engine = engine_for(kb_dir, embedder, generator)
        embedder.embed_query.side_effect = EmbeddingAPIError("upstream 503")

        with pytest.raises(EmbeddingError):
            engine.answer("how do I reset my password")

        assert generator.calls == []

    def test_whitespace_query_rejected_without_external_calls(self):
        embedder = MagicMock()
        generator = MagicMock()
        engine = RagEngine(SimilarityIndex(), embedder, generator)

        with pytest.raises(InvalidArgumentError):
            engine.answer("   \t\n ")

        assert embedder.embed_query.call_count == 0
        assert embedder.embed_document.call_count == 0
        assert generator.generate.call_count == 0


class TestPipeline:
    def test_ranks_relevant_document_first(self, kb_dir, embedder, generator):
        engine = engine_for(kb_dir, embedder, generator)

        result = engine.answer("I need a refund on my invoice")

        assert result.sources[0].document.id == "billing.md"
        assert [s.score for s in result.sources] == sorted(
            (s.score for s in result.sources), reverse=True
        )

    def test_confidence_is_mean_of_included_scores(self, kb_dir, embedder, generator):
        engine = engine_for(kb_dir, embedder, generator, top_k=2)

        result = engine.answer("reset password email")

        expected = sum(s.score for s in result.sources) / len(result.sources)
        assert result.confidence == pytest.approx(expected)

    def test_top_k_limits_context(self, kb_dir, embedder, generator):
        engine = engine_for(kb_dir, embedder, generator, top_k=1)

        result = engine.answer("reset my password")

        assert len(result.sources) == 1
        _, user_prompt = generator.calls[0]
        assert "[DOC:password_reset.txt]" in user_prompt
        assert "[DOC:billing.md]" not in user_prompt

    def test_query_is_trimmed_and_embedded_once(self, kb_dir, embedder, generator):
        engine = engine_for(kb_dir, embedder, generator)
        embedder.query_calls.clear()

        engine.answer("  reset my password  ")
        engine.answer("reset my password")

        assert embedder.query_calls == ["reset my password", "reset my password"]
        assert len(embedder.document_calls) == 2

    def test_generator_receives_system_instruction_and_question(self, kb_dir, embedder, generator):
        engine = engine_for(kb_dir, embedder, generator)

        engine.answer("reset my password")

        system_instruction, user_prompt = generator.calls[0]
        assert system_instruction == engine.system_instruction
        assert DEFAULT_FALLBACK_ANSWER in system_instruction
        assert "reset my password" in user_prompt

    def test_generation_failure_propagates(self, kb_dir, embedder):
        generator = MagicMock()
        generator.generate.side_effect = GenerationAPIError("model unavailable")
        engine = engine_for(kb_dir, embedder, generator)

        with pytest.raises(GenerationError):
            engine.answer("reset my password")

    def test_no_retry_at_engine_level(self, kb_dir, embedder):
        generator = MagicMock()
        generator.generate.side_effect = GenerationAPIError("boom")
        engine = engine_for(kb_dir, embedder, generator)

        with pytest.raises(GenerationError):
            engine.answer("reset my password")

        assert generator.generate.call_count == 1

    def test_empty_string_query_is_empty_query_error(self):
        engine = RagEngine(SimilarityIndex(), MagicMock(), MagicMock())
        with pytest.raises(EmptyQueryError):
            engine.answer("")

    def test_non_string_query_rejected(self):
        engine = RagEngine(SimilarityIndex(), MagicMock(), MagicMock())
        with pytest.raises(InvalidArgumentError):
            engine.answer(None)

    def test_invalid_top_k_rejected_at_construction(self):
        with pytest.raises(InvalidTopKError):
            RagEngine(SimilarityIndex(), MagicMock(), MagicMock(), top_k=0)

    def test_handle_message_ignores_session_id(self, kb_dir, embedder, generator):
        engine = engine_for(kb_dir, embedder, generator)

        first = engine.handle_message("session-1", "reset my password")
        second = engine.handle_message("session-2", "reset my password")

        assert first == second

    def test_handle_message_validates_message(self):
        embedder = MagicMock()
        engine = RagEngine(SimilarityIndex(), embedder, MagicMock())
        with pytest.raises(InvalidArgumentError):
            engine.handle_message("s", "  ")
        embedder.embed_query.assert_not_called()

    def test_stage_transitions_logged(self, kb_dir, embedder, generator, caplog):
        engine = engine_for(kb_dir, embedder, generator)

        with caplog.at_level(logging.DEBUG, logger="kbrag.core.services.rag_engine"):
            engine.answer("reset my password")

        stages = [
            r.args[0] for r in caplog.records if r.getMessage().startswith("Pipeline stage:")
        ]
        assert stages == ["embedding", "retrieving", "assembling", "generating", "scoring", "done"]


class TestStartup:
    def test_document_embedding_failure_aborts_startup(self, kb_dir, generator):
        embedder = MagicMock()
        embedder.embed_document.side_effect = [[1.0, 0.0], EmbeddingAPIError("quota")]

        with pytest.raises(IndexBuildError) as exc_info:
            engine_for(kb_dir, embedder, generator)

        assert exc_info.value.extra_context["document_id"] == "password_reset.txt"

    def test_engine_shares_index_across_requests(self, kb_dir, embedder, generator):
        engine = engine_for(kb_dir, embedder, generator)
        before = engine.index.documents

        engine.answer("reset my password")
        engine.answer("refund my invoice")

        assert engine.index.documents == before
        assert all(isinstance(d, Document) for d in before)


class TestConcurrency:
    QUESTIONS = [
        "how do I reset my password",
        "where is my invoice",
        "refund to my card",
        "change account email",
        "billing settings",
        "something unrelated",
    ]

    def test_parallel_answers_match_serial_answers(self, kb_dir, embedder, generator):
        engine = engine_for(kb_dir, embedder, generator)
        serial = {q: engine.answer(q) for q in self.QUESTIONS}
        document_calls = list(embedder.document_calls)
        index_before = engine.index

        with ThreadPoolExecutor(max_workers=8) as pool:
            parallel = list(pool.map(engine.answer, self.QUESTIONS * 5))

        for question, result in zip(self.QUESTIONS * 5, parallel):
            assert result == serial[question]
        assert embedder.document_calls == document_calls
        assert engine.index is index_before
        assert len(embedder.query_calls) == len(self.QUESTIONS) * 6
