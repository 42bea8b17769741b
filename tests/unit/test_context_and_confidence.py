"""Unit tests for context assembly, confidence scoring and prompt text."""

import math

import pytest

from kbrag.core.domain import Document, ScoredDocument
from kbrag.core.services import confidence
from kbrag.core.services.context_assembler import assemble
from kbrag.core.services.prompts import (
    NO_CONTEXT_NOTICE,
    build_system_instruction,
    build_user_prompt,
)

pytestmark = pytest.mark.unit


def scored(doc_id: str, text: str, score: float) -> ScoredDocument:
    return ScoredDocument(document=Document(id=doc_id, text=text), score=score)


class TestAssemble:
    def test_empty_sequence_yields_empty_string(self):
        assert assemble([]) == ""

    def test_single_document_has_no_trailing_separator(self):
        assert assemble([scored("faq.txt", "Answer text", 0.9)]) == "[DOC:faq.txt]\nAnswer text"

    def test_blocks_separated_by_blank_line_in_ranking_order(self):
        result = assemble([scored("b.txt", "second", 0.9), scored("a.txt", "first", 0.4)])
        assert result == "[DOC:b.txt]\nsecond\n\n[DOC:a.txt]\nfirst"


class TestConfidence:
    def test_no_documents_is_exactly_zero(self):
        assert confidence.score([]) == 0.0

    def test_mean_of_scores(self):
        result = confidence.score([scored("a", "", 0.9), scored("b", "", 0.5), scored("c", "", 0.1)])
        assert math.isclose(result, 0.5)

    def test_stays_within_cosine_range(self):
        assert confidence.score([scored("a", "", -1.0), scored("b", "", -1.0)]) == -1.0
        assert 0.0 <= confidence.score([scored("a", "", 0.0), scored("b", "", 1.0)]) <= 1.0


class TestPrompts:
    def test_system_instruction_contains_fallback_and_citation_rule(self):
        instruction = build_system_instruction("Sorry, no idea.")
        assert "Sorry, no idea." in instruction
        assert "[DOC:" in instruction

    def test_user_prompt_embeds_context_and_literal_question(self):
        prompt = build_user_prompt("[DOC:a.txt]\nalpha", "what is alpha?")
        assert "[DOC:a.txt]\nalpha" in prompt
        assert "what is alpha?" in prompt
        assert NO_CONTEXT_NOTICE not in prompt

    def test_user_prompt_without_context_says_so(self):
        prompt = build_user_prompt("", "anything?")
        assert NO_CONTEXT_NOTICE in prompt
        assert "anything?" in prompt
