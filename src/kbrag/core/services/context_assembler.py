"""Serialize ranked documents into a prompt context block."""

from collections.abc import Sequence

from ..domain import ScoredDocument

DOCUMENT_SEPARATOR = "\n\n"


def format_document_block(scored: ScoredDocument) -> str:
    return f"[DOC:{scored.document.id}]\n{scored.document.text}"


def assemble(scored_docs: Sequence[ScoredDocument]) -> str:
    """Join documents as ``[DOC:<id>]`` blocks separated by a blank line.

    Ranking order is preserved and no separator trails the last block. An
    empty sequence yields an empty string.
    """
    return DOCUMENT_SEPARATOR.join(format_document_block(scored) for scored in scored_docs)
