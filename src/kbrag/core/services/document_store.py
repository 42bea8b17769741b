"""Knowledge-base document loading."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from ...common.utils import strip_bom
from ..domain import Document
from ..domain.exceptions import LoadError

logger = logging.getLogger(__name__)


def load_documents(source_directory: Path | str) -> list[Document]:
    """Read every text file directly inside ``source_directory``.

    The filename (with extension) becomes the document id and the full
    decoded content becomes its text. Subdirectories, hidden files and files
    that are not valid UTF-8 are skipped. Files are returned in filename
    order so ids and embeddings stay paired across runs.

    Args:
        source_directory: Directory holding the knowledge-base files.

    Returns:
        Loaded documents, sorted by id.

    Raises:
        LoadError: If the directory does not exist or cannot be listed.
    """
    directory = Path(source_directory)
    if not directory.is_dir():
        raise LoadError(
            f"Knowledge-base directory not found: {directory}",
            context={"directory": str(directory)},
        )

    try:
        entries = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise LoadError(
            f"Knowledge-base directory is not readable: {directory}",
            cause=e,
            context={"directory": str(directory)},
        ) from e

    documents: list[Document] = []
    for path in entries:
        if path.name.startswith(".") or not path.is_file():
            continue
        try:
            raw = path.read_bytes().decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Skipping non-text file in knowledge base: %s", path.name)
            continue
        except OSError as e:
            logger.warning("Skipping unreadable file %s: %s", path.name, e)
            continue
        documents.append(Document(id=path.name, text=strip_bom(raw)))

    logger.debug("Loaded %d documents from %s", len(documents), directory)
    return documents


class DocumentStore:
    """Immutable, ordered collection of knowledge-base documents."""

    def __init__(self, documents: list[Document] | tuple[Document, ...] = ()) -> None:
        ids = [doc.id for doc in documents]
        if len(ids) != len(set(ids)):
            raise ValueError("Document ids must be unique")
        self._documents: tuple[Document, ...] = tuple(documents)

    @classmethod
    def from_directory(cls, source_directory: Path | str) -> DocumentStore:
        """Load a store, falling back to an empty one if the directory is unusable."""
        try:
            documents = load_documents(source_directory)
        except LoadError as e:
            logger.warning("%s - continuing without context documents", e.message)
            return cls()
        logger.info("Document store loaded %d documents", len(documents))
        return cls(documents)

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)
