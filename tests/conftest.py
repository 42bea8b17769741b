"""
Pytest configuration and shared fixtures.
"""

import re
import shutil
import tempfile
from pathlib import Path

import pytest

from kbrag.core.ports import EmbeddingPort, GenerationPort
from kbrag.core.services.prompts import DEFAULT_FALLBACK_ANSWER, NO_CONTEXT_NOTICE

VOCABULARY = (
    "password",
    "reset",
    "email",
    "invoice",
    "billing",
    "refund",
    "card",
    "account",
)

PASSWORD_DOC = (
    "To reset your password open the sign-in page and click Forgot password. "
    "We email you a reset link for your account."
)
BILLING_DOC = "Invoices are issued monthly under billing settings. A refund takes 5 days."


class KeywordEmbedder(EmbeddingPort):
    """Deterministic bag-of-words embedder over a fixed vocabulary."""

    def __init__(self) -> None:
        self.query_calls: list[str] = []
        self.document_calls: list[str] = []

    @staticmethod
    def vectorize(text: str) -> list[float]:
        words = re.findall(r"[a-z]+", text.lower())
        return [float(sum(1 for w in words if w.startswith(term))) for term in VOCABULARY]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        return self.vectorize(text)

    def embed_document(self, text: str) -> list[float]:
        self.document_calls.append(text)
        return self.vectorize(text)


class CitingGenerator(GenerationPort):
    """Test double for a compliant model: cites context ids or falls back."""

    def __init__(self, fallback: str = DEFAULT_FALLBACK_ANSWER) -> None:
        self.fallback = fallback
        self.calls: list[tuple[str, str]] = []

    def generate(self, system_instruction: str, user_prompt: str) -> str:
        self.calls.append((system_instruction, user_prompt))
        if NO_CONTEXT_NOTICE in user_prompt:
            return self.fallback
        ids = re.findall(r"\[DOC:([^\]]+)\]", user_prompt)
        return "See " + ", ".join(f"[DOC:{doc_id}]" for doc_id in ids)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (HTTP relay)")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test data."""
    dir_path = Path(tempfile.mkdtemp(prefix="kbrag_test_"))
    yield dir_path
    if dir_path.exists():
        shutil.rmtree(dir_path)


@pytest.fixture
def kb_dir(temp_dir):
    """Knowledge base with a password-reset and a billing document."""
    (temp_dir / "password_reset.txt").write_text(PASSWORD_DOC, encoding="utf-8")
    (temp_dir / "billing.md").write_text(BILLING_DOC, encoding="utf-8")
    return temp_dir


@pytest.fixture
def embedder():
    return KeywordEmbedder()


@pytest.fixture
def generator():
    return CitingGenerator()
