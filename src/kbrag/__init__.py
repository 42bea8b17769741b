"""kbrag - retrieval-augmented answers from a small document collection."""

__version__ = "0.1.0"
