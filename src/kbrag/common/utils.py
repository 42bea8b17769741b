"""Common text utilities.

Text handling contract
----------------------
* Knowledge-base files keep their full content; only a leading BOM is dropped
  (``strip_bom``).
* Provider output goes through ``clean_text``, where normalization is opt-out.
"""

import unicodedata


def clean_text(text: str, *, normalize: bool = True, ascii_only: bool = False) -> str:
    """Remove BOM markers and optionally normalize/ASCII-fold text.

    Args:
        text: Input text that may contain BOM or special characters.
        normalize: Whether to apply NFKC normalization. Enabled by default.
        ascii_only: Whether to discard non-ASCII characters.

    Returns:
        Cleaned text with BOMs removed and optional normalization applied.
    """
    if not text:
        return ""

    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    if normalize:
        cleaned = unicodedata.normalize("NFKC", cleaned)
    if ascii_only:
        cleaned = cleaned.encode("ascii", errors="ignore").decode("ascii")
    return cleaned


def strip_bom(text: str) -> str:
    """Drop a single leading byte-order mark, leaving the rest untouched."""
    return text[1:] if text.startswith("\ufeff") else text


def preview(text: str, limit: int = 80) -> str:
    """Single-line preview of ``text`` for tables and log lines."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    return flat[: limit - 3].rstrip() + "..."
