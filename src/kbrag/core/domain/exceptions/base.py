"""Base exception classes for the knowledge-base RAG engine.

Every engine failure carries an error code, the raise site, an optional
cause and the HTTP status the chat relay answers with. ``to_dict`` gives the
JSON shape used by logs, the CLI and API error bodies.
"""

import inspect
import traceback
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any


@dataclass
class ExceptionContext:
    """Where an engine error was raised."""

    class_name: str
    method_name: str
    file_name: str
    line_number: int
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.class_name,
            "method": self.method_name,
            "file": self.file_name,
            "line": self.line_number,
            "timestamp": self.timestamp,
        }


UNKNOWN_LOCATION = ("<unknown>", "<unknown>", "<unknown>", 0)


def _raise_site(exc: BaseException) -> ExceptionContext:
    """First stack frame outside the exception's own constructors."""
    frame = inspect.currentframe()
    try:
        while frame and (
            frame.f_code.co_name == "_raise_site" or frame.f_locals.get("self") is exc
        ):
            frame = frame.f_back
        if frame is None:
            return ExceptionContext(*UNKNOWN_LOCATION)
        owner = frame.f_locals.get("self", frame.f_locals.get("cls"))
        if isinstance(owner, type):
            class_name = owner.__name__
        elif owner is not None:
            class_name = type(owner).__name__
        else:
            class_name = "<module>"
        return ExceptionContext(
            class_name=class_name,
            method_name=frame.f_code.co_name,
            file_name=Path(frame.f_code.co_filename).name,
            line_number=frame.f_lineno,
        )
    finally:
        del frame


class RagEngineError(Exception):
    """Base exception for all engine errors.

    Subclasses set ``error_code`` and, where the relay should not answer
    500, ``http_status``.

    Example:
        try:
            vector = embedder.embed_document(doc.text)
        except EmbeddingError as e:
            raise IndexBuildError(
                f"Failed to embed document '{doc.id}'",
                cause=e,
                context={"document_id": doc.id},
            ) from e
    """

    error_code: str = "RAG_ERR_001"
    http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception with message and optional context.

        Args:
            message: Human-readable error message.
            cause: The underlying exception that caused this error.
            context: Additional context as key-value pairs for debugging.
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.extra_context = context or {}
        self.location = _raise_site(self)

    @property
    def stack_trace(self) -> str | None:
        """Formatted traceback of the cause, if there is one."""
        if self.cause is None:
            return None
        return "".join(traceback.format_exception(self.cause))

    def to_dict(self, include_trace: bool = False) -> dict[str, Any]:
        """Convert exception to structured dictionary for JSON output.

        Args:
            include_trace: If True, include the cause's stack trace (debug mode).
        """
        result: dict[str, Any] = {
            "error": {
                "type": type(self).__name__,
                "code": self.error_code,
                "message": self.message,
            },
            "location": self.location.to_dict(),
        }

        if self.extra_context:
            result["context"] = self.extra_context

        trace = self.stack_trace if include_trace else None
        if trace:
            result["stack_trace"] = [line for line in trace.split("\n") if line.strip()]

        if self.cause:
            result["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }

        return result
