"""Pydantic models for the chat relay API."""

from pydantic import BaseModel, Field

# Relay-level bound on inbound payloads; the engine itself has no limit
MAX_MESSAGE_LENGTH = 4000


class ChatRequest(BaseModel):
    """A chat message forwarded to the engine."""

    session_id: str = Field(..., description="Opaque caller session id (not used for memory)")
    message: str = Field(
        ...,
        max_length=MAX_MESSAGE_LENGTH,
        description="The user's question",
        json_schema_extra={"example": "How do I reset my password?"},
    )


class SourceInfo(BaseModel):
    """A knowledge-base document used as context."""

    id: str = Field(..., description="Document id (source filename)")
    score: float = Field(..., ge=-1, le=1, description="Cosine similarity to the question")


class ChatResponse(BaseModel):
    """Engine reply for one chat message."""

    reply: str = Field(..., description="Generated answer")
    confidence: float = Field(..., description="Mean similarity of context documents")
    sources: list[SourceInfo] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response model for health and readiness checks."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    documents: int | None = Field(None, description="Number of indexed documents")


class ErrorDetail(BaseModel):
    """Structured error detail information."""

    type: str = Field(..., description="Exception type name")
    code: str = Field(..., description="Error code (e.g., RAG_EMB_002)")
    message: str = Field(..., description="Human-readable error message")


class ErrorResponse(BaseModel):
    """Error body returned for failed requests."""

    error: ErrorDetail
