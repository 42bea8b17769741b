"""Chat relay endpoint."""

import logging

from fastapi import APIRouter, Depends

from .....core.services.rag_engine import RagEngine
from ..deps import engine_dependency
from ..models import ChatRequest, ChatResponse, ErrorResponse, SourceInfo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid message"},
        502: {"model": ErrorResponse, "description": "Embedding or generation provider failed"},
    },
)
def chat(request: ChatRequest, engine: RagEngine = Depends(engine_dependency)) -> ChatResponse:
    """Answer one chat message from the knowledge base.

    Declared sync so FastAPI runs it in the worker threadpool; provider calls
    block only their own request.
    """
    result = engine.handle_message(request.session_id, request.message)
    return ChatResponse(
        reply=result.reply,
        confidence=result.confidence,
        sources=[SourceInfo(id=s.document.id, score=s.score) for s in result.sources],
    )
