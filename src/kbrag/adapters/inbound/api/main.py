"""FastAPI chat relay for the knowledge-base RAG engine."""

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .... import __version__
from ....common.exception_handler import (
    format_exception_json,
    get_http_status_code,
    log_exception,
)
from ....composition.container import get_engine
from ....config.logging import setup_logging
from ....config.settings import get_settings
from ....core.domain.exceptions import InvalidArgumentError, RagEngineError
from .routers import chat, health

logger = logging.getLogger(__name__)

# Debug mode includes stack traces in error bodies
DEBUG_MODE = os.getenv("DEBUG", "false").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the index before serving; a document that fails to embed aborts startup."""
    settings = get_settings()
    setup_logging(settings.log_level, json_format=settings.log_json)
    logger.info("kbrag API starting up...")
    engine = get_engine()
    logger.info("Engine ready with %d indexed documents", len(engine.index))
    yield
    logger.info("kbrag API shutting down...")


app = FastAPI(
    title="kbrag API",
    description="Answers chat messages from a small knowledge base using retrieval-augmented generation.",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(chat.router)


@app.exception_handler(RagEngineError)
async def rag_engine_error_handler(request: Request, exc: RagEngineError) -> JSONResponse:
    """Return engine errors as structured JSON with a mapped status code."""
    level = logging.WARNING if isinstance(exc, InvalidArgumentError) else logging.ERROR
    log_exception(
        exc,
        level=level,
        extra_context={"path": str(request.url.path), "method": request.method},
    )
    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=exc.to_dict(include_trace=DEBUG_MODE),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return unhandled exceptions as structured JSON."""
    log_exception(exc, extra_context={"path": str(request.url.path), "method": request.method})
    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=format_exception_json(exc, include_trace=DEBUG_MODE),
    )


__all__ = ["app"]
