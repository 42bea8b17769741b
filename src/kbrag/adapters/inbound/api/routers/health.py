"""Health check endpoints."""

from fastapi import APIRouter, Depends

from ..... import __version__
from .....core.services.rag_engine import RagEngine
from ..deps import engine_dependency
from ..models import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(status="healthy", version=__version__)


@router.get("/ready", response_model=HealthResponse)
def readiness_check(engine: RagEngine = Depends(engine_dependency)) -> HealthResponse:
    """Readiness check reporting the indexed document count."""
    return HealthResponse(status="ready", version=__version__, documents=len(engine.index))
