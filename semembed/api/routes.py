"""API routes for the embedding service."""

from fastapi import APIRouter, Depends, Request, Response
import structlog

from ..common.metrics import METRICS_CONTENT_TYPE, MetricsCollector
from ..exceptions import InternalError
from ..pipelines.embedding_pipeline import EmbeddingOrchestrator
from ..runtime.state import ServiceState
from .schemas import (
    EmbeddingRequest,
    EmbeddingResponse,
    ErrorResponse,
    HealthResponse,
    ModelsResponse,
)

logger = structlog.get_logger("semembed.api")

router = APIRouter()

_error_responses = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    500: {"model": ErrorResponse, "description": "Engine or internal error"},
}


async def get_service_state(request: Request) -> ServiceState:
    """Get the shared service state from application state."""
    return request.app.state.service


async def get_orchestrator(request: Request) -> EmbeddingOrchestrator:
    """Get the embeddings request handler from application state."""
    return request.app.state.orchestrator


async def get_metrics(request: Request) -> MetricsCollector:
    """Get the metrics collector from application state."""
    return request.app.state.service.metrics


@router.post("/v1/embeddings", response_model=EmbeddingResponse, responses=_error_responses)
async def create_embeddings(
    request: EmbeddingRequest,
    orchestrator: EmbeddingOrchestrator = Depends(get_orchestrator)
):
    """Create embeddings for one text or an ordered batch of texts."""
    return await orchestrator.create_embeddings(request)


@router.get("/health", response_model=HealthResponse)
async def health_check(state: ServiceState = Depends(get_service_state)):
    """Health check endpoint. Healthy whenever the process is serving."""
    return HealthResponse(status="healthy", model=state.model_name)


@router.get("/models", response_model=ModelsResponse)
async def list_models(state: ServiceState = Depends(get_service_state)):
    """List the single loaded model."""
    return ModelsResponse(models=[state.model_name])


@router.get("/metrics", responses={500: {"model": ErrorResponse}})
async def metrics(metrics_collector: MetricsCollector = Depends(get_metrics)):
    """Prometheus metrics endpoint."""
    try:
        metrics_data = metrics_collector.get_metrics()
    except Exception as e:
        logger.error("Failed to encode metrics", error=str(e))
        raise InternalError("Failed to encode metrics") from e
    return Response(content=metrics_data, media_type=METRICS_CONTENT_TYPE)
