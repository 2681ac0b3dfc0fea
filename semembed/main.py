"""Embedding service main application."""

import sys
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
import structlog

from .api.routes import router as api_router
from .common.config import EmbeddingConfig
from .common.logging import configure_logging
from .common.metrics import MetricsCollector
from .encoders.embedding_manager import load_engine
from .exceptions import InvalidRequestError, ModelLoadError, SemembedError
from .pipelines.embedding_pipeline import EmbeddingOrchestrator
from .runtime.inference_gate import InferenceGate
from .runtime.state import ServiceState

SERVICE_NAME = "semembed"

logger = structlog.get_logger("semembed")


def build_state(config: EmbeddingConfig) -> ServiceState:
    """Load the engine and assemble the process-wide state.

    Blocking; raises ``ModelLoadError`` if the model cannot be loaded.
    """
    model_name = config.model_name
    engine = load_engine(
        model_name,
        device=config.semembed_device,
        normalize=config.semembed_normalize_embeddings
    )
    return ServiceState(
        model_name=model_name,
        gate=InferenceGate(engine),
        metrics=MetricsCollector(SERVICE_NAME),
    )


def _attach_state(app: FastAPI, state: ServiceState) -> None:
    app.state.service = state
    app.state.orchestrator = EmbeddingOrchestrator(state)


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request body"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if location:
        return f"Invalid request body: {location}: {first.get('msg')}"
    return f"Invalid request body: {first.get('msg')}"


def create_app(
    state: Optional[ServiceState] = None,
    config: Optional[EmbeddingConfig] = None
) -> FastAPI:
    """Build the FastAPI application.

    With ``state`` the app serves immediately (used by the CLI entrypoint and
    tests). Without it the model is loaded during lifespan startup, before
    the server accepts connections.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager."""
        if getattr(app.state, "service", None) is None:
            service_config = config or EmbeddingConfig()
            configure_logging(SERVICE_NAME, service_config.semembed_log_level, service_config.semembed_log_format)
            logger.info("Starting semembed service")
            _attach_state(app, await run_in_threadpool(build_state, service_config))

        logger.info("Embedding service started", model=app.state.service.model_name)
        yield
        logger.info("Embedding service shutdown complete")

    app = FastAPI(
        title="semembed",
        description="OpenAI-compatible text embedding service",
        version="0.1.0",
        lifespan=lifespan
    )

    if state is not None:
        _attach_state(app, state)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        """Log every request and add a processing time header."""
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = str(process_time)
        logger.info(
            "HTTP request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(process_time * 1000, 3)
        )
        return response

    @app.exception_handler(SemembedError)
    async def semembed_error_handler(request: Request, exc: SemembedError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Undecodable bodies are invalid requests, counted like any other failure."""
        service: Optional[ServiceState] = getattr(request.app.state, "service", None)
        if service is not None and request.url.path == "/v1/embeddings":
            service.metrics.record_request()
            service.metrics.record_error()

        error = InvalidRequestError(_describe_validation_error(exc))
        logger.warning("Rejected undecodable request", path=request.url.path, error=error.message)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"error": {"message": "Internal server error", "type": "internal_error"}}
        )

    app.include_router(api_router)
    return app


app = create_app()


def main() -> None:
    """Console entrypoint: load the model, then serve."""
    config = EmbeddingConfig()
    configure_logging(SERVICE_NAME, config.semembed_log_level, config.semembed_log_format)
    logger.info("Starting semembed service")

    try:
        state = build_state(config)
    except ModelLoadError as e:
        logger.error("Startup failed", error=e.message)
        sys.exit(1)

    logger.info("Listening", host=config.semembed_host, port=config.semembed_port)
    uvicorn.run(
        create_app(state),
        host=config.semembed_host,
        port=config.semembed_port,
        log_level=config.semembed_log_level.lower()
    )


if __name__ == "__main__":
    main()
