"""FastAPI entry point for the Better Projects AI service"""

# src/better_projects_ai/main.py

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from starlette.exceptions import HTTPException as StarletteHTTPException

from better_projects_ai.config import Settings, get_settings
from better_projects_ai.errors import AIServiceError
from better_projects_ai.models import HealthResponse
from better_projects_ai.routes import router as ai_router
from better_projects_ai.services.summary_cache import SummaryCache
from better_projects_ai.services.summary_service import SummaryService
from better_projects_ai.services.task_draft_service import TaskDraftService
from better_projects_ai.utils.llm_client import LLMClient
from better_projects_ai.workspace import WorkspaceStore, sample_workspace

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(
    settings: Optional[Settings] = None,
    llm_client: Optional[LLMClient] = None,
    workspace: Optional[WorkspaceStore] = None,
) -> FastAPI:
    """Build the application. Services are created on startup and dropped on shutdown."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events"""
        logger.info(f"🚀 Starting Better Projects AI service v{VERSION}")

        if settings.llm_configured:
            logger.info(f"✅ OpenRouter API key configured (default model: {settings.default_model})")
        else:
            logger.warning("⚠️ No OpenRouter API key configured, summaries will use fallbacks")

        if workspace is not None:
            store = workspace
        elif settings.workspace_data_path:
            store = WorkspaceStore.from_file(settings.workspace_data_path)
        else:
            store = sample_workspace()

        client = llm_client or LLMClient(settings)
        cache = SummaryCache(expiration=timedelta(seconds=settings.cache_expiration_secs))
        summary_service = SummaryService(
            cache=cache,
            llm_client=client,
            workspace=store,
            default_model=settings.default_model,
            allowed_models=settings.allowed_model_ids,
        )

        app.state.settings = settings
        app.state.summary_cache = cache
        app.state.summary_service = summary_service
        app.state.task_draft_service = TaskDraftService(client, summary_service)

        yield

        cache.clear()
        logger.info("👋 Shutting down Better Projects AI service")

    app = FastAPI(
        title="Better Projects AI",
        description="AI summaries and task drafting for Better Projects",
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ai_router)

    # Add Prometheus metrics
    app.mount("/metrics", make_asgi_app())

    @app.exception_handler(AIServiceError)
    async def ai_service_error_handler(request: Request, exc: AIServiceError):
        if exc.status_code >= 500:
            logger.error(f"{request.url.path} failed: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.kind, "message": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        problems = [
            f"{'.'.join(str(p) for p in err['loc'] if p != 'body') or 'body'}: {err['msg']}"
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "validation_error", "message": "; ".join(problems)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "message": str(exc.detail)},
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Service health and LLM configuration"""
        cache: SummaryCache = request.app.state.summary_cache
        return HealthResponse(
            status="healthy" if settings.llm_configured else "degraded",
            llm_configured=settings.llm_configured,
            cache_entries=len(cache),
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint"""
        return {
            "service": "Better Projects AI",
            "version": VERSION,
            "docs": "/docs",
            "health": "/health",
            "features": [
                "Task, project and team summaries",
                "Summary caching with stale fallback",
                "Natural-language task drafting",
                "Streamed summary reveal",
            ],
        }

    return app


app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "better_projects_ai.main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
