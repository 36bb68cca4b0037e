"""AI endpoints: summaries, task drafting, cache administration."""

import json
import logging
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse

from .config import Settings
from .errors import AIServiceError
from .models import (
    ClearCacheRequest,
    ClearCacheResponse,
    CreateTaskRequest,
    CreateTaskResponse,
    ModelsResponse,
    ProjectSummaryRequest,
    StatusResponse,
    SummaryKind,
    SummaryResponse,
    SummaryResult,
    TaskSummaryRequest,
    TeamSummaryRequest,
)
from .services.streaming import StreamingPresenter
from .services.summary_cache import SummaryCache
from .services.summary_service import SummaryService
from .services.task_draft_service import TaskDraftService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


# ============================================
# Dependencies
# ============================================


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_summary_cache(request: Request) -> SummaryCache:
    return request.app.state.summary_cache


def get_summary_service(request: Request) -> SummaryService:
    return request.app.state.summary_service


def get_task_draft_service(request: Request) -> TaskDraftService:
    return request.app.state.task_draft_service


async def _summarize(
    service: SummaryService,
    kind: SummaryKind,
    entity_id: Optional[str],
    model: Optional[str],
    force_refresh: bool,
) -> SummaryResult:
    try:
        return await service.get_summary(kind, entity_id or "", model, force_refresh)
    except AIServiceError:
        raise
    except Exception as e:
        logger.error(f"Error generating {kind.value} summary: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to generate {kind.value} summary")


def _event_stream(result: SummaryResult, settings: Settings) -> StreamingResponse:
    presenter = StreamingPresenter(
        chunk_size=settings.stream_chunk_size,
        interval=settings.stream_interval_ms / 1000,
    )
    presenter.start(result.text)
    done = SummaryResponse.from_result(result).model_dump(by_alias=True, exclude={"summary"})

    async def events() -> AsyncIterator[str]:
        async for delta in presenter.stream():
            yield f"data: {json.dumps({'delta': delta})}\n\n"
        yield f"data: {json.dumps({'done': True, **done})}\n\n"

    headers = {
        "Cache-Control": "no-cache, no-transform",
        "Connection": "keep-alive",
        "X-Accel-Buffering": "no",
    }
    return StreamingResponse(events(), media_type="text/event-stream", headers=headers)


# ============================================
# Summaries
# ============================================


@router.post("/task-summary", response_model=SummaryResponse)
async def task_summary(
    request: TaskSummaryRequest,
    service: SummaryService = Depends(get_summary_service),
):
    """Summarize a task for the Product Owner, CTO and Team Leadership."""
    result = await _summarize(
        service, SummaryKind.TASK, request.task_id, request.model, request.force_refresh
    )
    return SummaryResponse.from_result(result)


@router.post("/project-summary", response_model=SummaryResponse)
async def project_summary(
    request: ProjectSummaryRequest,
    service: SummaryService = Depends(get_summary_service),
):
    """Summarize a project for executive, product and engineering leadership."""
    result = await _summarize(
        service, SummaryKind.PROJECT, request.project_id, request.model, request.force_refresh
    )
    return SummaryResponse.from_result(result)


@router.post("/team-summary", response_model=SummaryResponse)
async def team_summary(
    request: TeamSummaryRequest,
    service: SummaryService = Depends(get_summary_service),
):
    """Summarize a team for the CEO, CTO and Director of Product."""
    result = await _summarize(
        service, SummaryKind.TEAM, request.team_id, request.model, request.force_refresh
    )
    return SummaryResponse.from_result(result)


@router.post("/task-summary/stream", response_class=StreamingResponse)
async def task_summary_stream(
    request: TaskSummaryRequest,
    service: SummaryService = Depends(get_summary_service),
    settings: Settings = Depends(get_app_settings),
):
    """Task summary revealed word by word as Server-Sent Events."""
    result = await _summarize(
        service, SummaryKind.TASK, request.task_id, request.model, request.force_refresh
    )
    return _event_stream(result, settings)


@router.post("/project-summary/stream", response_class=StreamingResponse)
async def project_summary_stream(
    request: ProjectSummaryRequest,
    service: SummaryService = Depends(get_summary_service),
    settings: Settings = Depends(get_app_settings),
):
    """Project summary revealed word by word as Server-Sent Events."""
    result = await _summarize(
        service, SummaryKind.PROJECT, request.project_id, request.model, request.force_refresh
    )
    return _event_stream(result, settings)


@router.post("/team-summary/stream", response_class=StreamingResponse)
async def team_summary_stream(
    request: TeamSummaryRequest,
    service: SummaryService = Depends(get_summary_service),
    settings: Settings = Depends(get_app_settings),
):
    """Team summary revealed word by word as Server-Sent Events."""
    result = await _summarize(
        service, SummaryKind.TEAM, request.team_id, request.model, request.force_refresh
    )
    return _event_stream(result, settings)


# ============================================
# Task drafting
# ============================================


@router.post("/create-task", response_model=CreateTaskResponse)
async def create_task(
    request: CreateTaskRequest,
    service: TaskDraftService = Depends(get_task_draft_service),
):
    """Parse a free-text request into task fields for the user to review."""
    try:
        draft, source = await service.draft_task(request.prompt, request.model)
    except AIServiceError:
        raise
    except Exception as e:
        logger.error(f"Task drafting failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to process task")
    return CreateTaskResponse(task=draft, source=source)


# ============================================
# Administration
# ============================================


@router.post("/clear-cache", response_model=ClearCacheResponse)
async def clear_cache(
    request: Optional[ClearCacheRequest] = Body(None),
    cache: SummaryCache = Depends(get_summary_cache),
):
    """Drop cached summaries (one kind, or all)."""
    kind = request.kind if request else None
    cleared = cache.clear(kind)
    message = f"{kind.value.capitalize()} cache cleared successfully" if kind else "Cache cleared successfully"
    return ClearCacheResponse(message=message, cleared=cleared)


@router.get("/models", response_model=ModelsResponse)
async def list_models(settings: Settings = Depends(get_app_settings)):
    """Models the UI may offer."""
    return ModelsResponse(models=settings.allowed_models, default=settings.default_model)


@router.get("/status", response_model=StatusResponse)
async def status(
    settings: Settings = Depends(get_app_settings),
    cache: SummaryCache = Depends(get_summary_cache),
):
    """Diagnostic view: LLM configuration and cache occupancy."""
    return StatusResponse(
        message="AI routes are working",
        llm_configured=settings.llm_configured,
        default_model=settings.default_model,
        cache_expiration_secs=settings.cache_expiration_secs,
        cache_status=cache.stats(),
    )
