from better_projects_ai.models.domain import (
    ParsedTaskDraft,
    PromptRequest,
    SummaryCacheEntry,
    SummaryKind,
    SummaryResult,
    SummarySource,
    TaskPriority,
    TaskStatus,
)
from better_projects_ai.models.requests import (
    ClearCacheRequest,
    CreateTaskRequest,
    ProjectSummaryRequest,
    TaskSummaryRequest,
    TeamSummaryRequest,
)
from better_projects_ai.models.responses import (
    ClearCacheResponse,
    CreateTaskResponse,
    ErrorResponse,
    HealthResponse,
    ModelsResponse,
    StatusResponse,
    SummaryResponse,
)

__all__ = [
    "ParsedTaskDraft",
    "PromptRequest",
    "SummaryCacheEntry",
    "SummaryKind",
    "SummaryResult",
    "SummarySource",
    "TaskPriority",
    "TaskStatus",
    "TaskSummaryRequest",
    "ProjectSummaryRequest",
    "TeamSummaryRequest",
    "ClearCacheRequest",
    "CreateTaskRequest",
    "SummaryResponse",
    "ClearCacheResponse",
    "CreateTaskResponse",
    "ModelsResponse",
    "StatusResponse",
    "HealthResponse",
    "ErrorResponse",
]
