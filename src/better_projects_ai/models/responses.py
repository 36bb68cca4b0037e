"""API response models"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from better_projects_ai.config import ModelOption
from better_projects_ai.models.domain import ParsedTaskDraft, SummaryResult


class SummaryResponse(BaseModel):
    """Generated (or cached) summary"""
    model_config = ConfigDict(populate_by_name=True)

    summary: str = Field(..., description="Markdown summary")
    model: str = Field(..., description="Model the summary was requested with")
    cached: bool = Field(..., description="Served from the summary cache")
    stale: bool = Field(False, description="Expired entry served after a failed regeneration")
    source: str = Field(..., description="cache, llm, stale or mock")
    generated_at: Optional[str] = Field(None, alias="generatedAt", description="ISO timestamp of generation")

    @classmethod
    def from_result(cls, result: SummaryResult) -> "SummaryResponse":
        return cls(
            summary=result.text,
            model=result.model,
            cached=result.served_from_cache,
            stale=result.stale,
            source=result.source.value,
            generated_at=result.generated_at.isoformat() if result.generated_at else None,
        )


class ClearCacheResponse(BaseModel):
    """Response from clearing the cache"""
    message: str
    cleared: int = Field(..., description="Number of entries removed")


class CreateTaskResponse(BaseModel):
    """Parsed task draft"""
    task: ParsedTaskDraft
    source: str = Field(..., description="llm or heuristic")


class ModelsResponse(BaseModel):
    """Models the UI may choose from"""
    models: List[ModelOption]
    default: str


class StatusResponse(BaseModel):
    """Diagnostic view of the AI routes"""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    llm_configured: bool = Field(..., alias="llmConfigured")
    default_model: str = Field(..., alias="defaultModel")
    cache_expiration_secs: int = Field(..., alias="cacheExpirationSecs")
    cache_status: Dict[str, int] = Field(..., alias="cacheStatus")


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    llm_configured: bool = Field(..., description="Whether an OpenRouter key is set")
    cache_entries: int = Field(..., description="Cached summaries across all kinds")
    timestamp: str = Field(..., description="ISO timestamp")


class ErrorResponse(BaseModel):
    """Error payload"""
    error: str
    message: str
