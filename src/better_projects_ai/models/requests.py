"""API request models"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from better_projects_ai.models.domain import SummaryKind


class SummaryRequest(BaseModel):
    """Fields shared by every summary request"""
    model_config = ConfigDict(populate_by_name=True)

    model: Optional[str] = Field(None, description="Provider-qualified model id")
    force_refresh: bool = Field(False, alias="forceRefresh", description="Bypass the summary cache")


class TaskSummaryRequest(SummaryRequest):
    """Request to summarize a task"""
    task_id: Optional[str] = Field(None, alias="taskId", description="Task to summarize")


class ProjectSummaryRequest(SummaryRequest):
    """Request to summarize a project"""
    project_id: Optional[str] = Field(None, alias="projectId", description="Project to summarize")


class TeamSummaryRequest(SummaryRequest):
    """Request to summarize a team"""
    team_id: Optional[str] = Field(None, alias="teamId", description="Team to summarize")


class ClearCacheRequest(BaseModel):
    """Request to clear the summary cache"""
    kind: Optional[SummaryKind] = Field(None, description="Only clear this kind; all kinds when omitted")


class CreateTaskRequest(BaseModel):
    """Request to turn free text into a task draft"""
    prompt: str = Field(..., description="Free-text task description")
    model: Optional[str] = Field(None, description="LLM model to use")
