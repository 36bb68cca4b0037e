"""Domain types shared by the services"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TITLE_MAX_LENGTH = 60


class SummaryKind(str, Enum):
    """Entity kinds that can be summarized."""

    TASK = "task"
    PROJECT = "project"
    TEAM = "team"


class SummarySource(str, Enum):
    """Where the text of a summary came from."""

    CACHE = "cache"
    LLM = "llm"
    STALE = "stale"
    MOCK = "mock"


class TaskPriority(str, Enum):
    LOWEST = "LOWEST"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    HIGHEST = "HIGHEST"


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    BLOCKED = "BLOCKED"
    COMPLETED = "COMPLETED"


@dataclass
class SummaryCacheEntry:
    """A generated summary as kept in the summary cache."""

    entity_id: str
    kind: SummaryKind
    model: str
    text: str
    generated_at: datetime


@dataclass
class SummaryResult:
    """Outcome of a summary request."""

    text: str
    kind: SummaryKind
    entity_id: str
    model: str
    source: SummarySource
    generated_at: Optional[datetime] = None

    @property
    def served_from_cache(self) -> bool:
        return self.source in (SummarySource.CACHE, SummarySource.STALE)

    @property
    def stale(self) -> bool:
        return self.source == SummarySource.STALE


@dataclass
class PromptRequest:
    """System/user prompt pair for a single completion call."""

    system_prompt: str
    user_prompt: str
    model: str


def truncate_title(title: str) -> str:
    """Clamp a title to 60 characters, ending with an ellipsis when cut."""
    title = title.strip()
    if len(title) > TITLE_MAX_LENGTH:
        return title[: TITLE_MAX_LENGTH - 3] + "…"
    return title


class ParsedTaskDraft(BaseModel):
    """Structured task fields parsed from free text, shown to the user for edit."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., description="Task title (at most 60 characters)")
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    estimated_hours: Optional[float] = Field(None, alias="estimatedHours", ge=0)
    tags: Optional[List[str]] = None
    due_date: Optional[date] = Field(None, alias="dueDate")

    @field_validator("title")
    @classmethod
    def _clamp_title(cls, value: str) -> str:
        value = truncate_title(value)
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or None
        return value

    @field_validator("tags")
    @classmethod
    def _empty_tags_are_unset(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if not value:
            return None
        return [tag.strip().lower() for tag in value if tag.strip()] or None
