"""Summary, task drafting and presentation services."""

from .streaming import StreamingPresenter
from .summary_cache import SummaryCache
from .summary_service import SummaryService
from .task_draft_service import TaskDraftService

__all__ = [
    "SummaryCache",
    "SummaryService",
    "TaskDraftService",
    "StreamingPresenter",
]
