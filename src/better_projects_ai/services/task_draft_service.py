"""Free text -> task draft, via the LLM with a heuristic fallback"""

import json
import logging
from datetime import date
from typing import Optional, Tuple

import pydantic

from better_projects_ai.errors import (
    ConfigurationUnavailable,
    ParseError,
    UpstreamError,
    ValidationError,
)
from better_projects_ai.metrics import TASK_DRAFTS
from better_projects_ai.models.domain import ParsedTaskDraft
from better_projects_ai.services import task_extractor
from better_projects_ai.services.summary_service import SummaryService
from better_projects_ai.utils.llm_client import LLMClient

logger = logging.getLogger(__name__)


class TaskDraftService:
    """Turns a natural-language request into structured task fields"""

    SYSTEM_PROMPT = (
        "You are an assistant that converts task requests into structured task data. "
        "Always return valid JSON and nothing else."
    )

    EXTRACTION_PROMPT = """Convert the following request into a task. Today is {today}.

Request:
{prompt}

Return a JSON object with these fields:
{{
"title": "short title, at most 60 characters",
"description": "details, or null",
"priority": "one of LOWEST, LOW, MEDIUM, HIGH, HIGHEST",
"estimatedHours": number or null,
"tags": ["bug", "feature", "ui", "api", "documentation", "testing", "design", "frontend", "backend"] (only those that apply) or null,
"dueDate": "YYYY-MM-DD" or null
}}
"""

    def __init__(self, llm_client: LLMClient, summary_service: SummaryService):
        self.llm_client = llm_client
        # shares model defaulting and the allow-list with summaries
        self.summary_service = summary_service

    async def draft_task(
        self, prompt: str, model: Optional[str] = None
    ) -> Tuple[ParsedTaskDraft, str]:
        """Parse `prompt` into a draft.

        Returns:
            (draft, source) where source is "llm" or "heuristic"
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt is required")
        model = self.summary_service.resolve_model(model)

        logger.info(f"Drafting task from prompt (length: {len(prompt)})")
        user_msg = self.EXTRACTION_PROMPT.format(prompt=prompt, today=date.today().isoformat())

        try:
            response = await self.llm_client.complete(model, self.SYSTEM_PROMPT, user_msg)
            draft = self.parse_draft(response)
        except ConfigurationUnavailable:
            logger.info("LLM unavailable, parsing task with heuristics")
        except (UpstreamError, ParseError) as e:
            logger.warning(f"LLM task extraction failed, parsing with heuristics: {e}")
        else:
            TASK_DRAFTS.labels(source="llm").inc()
            return draft, "llm"

        TASK_DRAFTS.labels(source="heuristic").inc()
        return task_extractor.extract(prompt), "heuristic"

    @staticmethod
    def parse_draft(response: str) -> ParsedTaskDraft:
        """Parse the model's JSON answer, tolerating Markdown code fences."""
        text = response.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        try:
            data = json.loads(text.strip())
        except json.JSONDecodeError as e:
            raise ParseError(f"Task extraction returned invalid JSON: {e}", raw=response) from e

        if not isinstance(data, dict):
            raise ParseError("Task extraction did not return a JSON object", raw=response)

        try:
            return ParsedTaskDraft.model_validate(data)
        except pydantic.ValidationError as e:
            raise ParseError(f"Task extraction returned unexpected fields: {e}", raw=response) from e
