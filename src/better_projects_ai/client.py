"""Async client for the /ai endpoints with a local summary cache."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import httpx

from better_projects_ai.models.domain import (
    ParsedTaskDraft,
    SummaryCacheEntry,
    SummaryKind,
    SummarySource,
)
from better_projects_ai.services.summary_cache import SummaryCache

logger = logging.getLogger(__name__)

_CACHEABLE_SOURCES = {SummarySource.LLM.value, SummarySource.CACHE.value}

_ID_FIELDS = {
    SummaryKind.TASK: "taskId",
    SummaryKind.PROJECT: "projectId",
    SummaryKind.TEAM: "teamId",
}


@dataclass
class SummaryView:
    """What a UI needs to render a summary panel."""

    summary: str
    error: Optional[str] = None
    is_cached: bool = False
    stale: bool = False
    generated_at: Optional[datetime] = None


class ProjectsAIClient:
    """Calls the AI service, keeping its own copy of summaries it has seen.

    The local cache follows the server's rule: an entry is reused only while
    fresh and only for the same model. Only freshly generated or cached
    summaries are kept locally; stale and placeholder text is not. Failures
    to reach the service, or unreadable responses, never raise; they come
    back as a view with `error` set and an empty summary.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        model: str = "meta-llama/llama-3-70b-instruct",
        cache: Optional[SummaryCache] = None,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.model = model
        self.cache = cache if cache is not None else SummaryCache(expiration=timedelta(hours=24))
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "ProjectsAIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def summary(
        self,
        kind: SummaryKind,
        entity_id: str,
        model: Optional[str] = None,
        force_refresh: bool = False,
    ) -> SummaryView:
        model = model or self.model

        if not force_refresh:
            entry = self.cache.lookup(kind, entity_id, model)
            if entry is not None:
                logger.debug(f"Returning locally cached {kind.value} summary for {entity_id}")
                return SummaryView(
                    summary=entry.text, is_cached=True, generated_at=entry.generated_at
                )

        payload = {_ID_FIELDS[kind]: entity_id, "model": model, "forceRefresh": force_refresh}
        try:
            data = await self._post(f"/ai/{kind.value}-summary", payload)
            text = data["summary"]
            source = data.get("source")
            generated_at = _parse_timestamp(data.get("generatedAt"))
        except httpx.HTTPError as e:
            logger.error(f"Error generating {kind.value} summary: {e}")
            return SummaryView(summary="", error=str(e))
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Unexpected {kind.value} summary response: {e!r}")
            return SummaryView(summary="", error=f"Invalid response from AI service: {e!r}")

        # stale and placeholder text must be asked for again next time
        if source in _CACHEABLE_SOURCES:
            self.cache.store(
                kind,
                entity_id,
                SummaryCacheEntry(
                    entity_id=entity_id,
                    kind=kind,
                    model=model,
                    text=text,
                    generated_at=generated_at or self.cache.now(),
                ),
            )
        return SummaryView(
            summary=text,
            is_cached=bool(data.get("cached", False)),
            stale=bool(data.get("stale", False)),
            generated_at=generated_at,
        )

    async def task_summary(self, task_id: str, model: Optional[str] = None, force_refresh: bool = False) -> SummaryView:
        return await self.summary(SummaryKind.TASK, task_id, model, force_refresh)

    async def project_summary(self, project_id: str, model: Optional[str] = None, force_refresh: bool = False) -> SummaryView:
        return await self.summary(SummaryKind.PROJECT, project_id, model, force_refresh)

    async def team_summary(self, team_id: str, model: Optional[str] = None, force_refresh: bool = False) -> SummaryView:
        return await self.summary(SummaryKind.TEAM, team_id, model, force_refresh)

    async def create_task(self, prompt: str, model: Optional[str] = None) -> ParsedTaskDraft:
        """Draft a task from free text. Raises httpx.HTTPError on failure."""
        data = await self._post("/ai/create-task", {"prompt": prompt, "model": model or self.model})
        return ParsedTaskDraft.model_validate(data["task"])

    async def clear_cache(self, kind: Optional[SummaryKind] = None) -> int:
        """Clear both the local and the server cache."""
        self.cache.clear(kind)
        data = await self._post("/ai/clear-cache", {"kind": kind.value} if kind else {})
        return int(data.get("cleared", 0))

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._client.post(path, json=payload)
        if response.is_error:
            message = _error_message(response)
            raise httpx.HTTPStatusError(message, request=response.request, response=response)
        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Request failed ({response.status_code})"
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or f"Request failed ({response.status_code})")
    return f"Request failed ({response.status_code})"


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)
