"""Summary generation with caching and fallbacks"""

import asyncio
import logging
import time
from typing import Dict, List, Optional, Tuple

from better_projects_ai.errors import ConfigurationUnavailable, UpstreamError, ValidationError
from better_projects_ai.metrics import LLM_CALLS, LLM_LATENCY, SUMMARY_REQUESTS
from better_projects_ai.models.domain import (
    SummaryCacheEntry,
    SummaryKind,
    SummaryResult,
    SummarySource,
)
from better_projects_ai.services.prompts import build_summary_prompt, mock_summary
from better_projects_ai.services.summary_cache import SummaryCache
from better_projects_ai.utils.llm_client import LLMClient
from better_projects_ai.workspace import WorkspaceStore

logger = logging.getLogger(__name__)

FlightKey = Tuple[SummaryKind, str, str]


class SummaryService:
    """Serves task/project/team summaries.

    Decision order for a request:
    1. fresh cache entry for the same model (unless force_refresh)
    2. new generation through the LLM client, stored in the cache
    3. last known entry for the id, whatever its age or model
    4. fixed placeholder summary for the kind

    Concurrent requests for the same (kind, id, model) share one generation.
    """

    def __init__(
        self,
        cache: SummaryCache,
        llm_client: LLMClient,
        workspace: WorkspaceStore,
        default_model: str,
        allowed_models: Optional[List[str]] = None,
    ):
        self.cache = cache
        self.llm_client = llm_client
        self.workspace = workspace
        self.default_model = default_model
        self.allowed_models = list(allowed_models or [])
        self._in_flight: Dict[FlightKey, "asyncio.Task[SummaryResult]"] = {}

    def resolve_model(self, model: Optional[str]) -> str:
        """Apply the default model and check the allow-list."""
        model = (model or "").strip() or self.default_model
        if self.allowed_models and model not in self.allowed_models:
            raise ValidationError(
                f"Unsupported model '{model}'. Allowed models: {', '.join(self.allowed_models)}"
            )
        return model

    async def get_summary(
        self,
        kind: SummaryKind,
        entity_id: str,
        model: Optional[str] = None,
        force_refresh: bool = False,
    ) -> SummaryResult:
        if not entity_id or not entity_id.strip():
            raise ValidationError(f"{kind.value.capitalize()} ID is required")
        model = self.resolve_model(model)

        if not force_refresh:
            entry = self.cache.lookup(kind, entity_id, model)
            if entry is not None:
                logger.info(f"Returning cached {kind.value} summary for {entity_id}")
                SUMMARY_REQUESTS.labels(kind=kind.value, source=SummarySource.CACHE.value).inc()
                return SummaryResult(
                    text=entry.text,
                    kind=kind,
                    entity_id=entity_id,
                    model=model,
                    source=SummarySource.CACHE,
                    generated_at=entry.generated_at,
                )

        key = (kind, entity_id, model)
        pending = self._in_flight.get(key)
        if pending is None:
            pending = asyncio.ensure_future(self._generate(kind, entity_id, model))
            self._in_flight[key] = pending
            pending.add_done_callback(lambda _: self._in_flight.pop(key, None))
        else:
            logger.info(f"Joining in-flight {kind.value} summary generation for {entity_id}")

        # shield: one caller going away must not cancel the shared generation
        result = await asyncio.shield(pending)
        SUMMARY_REQUESTS.labels(kind=kind.value, source=result.source.value).inc()
        return result

    async def _generate(self, kind: SummaryKind, entity_id: str, model: str) -> SummaryResult:
        # NotFoundError propagates: there is nothing to summarize
        context = self.workspace.context_for(kind, entity_id)
        prompt = build_summary_prompt(kind, entity_id, context, model)

        logger.info(f"Generating new {kind.value} summary for {entity_id} with model {model}")
        started = time.perf_counter()
        try:
            text = await self.llm_client.complete(model, prompt.system_prompt, prompt.user_prompt)
        except ConfigurationUnavailable:
            LLM_CALLS.labels(outcome="unavailable").inc()
            logger.warning(f"LLM unavailable, using fallback for {kind.value} {entity_id}")
            return self._fallback(kind, entity_id, model)
        except UpstreamError as e:
            LLM_CALLS.labels(outcome="error").inc()
            logger.error(f"{kind.value.capitalize()} summary generation failed for {entity_id}: {e}")
            return self._fallback(kind, entity_id, model)
        finally:
            LLM_LATENCY.observe(time.perf_counter() - started)

        LLM_CALLS.labels(outcome="success").inc()
        now = self.cache.now()
        self.cache.store(
            kind,
            entity_id,
            SummaryCacheEntry(
                entity_id=entity_id, kind=kind, model=model, text=text, generated_at=now
            ),
        )
        return SummaryResult(
            text=text,
            kind=kind,
            entity_id=entity_id,
            model=model,
            source=SummarySource.LLM,
            generated_at=now,
        )

    def _fallback(self, kind: SummaryKind, entity_id: str, model: str) -> SummaryResult:
        entry = self.cache.get_stale(kind, entity_id)
        if entry is not None:
            logger.info(f"Falling back to cached {kind.value} summary for {entity_id} after API failure")
            return SummaryResult(
                text=entry.text,
                kind=kind,
                entity_id=entity_id,
                model=entry.model,
                source=SummarySource.STALE,
                generated_at=entry.generated_at,
            )

        logger.info(f"No cached {kind.value} summary for {entity_id}, returning placeholder")
        return SummaryResult(
            text=mock_summary(kind),
            kind=kind,
            entity_id=entity_id,
            model=model,
            source=SummarySource.MOCK,
        )
