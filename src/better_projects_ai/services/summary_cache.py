"""In-memory cache of generated summaries."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from better_projects_ai.models.domain import SummaryCacheEntry, SummaryKind

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SummaryCache:
    """Keyed store of summaries: kind -> entity id -> entry.

    One entry per (kind, id); a newer generation overwrites the old one no
    matter which model produced it. Nothing is persisted: the cache lives as
    long as the object that owns it.

    Args:
        expiration: How long an entry counts as fresh (default: 24h)
        clock: Returns the current time; override in tests
    """

    def __init__(
        self,
        expiration: timedelta = timedelta(hours=24),
        clock: Clock = utc_now,
    ):
        self.expiration = expiration
        self._clock = clock
        self._entries: Dict[SummaryKind, Dict[str, SummaryCacheEntry]] = {
            kind: {} for kind in SummaryKind
        }

    def now(self) -> datetime:
        return self._clock()

    def is_fresh(self, entry: SummaryCacheEntry) -> bool:
        return self.now() - entry.generated_at < self.expiration

    def lookup(
        self, kind: SummaryKind, entity_id: str, model: str
    ) -> Optional[SummaryCacheEntry]:
        """Return the entry only if it is fresh and was generated by `model`."""
        entry = self._entries[kind].get(entity_id)
        if entry is None:
            return None
        if entry.model != model:
            logger.debug(
                f"Cached {kind.value} summary for {entity_id} was generated by "
                f"{entry.model}, not {model}"
            )
            return None
        if not self.is_fresh(entry):
            logger.debug(f"Cached {kind.value} summary for {entity_id} has expired")
            return None
        return entry

    def get_stale(self, kind: SummaryKind, entity_id: str) -> Optional[SummaryCacheEntry]:
        """Return the last known entry regardless of age or model."""
        return self._entries[kind].get(entity_id)

    def store(self, kind: SummaryKind, entity_id: str, entry: SummaryCacheEntry) -> None:
        self._entries[kind][entity_id] = entry

    def clear(self, kind: Optional[SummaryKind] = None) -> int:
        """Drop one kind's entries, or every entry when `kind` is None.

        Returns:
            Number of entries removed
        """
        kinds = [kind] if kind is not None else list(SummaryKind)
        removed = 0
        for k in kinds:
            removed += len(self._entries[k])
            self._entries[k] = {}
        logger.info(f"Cleared {removed} cached summaries")
        return removed

    def stats(self) -> Dict[str, int]:
        return {kind.value: len(entries) for kind, entries in self._entries.items()}

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._entries.values())
