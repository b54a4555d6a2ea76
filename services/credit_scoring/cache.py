"""
Score Cache
===========

In-process TTL cache for scoring results. One entry is held per entity;
a hit needs the full key (entity identity and the freshness of each
input) to match, and storing under a new key replaces the entity's
previous entry. Expiry is checked at read time; there is no background
sweeper. Concurrent writers for one entity overwrite each other (last
writer wins).

Version: 0.1.0
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from services.credit_scoring.models import ScoringResult
from shared.models import AlternativeDataPoint, CreditBureauData


@dataclass(frozen=True)
class CacheKey:
    """Composite cache key."""

    entity_id: str
    entity_updated_at: datetime
    bureau_last_updated: datetime | None
    alternative_count: int | None

    @classmethod
    def build(
        cls,
        entity_id: str,
        entity_updated_at: datetime,
        bureau_data: CreditBureauData | None,
        alternative_data: Sequence[AlternativeDataPoint] | None,
    ) -> "CacheKey":
        return cls(
            entity_id=entity_id,
            entity_updated_at=entity_updated_at,
            bureau_last_updated=bureau_data.last_updated if bureau_data else None,
            # An empty list and no list are distinct keys
            alternative_count=len(alternative_data) if alternative_data is not None else None,
        )


@dataclass
class _CacheEntry:
    key: CacheKey
    result: ScoringResult
    stored_at: float


class ScoreCache:
    """TTL cache of scoring results."""

    def __init__(
        self,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    def get(self, key: CacheKey) -> ScoringResult | None:
        """Return the stored result if present and younger than the TTL."""
        entry = self._entries.get(key.entity_id)
        if entry is None or entry.key != key:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            del self._entries[key.entity_id]
            return None
        return entry.result

    def set(self, key: CacheKey, result: ScoringResult) -> None:
        # Supersedes any entry stored for this entity under an older key
        self._entries[key.entity_id] = _CacheEntry(key=key, result=result, stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
