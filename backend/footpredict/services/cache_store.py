"""
Prediction cache store interface and the in-memory backend.

A store holds at most one generation of records per match date. A refresh
replaces the whole generation; it never merges with the previous one.
Stale generations are not deleted, only ignored by freshness checks.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from footpredict.models.predictions import PredictionRecord

logger = logging.getLogger("footpredict.cache_store")

CACHE_TTL = timedelta(hours=2)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_cacheable(record: PredictionRecord) -> bool:
    return bool(record.home_team) and bool(record.away_team) and record.home_win_chance > 0


def stamp_generation(
    date: str, records: Iterable[PredictionRecord], cached_at: datetime
) -> List[PredictionRecord]:
    """Copy cacheable records filed under date with a shared cached_at timestamp."""
    return [
        record.model_copy(update={"date": date, "cached_at": cached_at})
        for record in records
        if is_cacheable(record)
    ]


class PredictionCacheStore(ABC):
    """Time-bounded store of normalized predictions keyed by match date."""

    @abstractmethod
    async def find_fresh(
        self, date: str, as_of: datetime, ttl: timedelta = CACHE_TTL
    ) -> List[PredictionRecord]:
        """
        Records for date written at or after as_of - ttl.

        Raises CacheStoreError when the backing store cannot be read.
        """

    @abstractmethod
    async def replace_all(
        self, date: str, records: List[PredictionRecord], cached_at: Optional[datetime] = None
    ) -> List[PredictionRecord]:
        """
        Replace every record for date with records, stamped with one cached_at.

        Returns the stored records. Raises CacheStoreError on write failure.
        """

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return None


class InMemoryPredictionCacheStore(PredictionCacheStore):
    """Process-local store. Swapping the per-date list is atomic for readers."""

    def __init__(self):
        self._generations: Dict[str, List[PredictionRecord]] = {}

    async def find_fresh(
        self, date: str, as_of: datetime, ttl: timedelta = CACHE_TTL
    ) -> List[PredictionRecord]:
        threshold = as_of - ttl
        return [
            record
            for record in self._generations.get(date, [])
            if record.cached_at is not None and record.cached_at >= threshold
        ]

    async def replace_all(
        self, date: str, records: List[PredictionRecord], cached_at: Optional[datetime] = None
    ) -> List[PredictionRecord]:
        generation = stamp_generation(date, records, cached_at or utcnow())
        self._generations[date] = generation
        logger.info(f"Cached {len(generation)} predictions for {date}")
        return generation
