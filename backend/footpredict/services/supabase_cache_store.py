"""
Supabase-backed prediction cache.

Rows live in the `predictions` table, one row per match, tagged with the
generation that wrote them. A refresh inserts its generation first and then
removes older generations for the date; readers keep only the newest
generation among the fresh rows, so a concurrent read never mixes two.

Expected table (Postgres):

    create table predictions (
        id bigint generated always as identity primary key,
        date text not null,
        home_team text not null,
        away_team text not null,
        home_win_chance int not null,
        away_win_chance int not null,
        draw_chance int not null,
        match_time text not null,
        competition text not null,
        country text,
        home_win_odds double precision,
        away_win_odds double precision,
        draw_odds double precision,
        api_source text not null default 'betminer',
        cached_at timestamptz not null,
        generation text not null,
        position int not null
    );
    create index on predictions (date, cached_at desc);
    create index on predictions (date, home_win_chance desc);

The supabase client is synchronous; calls run in a worker thread.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from supabase import Client, create_client

from footpredict.models.predictions import PredictionRecord
from footpredict.services.cache_store import CACHE_TTL, PredictionCacheStore, stamp_generation, utcnow
from footpredict.utils.exceptions import CacheStoreError

logger = logging.getLogger("footpredict.supabase_cache_store")

PREDICTIONS_TABLE = "predictions"


def record_to_row(record: PredictionRecord, generation: str, position: int) -> Dict[str, Any]:
    row = record.model_dump(mode="json")
    row["generation"] = generation
    row["position"] = position
    return row


def row_to_record(row: Dict[str, Any]) -> PredictionRecord:
    return PredictionRecord.model_validate(
        {key: value for key, value in row.items() if key in PredictionRecord.model_fields}
    )


class SupabasePredictionCacheStore(PredictionCacheStore):
    def __init__(
        self,
        supabase: Optional[Client] = None,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
    ):
        if supabase is None:
            if not supabase_url or not supabase_key:
                raise ValueError("SUPABASE_URL and SUPABASE_KEY are required for the Supabase cache")
            supabase = create_client(supabase_url, supabase_key)
            logger.info(f"Supabase client initialized for URL: {supabase_url[:20]}...")
        self.supabase = supabase

    async def find_fresh(
        self, date: str, as_of: datetime, ttl: timedelta = CACHE_TTL
    ) -> List[PredictionRecord]:
        threshold = (as_of - ttl).isoformat()

        def _query():
            return (
                self.supabase.table(PREDICTIONS_TABLE)
                .select("*")
                .eq("date", date)
                .gte("cached_at", threshold)
                .order("cached_at", desc=True)
                .order("position")
                .execute()
            )

        try:
            response = await asyncio.to_thread(_query)
        except Exception as e:
            raise CacheStoreError(f"Supabase read failed for {date}: {type(e).__name__} - {e}") from e

        rows = response.data or []
        if not rows:
            return []

        # Newest generation first; older ones may linger until their writer cleans up
        latest = rows[0].get("generation")
        try:
            return [row_to_record(row) for row in rows if row.get("generation") == latest]
        except ValidationError as e:
            raise CacheStoreError(f"Corrupt cached rows for {date}: {e}") from e

    async def replace_all(
        self, date: str, records: List[PredictionRecord], cached_at: Optional[datetime] = None
    ) -> List[PredictionRecord]:
        stored = stamp_generation(date, records, cached_at or utcnow())
        generation = uuid.uuid4().hex
        rows = [record_to_row(record, generation, position) for position, record in enumerate(stored)]

        def _write():
            if rows:
                self.supabase.table(PREDICTIONS_TABLE).insert(rows).execute()
            (
                self.supabase.table(PREDICTIONS_TABLE)
                .delete()
                .eq("date", date)
                .neq("generation", generation)
                .execute()
            )

        try:
            await asyncio.to_thread(_write)
        except Exception as e:
            raise CacheStoreError(f"Supabase write failed for {date}: {type(e).__name__} - {e}") from e

        logger.info(f"Cached {len(stored)} predictions for {date} in Supabase (generation {generation})")
        return stored

    async def ping(self) -> bool:
        def _probe():
            return self.supabase.table(PREDICTIONS_TABLE).select("id").limit(1).execute()

        try:
            await asyncio.to_thread(_probe)
            return True
        except Exception as e:
            logger.warning(f"Supabase ping failed: {e}")
            return False
