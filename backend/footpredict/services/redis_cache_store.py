"""
Redis-backed prediction cache.

Each date's generation lives under a single key as one JSON document, so a
refresh is one SET and readers never observe a mix of old and new records.
The key expires together with the freshness window.
"""

import json
import logging
import uuid
from datetime import datetime, timedelta
from typing import List, Optional

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import RedisError

from footpredict.models.predictions import PredictionRecord
from footpredict.services.cache_store import CACHE_TTL, PredictionCacheStore, stamp_generation, utcnow
from footpredict.utils.exceptions import CacheStoreError

logger = logging.getLogger("footpredict.redis_cache_store")

KEY_PREFIX = "predictions:"


def cache_key(date: str) -> str:
    return f"{KEY_PREFIX}{date}"


class RedisPredictionCacheStore(PredictionCacheStore):
    def __init__(self, redis_client: Optional[aioredis.Redis] = None, redis_url: Optional[str] = None):
        if redis_client is None:
            if not redis_url:
                raise ValueError("redis_client or redis_url is required")
            redis_client = aioredis.from_url(redis_url, decode_responses=True)
        self.redis_client = redis_client

    async def find_fresh(
        self, date: str, as_of: datetime, ttl: timedelta = CACHE_TTL
    ) -> List[PredictionRecord]:
        try:
            raw = await self.redis_client.get(cache_key(date))
        except RedisError as e:
            raise CacheStoreError(f"Redis read failed for {date}: {e}") from e

        if not raw:
            return []

        try:
            payload = json.loads(raw)
            cached_at = datetime.fromisoformat(payload["cachedAt"])
            if cached_at < as_of - ttl:
                return []
            return [PredictionRecord.model_validate(item) for item in payload["records"]]
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            raise CacheStoreError(f"Corrupt cache entry for {date}: {e}") from e

    async def replace_all(
        self, date: str, records: List[PredictionRecord], cached_at: Optional[datetime] = None
    ) -> List[PredictionRecord]:
        cached_at = cached_at or utcnow()
        generation = stamp_generation(date, records, cached_at)
        payload = {
            "generation": uuid.uuid4().hex,
            "cachedAt": cached_at.isoformat(),
            "records": [record.model_dump(mode="json", by_alias=True) for record in generation],
        }

        try:
            await self.redis_client.set(
                cache_key(date), json.dumps(payload), ex=int(CACHE_TTL.total_seconds())
            )
        except RedisError as e:
            raise CacheStoreError(f"Redis write failed for {date}: {e}") from e

        logger.info(f"Cached {len(generation)} predictions for {date} in Redis")
        return generation

    async def ping(self) -> bool:
        try:
            return bool(await self.redis_client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        await self.redis_client.aclose()
        logger.info("Redis client closed.")
