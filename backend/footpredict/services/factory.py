"""
Builds the prediction service from settings and holds the process-wide instance.
"""

import logging
from typing import Optional

from footpredict.fetchers.betminer_fetcher import BetminerFetcher, UpstreamConfig
from footpredict.services.cache_store import InMemoryPredictionCacheStore, PredictionCacheStore
from footpredict.services.prediction_service import PredictionService
from footpredict.utils.config import Settings, get_settings

logger = logging.getLogger("footpredict.factory")

_service: Optional[PredictionService] = None


def build_cache_store(settings: Settings) -> PredictionCacheStore:
    backend = settings.CACHE_BACKEND
    if backend == "memory":
        return InMemoryPredictionCacheStore()
    if backend == "redis":
        from footpredict.services.redis_cache_store import RedisPredictionCacheStore

        return RedisPredictionCacheStore(redis_url=settings.REDIS_URL)
    if backend == "supabase":
        from footpredict.services.supabase_cache_store import SupabasePredictionCacheStore

        return SupabasePredictionCacheStore(
            supabase_url=settings.SUPABASE_URL, supabase_key=settings.SUPABASE_KEY
        )
    raise ValueError(f"Unknown CACHE_BACKEND: {backend}")


def build_prediction_service(settings: Settings) -> PredictionService:
    fetcher = BetminerFetcher(UpstreamConfig.from_settings(settings))
    cache_store = build_cache_store(settings)
    logger.info(f"Prediction service ready (upstream={fetcher.config.mode.value}, cache={settings.CACHE_BACKEND})")
    return PredictionService(fetcher=fetcher, cache_store=cache_store)


async def get_prediction_service() -> PredictionService:
    """
    FastAPI dependency returning the shared service, built on first use.
    Runs on the event loop, never in the threadpool.
    """
    global _service
    if _service is None:
        _service = build_prediction_service(get_settings())
    return _service


async def close_prediction_service() -> None:
    global _service
    if _service is not None:
        await _service.cache_store.close()
        _service = None
