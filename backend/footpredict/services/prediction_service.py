"""
Prediction query service.

Serves predictions for a date from the cache when a fresh generation exists,
otherwise fetches from the upstream feed and writes a new generation. Results
are narrowed to home favourites (home win chance > 50%) unless all matches
are requested, then by an optional team-name substring.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from footpredict.fetchers.betminer_fetcher import BetminerFetcher
from footpredict.models.predictions import PredictionRecord, PredictionStats
from footpredict.services.cache_store import CACHE_TTL, PredictionCacheStore, utcnow
from footpredict.services.stats import summarize
from footpredict.utils.exceptions import CacheStoreError

logger = logging.getLogger("footpredict.prediction_service")

HOME_FAVOURITE_THRESHOLD = 50


@dataclass
class PredictionsResult:
    predictions: List[PredictionRecord]
    cached: bool


def filter_home_favourites(predictions: List[PredictionRecord]) -> List[PredictionRecord]:
    """Keep matches where the home side's win chance is strictly above the threshold."""
    filtered = []
    for prediction in predictions:
        if prediction.home_win_chance > HOME_FAVOURITE_THRESHOLD:
            filtered.append(prediction)
        else:
            logger.debug(
                f"Filtering out {prediction.home_team} vs {prediction.away_team} - "
                f"Home win chance: {prediction.home_win_chance}%"
            )

    logger.info(
        f"Filtered {len(predictions)} predictions down to {len(filtered)} "
        f"with >{HOME_FAVOURITE_THRESHOLD}% home win chance"
    )
    return filtered


def filter_by_team(predictions: List[PredictionRecord], team_filter: Optional[str]) -> List[PredictionRecord]:
    """Case-insensitive substring match against either team name."""
    if not team_filter:
        return predictions

    needle = team_filter.lower()
    return [
        p for p in predictions if needle in p.home_team.lower() or needle in p.away_team.lower()
    ]


class PredictionService:
    def __init__(
        self,
        fetcher: BetminerFetcher,
        cache_store: PredictionCacheStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.fetcher = fetcher
        self.cache_store = cache_store
        self._clock = clock
        # One refresh per date at a time; concurrent misses await the same task
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def query(
        self, date: str, team_filter: Optional[str] = None, only_home_favourites: bool = True
    ) -> PredictionsResult:
        """Cache-or-fetch, then apply the home favourite and team filters in that order."""
        cached = await self._find_fresh(date)

        if cached:
            logger.info(f"Found {len(cached)} cached predictions for {date}")
            predictions, from_cache = cached, True
        else:
            logger.info(f"No cached data found, fetching from Betminer for {date}")
            predictions, from_cache = await self._refresh(date), False

        if only_home_favourites:
            predictions = filter_home_favourites(predictions)
        predictions = filter_by_team(predictions, team_filter)

        logger.info(f"Returning {len(predictions)} predictions for {date} (cached={from_cache})")
        return PredictionsResult(predictions=predictions, cached=from_cache)

    async def get_predictions_for_date(self, date: str, team_filter: Optional[str] = None) -> PredictionsResult:
        return await self.query(date, team_filter, only_home_favourites=True)

    async def get_all_predictions_for_date(
        self, date: str, team_filter: Optional[str] = None
    ) -> PredictionsResult:
        return await self.query(date, team_filter, only_home_favourites=False)

    async def get_stats_for_date(self, date: str) -> Tuple[PredictionStats, bool]:
        """Statistics over every prediction for the date, not just home favourites."""
        result = await self.get_all_predictions_for_date(date)
        return summarize(result.predictions), result.cached

    async def _find_fresh(self, date: str) -> List[PredictionRecord]:
        try:
            return await self.cache_store.find_fresh(date, self._clock(), CACHE_TTL)
        except CacheStoreError as e:
            # An unreadable cache is served as a miss
            logger.warning(f"Cache read failed for {date}, treating as miss: {e}")
            return []

    async def _refresh(self, date: str) -> List[PredictionRecord]:
        task = self._in_flight.get(date)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_cache(date))
            self._in_flight[date] = task
            task.add_done_callback(lambda done, key=date: self._release(key, done))
        else:
            logger.info(f"Joining in-flight refresh for {date}")
        return await asyncio.shield(task)

    def _release(self, date: str, task: asyncio.Task) -> None:
        if self._in_flight.get(date) is task:
            del self._in_flight[date]

    async def _fetch_and_cache(self, date: str) -> List[PredictionRecord]:
        outcome = await self.fetcher.fetch(date)
        if outcome.is_fallback:
            logger.info(f"Upstream served sample data for {date}: {outcome.reason}")

        predictions = outcome.records
        logger.info(f"Fetched {len(predictions)} predictions for {date}")

        if predictions:
            try:
                await self.cache_store.replace_all(date, predictions)
            except CacheStoreError as e:
                logger.error(f"Error caching predictions for {date}: {e}", exc_info=True)

        return predictions
