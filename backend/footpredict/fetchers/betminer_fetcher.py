"""
Betminer Fetcher

Fetches match predictions for a single day from the Betminer feed on RapidAPI
and normalizes them into PredictionRecord objects.

The fetcher runs in one of two modes, chosen once from its UpstreamConfig:
- live: one bounded-timeout request per call; any failure falls back to the
  built-in sample set
- offline: no network access, always the built-in sample set
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from footpredict.fetchers.odds import parse_odds, resolve_win_chance
from footpredict.fetchers.sample_data import sample_predictions
from footpredict.models.predictions import (
    API_SOURCE_BETMINER,
    DEFAULT_MATCH_TIME,
    UNKNOWN_COMPETITION,
    PredictionRecord,
)
from footpredict.utils.config import DEFAULT_BETMINER_BASE_URL, Settings

logger = logging.getLogger("footpredict.betminer_fetcher")

# "2025-08-14 00:30:00" or "2025-08-14T00:30:00"
_DATE_TIME_PATTERN = re.compile(r"^\s*(\d{4}-\d{2}-\d{2})(?:[ T](\d{2}:\d{2}))?")

SOURCE_LIVE = "live"
SOURCE_FALLBACK = "fallback"


class SourceMode(str, Enum):
    LIVE = "live"
    OFFLINE = "offline"


@dataclass(frozen=True)
class UpstreamConfig:
    """Resolved once at startup; the fetcher never reads the environment itself."""

    mode: SourceMode
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BETMINER_BASE_URL
    timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "UpstreamConfig":
        mode = SourceMode.LIVE if settings.RAPIDAPI_KEY else SourceMode.OFFLINE
        return cls(
            mode=mode,
            api_key=settings.RAPIDAPI_KEY,
            base_url=settings.BETMINER_BASE_URL.rstrip("/"),
            timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
        )


@dataclass
class FetchOutcome:
    """Records for a date plus where they came from."""

    records: List[PredictionRecord]
    source: str
    reason: Optional[str] = None
    skipped: int = 0

    @property
    def is_fallback(self) -> bool:
        return self.source == SOURCE_FALLBACK


class UpstreamFailure(Exception):
    """The live feed could not produce a usable payload."""


def split_date_time(value: Any, default_date: str) -> tuple:
    """Split the feed's combined date-time field into (YYYY-MM-DD, HH:MM)."""
    if not isinstance(value, str):
        return default_date, DEFAULT_MATCH_TIME

    match = _DATE_TIME_PATTERN.match(value)
    if not match:
        logger.warning(f"Could not extract date/time from: {value!r}")
        return default_date, DEFAULT_MATCH_TIME

    return match.group(1), match.group(2) or DEFAULT_MATCH_TIME


def normalize_match(raw: Dict[str, Any], requested_date: str) -> Optional[PredictionRecord]:
    """
    Turn one raw Betminer match into a PredictionRecord.

    Returns None for matches that cannot be cached: missing team names or a
    home win chance of zero.
    """
    details = raw.get("details")
    if not isinstance(details, dict):
        return None

    odds = raw.get("odds")
    odds = odds if isinstance(odds, dict) else {}
    confidence = raw.get("predictions_conf")
    confidence = confidence if isinstance(confidence, dict) else {}

    home_team = str(details.get("homeTeam") or "").strip()
    away_team = str(details.get("awayTeam") or "").strip()
    home_win_chance = resolve_win_chance(odds.get("home_win_odds"), confidence.get("HOME_WIN"))

    if not home_team or not away_team or home_win_chance <= 0:
        return None

    match_date, match_time = split_date_time(details.get("date"), requested_date)

    return PredictionRecord(
        date=match_date,
        home_team=home_team,
        away_team=away_team,
        home_win_chance=home_win_chance,
        away_win_chance=resolve_win_chance(odds.get("away_win_odds"), confidence.get("AWAY_WIN")),
        draw_chance=resolve_win_chance(odds.get("draw_odds"), confidence.get("DRAW")),
        match_time=match_time,
        competition=details.get("competition_full") or details.get("competition") or UNKNOWN_COMPETITION,
        country=details.get("country") or None,
        home_win_odds=parse_odds(odds.get("home_win_odds")),
        away_win_odds=parse_odds(odds.get("away_win_odds")),
        draw_odds=parse_odds(odds.get("draw_odds")),
        api_source=API_SOURCE_BETMINER,
    )


class BetminerFetcher:
    """Fetcher for the Betminer predictions feed"""

    def __init__(self, config: UpstreamConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            config: Upstream mode, credentials and endpoint
            client: Optional shared HTTP client; one is created per request otherwise
        """
        self.config = config
        self._client = client

        if config.mode is SourceMode.OFFLINE:
            logger.warning("Running in OFFLINE MODE - no RAPIDAPI_KEY provided")
        else:
            logger.info("Betminer fetcher initialized")

    @property
    def is_live(self) -> bool:
        return self.config.mode is SourceMode.LIVE

    async def fetch_predictions(self, date: str) -> List[PredictionRecord]:
        """Predictions for a date. Never raises; failures yield the sample set."""
        outcome = await self.fetch(date)
        return outcome.records

    async def fetch(self, date: str) -> FetchOutcome:
        """Predictions for a date together with their provenance."""
        if not self.is_live:
            return self._fallback(date, "offline mode")

        try:
            raw_matches = await self._request(date)
        except UpstreamFailure as e:
            logger.warning(f"Falling back to sample data for {date}: {e}")
            return self._fallback(date, str(e))
        except Exception as e:
            logger.error(f"Unexpected error fetching Betminer predictions for {date}: {e}", exc_info=True)
            return self._fallback(date, f"unexpected error: {type(e).__name__}")

        records = []
        skipped = 0
        for raw in raw_matches:
            try:
                record = normalize_match(raw, date) if isinstance(raw, dict) else None
            except ValidationError as e:
                logger.warning(f"Skipping malformed Betminer match for {date}: {e.error_count()} validation errors")
                record = None

            if record is None:
                skipped += 1
                continue
            records.append(record)

        if skipped:
            logger.debug(f"Discarded {skipped} Betminer matches without teams or home win chance")

        logger.info(f"Fetched {len(records)} predictions from Betminer for {date}")
        return FetchOutcome(records=records, source=SOURCE_LIVE, skipped=skipped)

    async def _request(self, date: str) -> List[Any]:
        """Issue the single bounded request. Raises UpstreamFailure on any problem."""
        # Betminer takes a from/to range; the same day is used for both ends
        url = f"{self.config.base_url}/{date}/{date}"
        headers = {
            "x-rapidapi-key": self.config.api_key,
            "x-rapidapi-host": urlparse(self.config.base_url).netloc,
        }

        logger.info(f"Fetching predictions from Betminer for date: {date}")
        try:
            if self._client is not None:
                response = await self._client.get(url, headers=headers, timeout=self.config.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                    response = await client.get(url, headers=headers)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamFailure(f"HTTP error {e.response.status_code}") from e
        except httpx.TimeoutException as e:
            raise UpstreamFailure(f"timeout after {self.config.timeout}s") from e
        except httpx.RequestError as e:
            raise UpstreamFailure(f"request error: {e}") from e
        except ValueError as e:
            raise UpstreamFailure("response body is not valid JSON") from e

        if not isinstance(data, list):
            raise UpstreamFailure("invalid response format (expected a list of matches)")

        return data

    def _fallback(self, date: str, reason: str) -> FetchOutcome:
        records = sample_predictions(date)
        logger.info(f"Serving {len(records)} sample predictions for {date} ({reason})")
        return FetchOutcome(records=records, source=SOURCE_FALLBACK, reason=reason)
