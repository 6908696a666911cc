"""
Data models for football match predictions and their summary statistics.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

API_SOURCE_BETMINER = "betminer"
UNKNOWN_COMPETITION = "Unknown League"
DEFAULT_MATCH_TIME = "00:00"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Prediction(CamelModel):
    """Prediction for a single match as returned to API clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    home_team: str = Field(..., min_length=1, description="Home team name")
    away_team: str = Field(..., min_length=1, description="Away team name")
    home_win_chance: int = Field(..., ge=0, le=100, description="Home team win percentage (0-100)")
    away_win_chance: int = Field(0, ge=0, le=100, description="Away team win percentage (0-100)")
    draw_chance: int = Field(0, ge=0, le=100, description="Draw percentage (0-100)")
    match_time: str = Field(DEFAULT_MATCH_TIME, description="Match time in HH:MM format")
    competition: str = Field(UNKNOWN_COMPETITION, description="Competition/League name")
    date: str = Field(..., description="Match date (YYYY-MM-DD)")
    country: Optional[str] = Field(None, description="Country where the match is played")
    home_win_odds: Optional[float] = Field(None, description="Home team win odds (decimal)")
    away_win_odds: Optional[float] = Field(None, description="Away team win odds (decimal)")
    draw_odds: Optional[float] = Field(None, description="Draw odds (decimal)")


class PredictionRecord(Prediction):
    """
    A normalized prediction as held by the cache store.

    Records are immutable: a refresh writes a new generation of records
    rather than editing existing ones.
    """

    api_source: str = Field(API_SOURCE_BETMINER, description="Upstream provider tag")
    cached_at: Optional[datetime] = Field(None, description="When the record was written to the cache")

    def as_prediction(self) -> Prediction:
        """Strip cache bookkeeping fields for the public response."""
        return Prediction(**self.model_dump(exclude={"api_source", "cached_at"}))


class PredictionsMeta(CamelModel):
    date: str
    count: int
    cached: bool
    filter: Optional[str] = None


class PredictionListResponse(CamelModel):
    """Envelope for the prediction list endpoints."""

    data: List[Prediction]
    meta: PredictionsMeta


class OddsRange(CamelModel):
    min_home_win_odds: float = 0
    max_home_win_odds: float = 0
    avg_home_win_odds: float = 0


class PredictionStats(CamelModel):
    """Summary statistics over a set of predictions."""

    total_matches: int = 0
    high_confidence_matches: int = Field(0, description="Matches with >70% home win chance")
    medium_confidence_matches: int = Field(0, description="Matches with 50-70% home win chance")
    competition_breakdown: Dict[str, int] = Field(default_factory=dict)
    country_breakdown: Dict[str, int] = Field(default_factory=dict)
    average_home_win_chance: int = 0
    odds_range: OddsRange = Field(default_factory=OddsRange)


class StatsMeta(CamelModel):
    date: str
    cached: bool


class PredictionStatsResponse(CamelModel):
    data: PredictionStats
    meta: StatsMeta
