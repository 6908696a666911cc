"""
Shared fixtures for the predictions API tests.
"""

import pytest
from fastapi.testclient import TestClient

from footpredict.fetchers.betminer_fetcher import BetminerFetcher, SourceMode, UpstreamConfig
from footpredict.main import app
from footpredict.models.predictions import PredictionRecord
from footpredict.services.cache_store import InMemoryPredictionCacheStore
from footpredict.services.factory import get_prediction_service
from footpredict.services.prediction_service import PredictionService

MATCH_DATE = "2025-08-12"


@pytest.fixture
def make_record():
    """Factory for PredictionRecord objects with sensible defaults."""

    def _make(home_team="Deportivo Cali", away_team="Union Magdalena", home_win_chance=56, **overrides):
        fields = {
            "date": MATCH_DATE,
            "home_team": home_team,
            "away_team": away_team,
            "home_win_chance": home_win_chance,
            "away_win_chance": 18,
            "draw_chance": 32,
            "match_time": "00:30",
            "competition": "Colombia Primera A",
            "country": "Colombia",
            "home_win_odds": 1.80,
        }
        fields.update(overrides)
        return PredictionRecord(**fields)

    return _make


@pytest.fixture
def offline_fetcher():
    return BetminerFetcher(UpstreamConfig(mode=SourceMode.OFFLINE))


@pytest.fixture
def memory_store():
    return InMemoryPredictionCacheStore()


@pytest.fixture
def service(offline_fetcher, memory_store):
    return PredictionService(fetcher=offline_fetcher, cache_store=memory_store)


@pytest.fixture
def client(service):
    """Test client wired to an offline fetcher and an in-memory cache."""
    app.dependency_overrides[get_prediction_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
