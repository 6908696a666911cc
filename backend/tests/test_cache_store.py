"""
Tests for prediction cache stores (in-memory, Redis, Supabase).
"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from footpredict.services.cache_store import CACHE_TTL, InMemoryPredictionCacheStore
from footpredict.services.redis_cache_store import RedisPredictionCacheStore, cache_key
from footpredict.services.supabase_cache_store import SupabasePredictionCacheStore
from footpredict.utils.exceptions import CacheStoreError

MATCH_DATE = "2025-08-12"
CACHED_AT = datetime(2025, 8, 12, 10, 0, tzinfo=timezone.utc)


class FakeRedis:
    """Minimal async stand-in for redis.asyncio.Redis."""

    def __init__(self):
        self.data = {}
        self.expiry = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    async def ping(self):
        return True

    async def aclose(self):
        self.closed = True


# In-memory store


@pytest.mark.asyncio
async def test_replace_all_twice_leaves_one_generation(make_record):
    store = InMemoryPredictionCacheStore()
    records = [make_record(), make_record(home_team="Santa Fe", home_win_chance=36)]

    await store.replace_all(MATCH_DATE, records, cached_at=CACHED_AT)
    await store.replace_all(MATCH_DATE, records, cached_at=CACHED_AT)

    assert len(await store.find_fresh(MATCH_DATE, CACHED_AT)) == 2


@pytest.mark.asyncio
async def test_refresh_replaces_instead_of_merging(make_record):
    store = InMemoryPredictionCacheStore()
    await store.replace_all(
        MATCH_DATE, [make_record(home_team=f"Team {i}") for i in range(3)], cached_at=CACHED_AT
    )

    later = CACHED_AT + timedelta(minutes=30)
    await store.replace_all(MATCH_DATE, [make_record(home_team="Only One")], cached_at=later)

    fresh = await store.find_fresh(MATCH_DATE, later)
    assert [r.home_team for r in fresh] == ["Only One"]
    assert all(r.cached_at == later for r in fresh)


@pytest.mark.asyncio
async def test_freshness_window_boundaries(make_record):
    store = InMemoryPredictionCacheStore()
    await store.replace_all(MATCH_DATE, [make_record()], cached_at=CACHED_AT)

    assert await store.find_fresh(MATCH_DATE, CACHED_AT + timedelta(minutes=119), CACHE_TTL)
    assert await store.find_fresh(MATCH_DATE, CACHED_AT + timedelta(minutes=121), CACHE_TTL) == []


@pytest.mark.asyncio
async def test_uncacheable_records_are_discarded(make_record):
    store = InMemoryPredictionCacheStore()
    stored = await store.replace_all(
        MATCH_DATE, [make_record(), make_record(home_team="Zero", home_win_chance=0)], cached_at=CACHED_AT
    )

    assert [r.home_team for r in stored] == ["Deportivo Cali"]


@pytest.mark.asyncio
async def test_dates_are_isolated(make_record):
    store = InMemoryPredictionCacheStore()
    await store.replace_all(MATCH_DATE, [make_record()], cached_at=CACHED_AT)

    assert await store.find_fresh("2025-08-13", CACHED_AT) == []


@pytest.mark.asyncio
async def test_records_are_filed_under_requested_date(make_record):
    store = InMemoryPredictionCacheStore()
    stored = await store.replace_all(
        MATCH_DATE, [make_record(), make_record(home_team="Late Kickoff", date="2025-08-13")], cached_at=CACHED_AT
    )

    assert {r.date for r in stored} == {MATCH_DATE}
    assert len(await store.find_fresh(MATCH_DATE, CACHED_AT)) == 2


# Redis store


@pytest.mark.asyncio
async def test_redis_round_trip_keeps_generation_and_order(make_record):
    fake = FakeRedis()
    store = RedisPredictionCacheStore(redis_client=fake)
    records = [make_record(), make_record(home_team="América W", home_win_chance=99, country=None)]

    await store.replace_all(MATCH_DATE, records, cached_at=CACHED_AT)

    assert fake.expiry[cache_key(MATCH_DATE)] == 7200
    payload = json.loads(fake.data[cache_key(MATCH_DATE)])
    assert payload["records"][0]["homeTeam"] == "Deportivo Cali"

    fresh = await store.find_fresh(MATCH_DATE, CACHED_AT + timedelta(minutes=119))
    assert [r.home_team for r in fresh] == ["Deportivo Cali", "América W"]
    assert fresh[1].country is None
    assert all(r.cached_at == CACHED_AT for r in fresh)


@pytest.mark.asyncio
async def test_redis_ignores_stale_generation(make_record):
    store = RedisPredictionCacheStore(redis_client=FakeRedis())
    await store.replace_all(MATCH_DATE, [make_record()], cached_at=CACHED_AT)

    assert await store.find_fresh(MATCH_DATE, CACHED_AT + timedelta(minutes=121)) == []


@pytest.mark.asyncio
async def test_redis_missing_key_is_empty():
    store = RedisPredictionCacheStore(redis_client=FakeRedis())
    assert await store.find_fresh(MATCH_DATE, CACHED_AT) == []


@pytest.mark.asyncio
async def test_redis_read_error_raises_cache_store_error():
    fake = FakeRedis()
    fake.get = AsyncMock(side_effect=RedisConnectionError("connection refused"))
    store = RedisPredictionCacheStore(redis_client=fake)

    with pytest.raises(CacheStoreError):
        await store.find_fresh(MATCH_DATE, CACHED_AT)


@pytest.mark.asyncio
async def test_redis_corrupt_entry_raises_cache_store_error():
    fake = FakeRedis()
    fake.data[cache_key(MATCH_DATE)] = "{not json"
    store = RedisPredictionCacheStore(redis_client=fake)

    with pytest.raises(CacheStoreError):
        await store.find_fresh(MATCH_DATE, CACHED_AT)


@pytest.mark.asyncio
async def test_redis_write_error_raises_cache_store_error(make_record):
    fake = FakeRedis()
    fake.set = AsyncMock(side_effect=RedisConnectionError("connection refused"))
    store = RedisPredictionCacheStore(redis_client=fake)

    with pytest.raises(CacheStoreError):
        await store.replace_all(MATCH_DATE, [make_record()])


@pytest.mark.asyncio
async def test_redis_ping_and_close():
    fake = FakeRedis()
    store = RedisPredictionCacheStore(redis_client=fake)
    assert await store.ping() is True

    fake.ping = AsyncMock(side_effect=RedisConnectionError("down"))
    assert await store.ping() is False

    await store.close()
    assert fake.closed is True


@pytest.mark.asyncio
async def test_redis_records_are_filed_under_requested_date(make_record):
    store = RedisPredictionCacheStore(redis_client=FakeRedis())
    await store.replace_all(
        MATCH_DATE, [make_record(), make_record(home_team="Late Kickoff", date="2025-08-13")], cached_at=CACHED_AT
    )

    fresh = await store.find_fresh(MATCH_DATE, CACHED_AT)
    assert [r.date for r in fresh] == [MATCH_DATE, MATCH_DATE]


# Supabase store


def supabase_row(generation, position, home_team, cached_at=CACHED_AT):
    return {
        "id": position + 1,
        "date": MATCH_DATE,
        "home_team": home_team,
        "away_team": "Opponent",
        "home_win_chance": 60,
        "away_win_chance": 20,
        "draw_chance": 25,
        "match_time": "18:00",
        "competition": "Colombia Primera A",
        "country": "Colombia",
        "home_win_odds": 1.65,
        "away_win_odds": None,
        "draw_odds": None,
        "api_source": "betminer",
        "cached_at": cached_at.isoformat(),
        "generation": generation,
        "position": position,
    }


@pytest.mark.asyncio
async def test_supabase_reads_only_newest_generation():
    client = MagicMock()
    query = client.table.return_value.select.return_value.eq.return_value.gte.return_value
    newer = CACHED_AT + timedelta(minutes=5)
    query.order.return_value.order.return_value.execute.return_value = MagicMock(
        data=[
            supabase_row("gen-new", 0, "New A", cached_at=newer),
            supabase_row("gen-new", 1, "New B", cached_at=newer),
            supabase_row("gen-old", 0, "Old A"),
        ]
    )
    store = SupabasePredictionCacheStore(supabase=client)

    fresh = await store.find_fresh(MATCH_DATE, newer)

    assert [r.home_team for r in fresh] == ["New A", "New B"]
    client.table.assert_called_with("predictions")
    client.table.return_value.select.return_value.eq.assert_called_with("date", MATCH_DATE)
    client.table.return_value.select.return_value.eq.return_value.gte.assert_called_with(
        "cached_at", (newer - CACHE_TTL).isoformat()
    )


@pytest.mark.asyncio
async def test_supabase_inserts_new_generation_before_deleting_old(make_record):
    client = MagicMock()
    table = client.table.return_value
    store = SupabasePredictionCacheStore(supabase=client)

    await store.replace_all(MATCH_DATE, [make_record(), make_record(home_team="Santa Fe")], cached_at=CACHED_AT)

    rows = table.insert.call_args[0][0]
    assert [row["position"] for row in rows] == [0, 1]
    assert rows[0]["home_team"] == "Deportivo Cali"
    assert rows[0]["cached_at"].startswith("2025-08-12T10:00:00")
    generation = rows[0]["generation"]
    assert {row["generation"] for row in rows} == {generation}

    table.delete.return_value.eq.assert_called_with("date", MATCH_DATE)
    table.delete.return_value.eq.return_value.neq.assert_called_with("generation", generation)

    call_names = [c[0] for c in table.mock_calls]
    assert call_names.index("insert") < call_names.index("delete")


@pytest.mark.asyncio
async def test_supabase_rows_are_filed_under_requested_date(make_record):
    client = MagicMock()
    table = client.table.return_value
    store = SupabasePredictionCacheStore(supabase=client)

    await store.replace_all(
        MATCH_DATE, [make_record(), make_record(home_team="Late Kickoff", date="2025-08-13")], cached_at=CACHED_AT
    )

    rows = table.insert.call_args[0][0]
    assert {row["date"] for row in rows} == {MATCH_DATE}
    table.delete.return_value.eq.assert_called_with("date", MATCH_DATE)


@pytest.mark.asyncio
async def test_supabase_errors_raise_cache_store_error(make_record):
    client = MagicMock()
    client.table.side_effect = RuntimeError("supabase unreachable")
    store = SupabasePredictionCacheStore(supabase=client)

    with pytest.raises(CacheStoreError):
        await store.find_fresh(MATCH_DATE, CACHED_AT)
    with pytest.raises(CacheStoreError):
        await store.replace_all(MATCH_DATE, [make_record()])
    assert await store.ping() is False
