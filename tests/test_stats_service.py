"""End-to-end tests of get_stats with real resolver, fetcher and name cache."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from divbot.constants import TrackerConstants
from divbot.data_models.stats import D1PlayerStats, D2PlayerStats, ProfileRef
from divbot.services.profile_resolver import ProfileResolver
from divbot.services.stats_fetcher import StatsFetcher
from divbot.services.stats_service import StatsService
from divbot.services.stats_sources import TrackerPageSource, UbiStatsCardSource
from divbot.utils.exceptions import PlayerNotFoundError, UnsupportedGameError

from helpers import FakeTextFetcher, make_stats_cards, make_tracker_page


def make_ubi_client(by_name=None, by_id=None, cards=None):
    """Directory and stats card fake; ``by_name``/``by_id`` map lookups to profile lists."""
    by_name = by_name or {}
    by_id = by_id or {}

    async def find_profiles(ticket, name=None, profile_id=None):
        if name is not None:
            return by_name.get(name, [])
        return by_id.get(profile_id, [])

    ubi_client = MagicMock()
    ubi_client.find_profiles = AsyncMock(side_effect=find_profiles)
    ubi_client.fetch_stats_card = AsyncMock(return_value=cards or make_stats_cards([]))
    return ubi_client


def make_service(ubi_client, session_manager, name_cache, text_fetcher=None):
    resolver = ProfileResolver(ubi_client, session_manager, name_cache)
    fetcher = StatsFetcher(resolver, name_cache, concurrency=3, task_timeout=5)
    sources = [
        UbiStatsCardSource(ubi_client, session_manager),
        TrackerPageSource(text_fetcher or FakeTextFetcher()),
    ]
    return StatsService(fetcher, name_cache, sources)


@pytest.mark.asyncio
async def test_division_1_lookup(session_manager, name_cache):
    ubi_client = make_ubi_client(
        by_name={"Alice": [ProfileRef("u1", "Alice")]},
        cards=make_stats_cards(["10", "3", "7", "36000", "0.42", "1", "2", "3", "4", "0", "0", "230"]),
    )
    service = make_service(ubi_client, session_manager, name_cache)

    records = await service.get_stats(1, "Alice")

    assert len(records) == 1
    stats = records[0]
    assert isinstance(stats, D1PlayerStats)
    assert (stats.level, stats.dz_rank, stats.ug_rank, stats.playtime) == (10, 3, 7, 10)
    assert stats.main_story == "42 %"
    assert stats.gear_score == 230
    assert stats.all_names == ["Alice"]
    assert await name_cache.get_user_ids_by_name("Alice") == ["u1"]


@pytest.mark.asyncio
async def test_division_2_backfills_cached_profile_before_page_fetch(session_manager, name_cache):
    await name_cache.store_user_name("u2", "OldName")
    ubi_client = make_ubi_client(by_id={"u2": [ProfileRef("u2", "NewName")]})
    text_fetcher = FakeTextFetcher(pages={
        "NewName": make_tracker_page({"highestPlayerLevel": 30, "timePlayed": 7200}),
    })
    service = make_service(ubi_client, session_manager, name_cache, text_fetcher)

    records = await service.get_stats(2, "OldName")

    assert text_fetcher.urls == [f"{TrackerConstants.DIVISION_2_PROFILE_URL}NewName"]
    stats = records[0]
    assert isinstance(stats, D2PlayerStats)
    assert stats.name == "NewName"
    assert stats.level == 30
    assert stats.total_playtime == 2
    assert sorted(stats.all_names) == ["NewName", "OldName"]


@pytest.mark.asyncio
async def test_name_is_trimmed(session_manager, name_cache):
    ubi_client = make_ubi_client(by_name={"Alice": [ProfileRef("u1", "Alice")]})
    service = make_service(ubi_client, session_manager, name_cache)

    records = await service.get_stats(1, "  Alice ")

    assert records[0].name == "Alice"


@pytest.mark.asyncio
async def test_unknown_player(session_manager, name_cache):
    service = make_service(make_ubi_client(), session_manager, name_cache)

    with pytest.raises(PlayerNotFoundError):
        await service.get_stats(1, "Nobody")


@pytest.mark.asyncio
async def test_unsupported_game(session_manager, name_cache):
    service = make_service(make_ubi_client(), session_manager, name_cache)

    with pytest.raises(UnsupportedGameError):
        await service.get_stats(3, "Alice")
