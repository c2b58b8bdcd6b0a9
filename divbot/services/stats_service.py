"""
Stats service: the entry point used by the tracker commands.

``get_stats(game, name)`` selects the game's source, runs the batch fetch
and maps every payload to its record, attaching the profile's name history.
"""

import asyncio
from typing import Callable, Dict, List, Union

from sqlalchemy.exc import SQLAlchemyError

from divbot.constants import Games
from divbot.data_models.stats import D1PlayerStats, D2PlayerStats, StatsPayload
from divbot.services.name_cache import NameCacheService
from divbot.services.record_mapper import map_div1_stats, map_div2_stats
from divbot.services.stats_fetcher import StatsFetcher
from divbot.services.stats_sources import StatsSource
from divbot.utils.exceptions import UnsupportedGameError
from divbot.utils.logger import setup_logger

logger = setup_logger(__name__)

PlayerStats = Union[D1PlayerStats, D2PlayerStats]

RECORD_MAPPERS: Dict[int, Callable[..., PlayerStats]] = {
    Games.DIVISION_1: map_div1_stats,
    Games.DIVISION_2: map_div2_stats,
}


class StatsService:
    """Resolves, fetches and maps player stats for either game."""

    def __init__(self, fetcher: StatsFetcher, name_cache: NameCacheService, sources: List[StatsSource]):
        self.fetcher = fetcher
        self.name_cache = name_cache
        self.sources: Dict[int, StatsSource] = {source.game: source for source in sources}

    async def get_stats(self, game: int, name: str) -> List[PlayerStats]:
        """
        Get one stats record per profile matching ``name``.

        Raises:
            UnsupportedGameError: If ``game`` has no configured source
            TrackerException: Any systemic pipeline failure (see StatsFetcher.fetch_all)
        """
        source = self.sources.get(game)
        mapper = RECORD_MAPPERS.get(game)
        if source is None or mapper is None:
            raise UnsupportedGameError(game)

        name = name.strip()
        payloads = await self.fetcher.fetch_all(name, source)
        return list(await asyncio.gather(*(self._to_record(mapper, payload) for payload in payloads)))

    async def _to_record(self, mapper: Callable[..., PlayerStats], payload: StatsPayload) -> PlayerStats:
        try:
            all_names = await self.name_cache.get_user_names_by_id(payload.profile.id)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to load name history for user {payload.profile.id}: {e}")
            all_names = []
        return mapper(payload, all_names)
