"""
Concurrent multi-profile stats fetching.

One name can resolve to several profiles. ``StatsFetcher`` runs the
per-profile pipeline (fetch, learn the name, persist the name) for all of
them concurrently and applies the batch policy:

- an ``UpstreamError`` (or auth exhaustion) aborts the whole batch
- any other per-profile failure is logged and dropped
- a batch with no successful profile fails as a whole
"""

import asyncio
from dataclasses import dataclass
from typing import List, Optional

import aiohttp
from sqlalchemy.exc import SQLAlchemyError

from divbot.data_models.stats import ProfileRef, StatsPayload
from divbot.services.name_cache import NameCacheService
from divbot.services.profile_resolver import ProfileResolver
from divbot.services.stats_sources import StatsSource
from divbot.utils.exceptions import (
    FetchFailedError, FetchTimeoutError, NoProfileForGameError, TransientFetchError
)
from divbot.utils.logger import setup_logger

logger = setup_logger(__name__)

# Per-profile failures that are dropped from the batch
TRANSIENT_ERRORS = (
    TransientFetchError, NoProfileForGameError, aiohttp.ClientError, asyncio.TimeoutError, ValueError
)


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one profile's pipeline: a payload or the error that dropped it."""
    profile: ProfileRef
    payload: Optional[StatsPayload] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.payload is not None


class StatsFetcher:
    """Fans out per-profile fetches for one player name."""

    def __init__(
        self,
        resolver: ProfileResolver,
        name_cache: NameCacheService,
        concurrency: int = 5,
        task_timeout: Optional[float] = None,
    ):
        """
        Args:
            resolver: Name to profile resolver
            name_cache: Store for learned (id, name) pairs
            concurrency: Maximum profiles fetched at the same time
            task_timeout: Deadline in seconds for one profile's fetch, None for no deadline
        """
        if concurrency <= 0:
            raise ValueError("concurrency must be positive")
        self.resolver = resolver
        self.name_cache = name_cache
        self.concurrency = concurrency
        self.task_timeout = task_timeout

    async def fetch_all(self, name: str, source: StatsSource) -> List[StatsPayload]:
        """
        Fetch stats for every profile resolved from ``name``.

        Returns:
            One payload per successfully fetched profile, in no particular order

        Raises:
            PlayerNotFoundError: If the name resolves to no profile
            UpstreamError: If the stats API reports an error for any profile
            RenewalExhaustedError: If the Ubisoft session cannot be renewed
            NoProfileForGameError: If every profile lacks data for this game
            FetchFailedError: If every profile failed for another reason
        """
        profiles = await self.resolver.resolve(name)

        if source.requires_name:
            profiles = await self._with_names(profiles)
            if not profiles:
                raise FetchFailedError(name, 0)

        logger.info(f"Fetching game {source.game} stats for '{name}': {len(profiles)} profile(s)")
        outcomes = await self._run_batch(profiles, source)
        return self._aggregate(name, outcomes)

    async def _with_names(self, profiles: List[ProfileRef]) -> List[ProfileRef]:
        named = []
        for profile in await self.resolver.backfill_names(profiles):
            if profile.name:
                named.append(profile)
            else:
                logger.warning(f"Skipping user {profile.id}: display name unknown")
        return named

    async def _run_batch(self, profiles: List[ProfileRef], source: StatsSource) -> List[FetchOutcome]:
        semaphore = asyncio.Semaphore(self.concurrency)
        tasks = [
            asyncio.ensure_future(self._fetch_profile(profile, source, semaphore))
            for profile in profiles
        ]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            # Fatal error in one profile: the rest of the batch is moot
            for task in tasks:
                task.cancel()
            raise

    async def _fetch_profile(
        self, profile: ProfileRef, source: StatsSource, semaphore: asyncio.Semaphore
    ) -> FetchOutcome:
        async with semaphore:
            # Credential renewal is not bounded by the per-profile deadline
            await source.prepare()
            try:
                payload = await self._with_deadline(profile, source.fetch(profile))
            except TRANSIENT_ERRORS as e:
                logger.warning(f"Dropping user {profile.id} from batch: {type(e).__name__}: {e}")
                return FetchOutcome(profile=profile, error=e)

        resolved = payload.profile
        if not resolved.name:
            resolved = await self.resolver.backfill_name(resolved)
            payload = StatsPayload(profile=resolved, raw_stats=payload.raw_stats)

        await self._remember_name(resolved)
        return FetchOutcome(profile=resolved, payload=payload)

    async def _with_deadline(self, profile: ProfileRef, fetch):
        if self.task_timeout is None:
            return await fetch
        try:
            return await asyncio.wait_for(fetch, timeout=self.task_timeout)
        except asyncio.TimeoutError as e:
            raise FetchTimeoutError(profile.id, self.task_timeout) from e

    async def _remember_name(self, profile: ProfileRef):
        if not profile.name:
            logger.warning(f"Not storing user {profile.id}: display name unknown")
            return
        try:
            await self.name_cache.store_user_name(profile.id, profile.name)
        except SQLAlchemyError as e:
            logger.error(f"Failed to store name {profile.name} for user {profile.id}: {e}")

    def _aggregate(self, name: str, outcomes: List[FetchOutcome]) -> List[StatsPayload]:
        payloads = [outcome.payload for outcome in outcomes if outcome.succeeded]
        failures = [outcome.error for outcome in outcomes if not outcome.succeeded]

        if payloads:
            if failures:
                logger.info(f"Fetched {len(payloads)}/{len(outcomes)} profile(s) for '{name}'")
            return payloads

        if failures and all(isinstance(error, NoProfileForGameError) for error in failures):
            raise NoProfileForGameError(name)
        raise FetchFailedError(name, len(outcomes))
