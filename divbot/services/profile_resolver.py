"""
Profile resolution service.

Maps a display name to candidate profile ids using the live Ubisoft
directory and the local name cache. The two sources can disagree: the API
knows current names only, while the cache remembers every name a profile
has used.
"""

import asyncio
from typing import Dict, List, Optional

import aiohttp
from sqlalchemy.exc import SQLAlchemyError

from divbot.data_models.stats import ProfileRef
from divbot.services.name_cache import NameCacheService
from divbot.services.session_manager import SessionManager
from divbot.services.ubi_client import UbiClient
from divbot.utils.exceptions import PlayerNotFoundError, TransientFetchError, UbiApiError
from divbot.utils.logger import setup_logger

logger = setup_logger(__name__)

# Directory lookup failures that fall back to the cache instead of failing
LOOKUP_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, UbiApiError, TransientFetchError, ValueError)


class ProfileResolver:
    """Resolves player names to profiles from the API and the name cache."""

    def __init__(self, ubi_client: UbiClient, session_manager: SessionManager, name_cache: NameCacheService):
        self.ubi_client = ubi_client
        self.session_manager = session_manager
        self.name_cache = name_cache

    async def resolve(self, name: str) -> List[ProfileRef]:
        """
        Resolve a display name to unique profiles.

        API results come first and keep their names; ids known only from the
        cache are appended with ``name=None`` and need ``backfill_name``
        before being used where a current display name is required.

        Raises:
            PlayerNotFoundError: If neither source knows the name
            RenewalExhaustedError: If the Ubisoft session cannot be renewed
        """
        api_profiles, cached_ids = await asyncio.gather(
            self._lookup_api(name),
            self._lookup_cache(name),
        )

        merged: Dict[str, ProfileRef] = {}
        for profile in api_profiles:
            merged.setdefault(profile.id, profile)
        for profile_id in cached_ids:
            merged.setdefault(profile_id, ProfileRef(id=profile_id, name=None))

        if not merged:
            raise PlayerNotFoundError(name)

        logger.debug(
            f"Resolved '{name}' to {len(merged)} profile(s) "
            f"({len(api_profiles)} from api, {len(cached_ids)} from cache)"
        )
        return list(merged.values())

    async def backfill_name(self, profile: ProfileRef) -> ProfileRef:
        """Learn the current display name of a profile through a reverse lookup."""
        if profile.name:
            return profile

        ticket = await self.session_manager.ensure_valid()
        try:
            matches = await self.ubi_client.find_profiles(ticket, profile_id=profile.id)
        except LOOKUP_ERRORS as e:
            logger.warning(f"Failed to get name for user {profile.id}: {e}")
            return profile

        name = self._first_name_for(profile.id, matches)
        if name is None:
            logger.warning(f"Failed to get name for user {profile.id}: no profile returned")
            return profile
        return ProfileRef(id=profile.id, name=name)

    async def backfill_names(self, profiles: List[ProfileRef]) -> List[ProfileRef]:
        """Backfill every profile lacking a name, concurrently."""
        return list(await asyncio.gather(*(self.backfill_name(p) for p in profiles)))

    async def _lookup_api(self, name: str) -> List[ProfileRef]:
        ticket = await self.session_manager.ensure_valid()
        try:
            return await self.ubi_client.find_profiles(ticket, name=name)
        except LOOKUP_ERRORS as e:
            logger.warning(f"Failed to find player {name} by api: {e}")
            return []

    async def _lookup_cache(self, name: str) -> List[str]:
        try:
            return await self.name_cache.get_user_ids_by_name(name)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to find player {name} by db: {e}")
            return []

    @staticmethod
    def _first_name_for(profile_id: str, matches: List[ProfileRef]) -> Optional[str]:
        for match in matches:
            if match.id == profile_id and match.name:
                return match.name
        # The directory may key the answer by user id rather than profile id
        for match in matches:
            if match.name:
                return match.name
        return None
