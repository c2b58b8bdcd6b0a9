"""
Name cache service.

Append-only store of (profile id, display name) pairs learned from
successful stats fetches. It lets name lookups survive Ubisoft API
failures and provides the name history shown on every stats record.
"""

from typing import List
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from divbot.services.base import BaseService
from divbot.database.models import UbiUser
from divbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class NameCacheService(BaseService):
    """Stores and queries the id <-> name history table."""

    async def store_user_name(self, user_id: str, name: str) -> bool:
        """
        Record that ``user_id`` was seen with ``name``.

        Duplicate pairs are no-ops, including pairs inserted concurrently by
        another task between the existence check and the commit.

        Returns:
            True if a new pair was written, False if it was already known
        """
        try:
            async with self.get_session() as session:
                existing = await session.get(UbiUser, (user_id, name))
                if existing is not None:
                    return False
                session.add(UbiUser(id=user_id, name=name))
        except IntegrityError:
            logger.debug(f"Name {name} for user {user_id} was stored concurrently")
            return False

        logger.info(f"Stored name {name} for user {user_id}")
        return True

    async def get_user_ids_by_name(self, name: str) -> List[str]:
        """Get every profile id that has been seen with this name."""
        async with self.get_session() as session:
            result = await session.execute(
                select(UbiUser.id)
                .where(UbiUser.name == name)
                .order_by(UbiUser.recorded_at)
            )
            ids = []
            for user_id in result.scalars().all():
                if user_id not in ids:
                    ids.append(user_id)
            return ids

    async def get_user_names_by_id(self, user_id: str) -> List[str]:
        """Get every name this profile id has been seen with, oldest first."""
        async with self.get_session() as session:
            result = await session.execute(
                select(UbiUser.name)
                .where(UbiUser.id == user_id)
                .order_by(UbiUser.recorded_at, UbiUser.name)
            )
            return list(result.scalars().all())
