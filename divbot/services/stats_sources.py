"""
Stats sources, one per game.

A source turns one resolved profile into one ``StatsPayload``. The batch
orchestration in ``StatsFetcher`` is shared; only the way a single profile
is fetched differs between games:

- The Division: authenticated Ubisoft stats card API, keyed by profile id
- The Division 2: tracker.gg profile page rendered in a browser, keyed by
  the current display name
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, List
from urllib.parse import quote

from divbot.constants import Games, SpaceIds, TrackerConstants
from divbot.data_models.stats import ProfileRef, StatsPayload
from divbot.services.browser import RenderedTextFetcher
from divbot.services.session_manager import SessionManager
from divbot.services.ubi_client import UbiClient
from divbot.utils.exceptions import NoProfileForGameError, PayloadParseError, UpstreamError
from divbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class StatsSource(ABC):
    """Fetches the raw stats of a single profile for one game."""

    game: int
    requires_name: bool = False

    async def prepare(self):
        """Acquire shared state such as credentials; runs before the per-profile deadline starts."""

    @abstractmethod
    async def fetch(self, profile: ProfileRef) -> StatsPayload:
        """Fetch one profile's stats; raise ``UpstreamError`` to abort the whole batch."""


class UbiStatsCardSource(StatsSource):
    """The Division stats from the Ubisoft stats card endpoint."""

    game = Games.DIVISION_1
    requires_name = False

    def __init__(self, ubi_client: UbiClient, session_manager: SessionManager, space_id: str = SpaceIds.DIVISION_1):
        self.ubi_client = ubi_client
        self.session_manager = session_manager
        self.space_id = space_id

    async def prepare(self):
        await self.session_manager.ensure_valid()

    async def fetch(self, profile: ProfileRef) -> StatsPayload:
        ticket = await self.session_manager.ensure_valid()
        body = await self.ubi_client.fetch_stats_card(ticket, profile.id, self.space_id)

        if body.get("errorCode") is not None:
            logger.error(f"Stats card error for user {profile.id}: {body}")
            raise UpstreamError(profile.id, body.get("errorCode"))

        cards = body.get("Statscards")
        if not isinstance(cards, list):
            raise PayloadParseError(f"stats card of {profile.id}", "missing Statscards list")

        return StatsPayload(profile=profile, raw_stats=tuple(_card_entry(i, c) for i, c in enumerate(cards)))


class TrackerPageSource(StatsSource):
    """The Division 2 stats scraped from the tracker.gg profile page."""

    game = Games.DIVISION_2
    requires_name = True

    def __init__(self, text_fetcher: RenderedTextFetcher, base_url: str = TrackerConstants.DIVISION_2_PROFILE_URL):
        self.text_fetcher = text_fetcher
        self.base_url = base_url

    def profile_url(self, name: str) -> str:
        return f"{self.base_url}{quote(name, safe='')}"

    async def fetch(self, profile: ProfileRef) -> StatsPayload:
        if not profile.name:
            raise ValueError(f"Profile {profile.id} has no display name to look up")

        url = self.profile_url(profile.name)
        text = await self.text_fetcher.fetch_rendered_text(url)

        try:
            document = json.loads(text)
        except ValueError as e:
            raise PayloadParseError(url, str(e)) from e

        stats = _first_segment_stats(document)
        if stats is None:
            raise NoProfileForGameError(profile.name)

        raw_stats = tuple(
            {"key": key, "value": entry.get("value") if isinstance(entry, dict) else entry}
            for key, entry in stats.items()
        )
        return StatsPayload(profile=profile, raw_stats=raw_stats)


def _card_entry(index: int, card: Any) -> Dict[str, Any]:
    if not isinstance(card, dict):
        return {"key": str(index), "value": card}
    key = card.get("statName") or card.get("displayName") or str(index)
    return {"key": key, "value": card.get("value")}


def _first_segment_stats(document: Any):
    if not isinstance(document, dict):
        return None
    data = document.get("data")
    if not isinstance(data, dict):
        return None
    segments: List[Any] = data.get("segments")
    if not isinstance(segments, list) or not segments or not isinstance(segments[0], dict):
        return None
    stats = segments[0].get("stats")
    return stats if isinstance(stats, dict) else None
