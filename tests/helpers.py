"""Shared test factories and fakes for the stats pipeline tests."""

import json
from datetime import datetime, timedelta, timezone
from typing import List

from divbot.data_models.stats import ProfileRef, StatsPayload, Ticket

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta):
        self.now += delta


class FakeTextFetcher:
    """Returns canned page text and records every requested URL."""

    def __init__(self, pages=None, default: str = ""):
        self.pages = pages or {}
        self.default = default
        self.urls: List[str] = []

    async def fetch_rendered_text(self, url: str) -> str:
        self.urls.append(url)
        for suffix, text in self.pages.items():
            if url.endswith(suffix):
                return text
        return self.default


def make_ticket(expires_at: datetime, value: str = "ticket") -> Ticket:
    return Ticket(ticket=value, session_id=f"session-{value}", expires_at=expires_at)


def make_stats_cards(values):
    """Stats card response body with one card per value, in order."""
    return {
        "Statscards": [
            {"statName": f"stat_{i}", "displayName": f"Stat {i}", "value": value}
            for i, value in enumerate(values)
        ]
    }


def make_tracker_page(stats=None, **overrides):
    """Rendered tracker.gg page text; pass ``stats=None`` for a page without segments."""
    document = {"data": {"platformInfo": {"platformSlug": "uplay"}, "segments": []}}
    if stats is not None:
        document["data"]["segments"].append({
            "type": "overview",
            "stats": {key: {"value": value, "displayValue": str(value)} for key, value in stats.items()},
        })
    document.update(overrides)
    return json.dumps(document)


def make_payload(profile_id="u1", name="Alice", values=None, keyed=None) -> StatsPayload:
    """Payload from positional ``values`` or a ``keyed`` dict."""
    if keyed is not None:
        raw = tuple({"key": key, "value": value} for key, value in keyed.items())
    else:
        raw = tuple({"key": f"stat_{i}", "value": value} for i, value in enumerate(values or []))
    return StatsPayload(profile=ProfileRef(id=profile_id, name=name), raw_stats=raw)
