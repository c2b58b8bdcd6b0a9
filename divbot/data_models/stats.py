"""
Stats data models for the Division tracker pipeline.

Immutable transfer objects passed between the resolver, the fetcher and the
record mapper, plus the two per-game record shapes shown to users.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Ticket:
    """Ubisoft session credentials, always replaced as a whole."""
    ticket: str
    session_id: str
    expires_at: datetime


@dataclass(frozen=True)
class ProfileRef:
    """Platform profile id with its best-known display name."""
    id: str
    name: Optional[str] = None


@dataclass(frozen=True)
class StatsPayload:
    """Raw stats for one profile as ordered ``{"key", "value"}`` entries."""
    profile: ProfileRef
    raw_stats: Tuple[Dict[str, Any], ...]


@dataclass
class D1PlayerStats:
    """The Division player statistics."""
    id: str
    name: str = ""
    level: int = 0
    dz_rank: int = 0
    ug_rank: int = 0
    playtime: int = 0          # hours
    main_story: str = "0 %"
    total_kills: int = 0
    rogue_kills: int = 0
    items_extracted: int = 0
    skill_kills: int = 0
    gear_score: int = 0
    all_names: List[str] = field(default_factory=list)


@dataclass
class D2PlayerStats:
    """The Division 2 player statistics."""
    id: str
    name: str = ""
    total_playtime: int = 0    # hours
    level: int = 0
    pvp_kills: int = 0
    npc_kills: int = 0
    headshots: int = 0
    headshot_kills: int = 0
    shotgun_kills: int = 0
    smg_kills: int = 0
    pistol_kills: int = 0
    rifle_kills: int = 0
    player_kills: int = 0
    xp_total: int = 0
    pve_xp: int = 0
    pvp_xp: int = 0
    clan_xp: int = 0
    sharpshooter_kills: int = 0
    survivalist_kills: int = 0
    demolitionist_kills: int = 0
    e_credit: int = 0
    commendation_count: int = 0
    commendation_score: int = 0
    gear_score: int = 0
    dz_rank: int = 0
    dz_playtime: int = 0       # hours
    rogues_killed: int = 0
    rogue_playtime: int = 0    # hours
    longest_rogue: int = 0     # minutes
    conflict_rank: int = 0
    conflict_playtime: int = 0  # hours
    all_names: List[str] = field(default_factory=list)
