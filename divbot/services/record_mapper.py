"""
Record mapping for raw stats payloads.

Turns a ``StatsPayload`` into the fixed per-game record shape. Mapping never
fails: absent or malformed values fall back to zero (numbers) or a
placeholder (strings), so upstream schema drift degrades the output instead
of breaking the command.
"""

import math
from typing import Any, Dict, List, Optional, Sequence

from divbot.data_models.stats import D1PlayerStats, D2PlayerStats, StatsPayload

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60
EMPTY_PERCENTAGE = "0 %"

# Stats card positions for The Division
D1_FIELD_INDEXES = {
    'level': 0,
    'dz_rank': 1,
    'ug_rank': 2,
    'rogue_kills': 5,
    'items_extracted': 6,
    'skill_kills': 7,
    'total_kills': 8,
    'gear_score': 11,
}
D1_PLAYTIME_INDEX = 3
D1_MAIN_STORY_INDEX = 4

# tracker.gg stat keys for The Division 2
D2_FIELD_KEYS = {
    'level': 'highestPlayerLevel',
    'pvp_kills': 'killsPvP',
    'npc_kills': 'killsNpc',
    'headshots': 'headshots',
    'headshot_kills': 'killsHeadshot',
    'shotgun_kills': 'killsWeaponShotgun',
    'smg_kills': 'killsWeaponSubMachinegun',
    'pistol_kills': 'killsWeaponPistol',
    'rifle_kills': 'killsWeaponRifle',
    'player_kills': 'playersKilled',
    'xp_total': 'xPTotal',
    'pve_xp': 'xPPve',
    'pvp_xp': 'xPPvp',
    'clan_xp': 'xPClan',
    'sharpshooter_kills': 'killsSpecializationSharpshooter',
    'survivalist_kills': 'killsSpecializationSurvivalist',
    'demolitionist_kills': 'killsSpecializationDemolitionist',
    'e_credit': 'eCreditBalance',
    'commendation_count': 'commendationCount',
    'commendation_score': 'commendationScore',
    'gear_score': 'latestGearScore',
    'dz_rank': 'rankDZ',
    'rogues_killed': 'roguesKilled',
    'conflict_rank': 'latestConflictRank',
}
D2_HOUR_KEYS = {
    'total_playtime': 'timePlayed',
    'dz_playtime': 'timePlayedDarkZone',
    'rogue_playtime': 'timePlayedRogue',
    'conflict_playtime': 'timePlayedConflict',
}
D2_LONGEST_ROGUE_KEY = 'timePlayedRogueLongest'


def to_count(value: Any) -> int:
    """Parse a non-negative integer, returning 0 for anything else."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip().replace(',', '')
    try:
        number = int(value)
    except (TypeError, ValueError):
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0
        if math.isnan(number) or math.isinf(number):
            return 0
        number = int(number)
    return number if number > 0 else 0


def seconds_to_hours(value: Any) -> int:
    return to_count(value) // SECONDS_PER_HOUR


def seconds_to_minutes(value: Any) -> int:
    return to_count(value) // SECONDS_PER_MINUTE


def to_percentage(value: Any) -> str:
    """
    Render a progress value as ``"NN %"``.

    Fractions (0..1) are scaled by 100, larger numbers are taken as already
    being percentages, and preformatted strings such as ``"42%"`` are
    re-rendered without scaling.
    """
    if value is None or isinstance(value, bool):
        return EMPTY_PERCENTAGE
    scale = True
    if isinstance(value, str) and value.strip().endswith('%'):
        value = value.strip()[:-1]
        scale = False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return EMPTY_PERCENTAGE
    if math.isnan(number) or math.isinf(number) or number < 0:
        return EMPTY_PERCENTAGE
    if scale and number <= 1:
        number *= 100
    return f"{number:.0f} %"


def _value_at(raw_stats: Sequence[Dict[str, Any]], index: int) -> Optional[Any]:
    if index >= len(raw_stats):
        return None
    entry = raw_stats[index]
    return entry.get('value') if isinstance(entry, dict) else None


def _values_by_key(raw_stats: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    values = {}
    for entry in raw_stats:
        if isinstance(entry, dict) and entry.get('key') is not None:
            values.setdefault(entry['key'], entry.get('value'))
    return values


def map_div1_stats(payload: StatsPayload, all_names: Optional[List[str]] = None) -> D1PlayerStats:
    """Map a stats card payload to The Division record."""
    raw = payload.raw_stats
    counts = {field: to_count(_value_at(raw, index)) for field, index in D1_FIELD_INDEXES.items()}
    return D1PlayerStats(
        id=payload.profile.id,
        name=payload.profile.name or "",
        playtime=seconds_to_hours(_value_at(raw, D1_PLAYTIME_INDEX)),
        main_story=to_percentage(_value_at(raw, D1_MAIN_STORY_INDEX)),
        all_names=list(all_names or []),
        **counts,
    )


def map_div2_stats(payload: StatsPayload, all_names: Optional[List[str]] = None) -> D2PlayerStats:
    """Map a tracker.gg payload to The Division 2 record."""
    values = _values_by_key(payload.raw_stats)
    counts = {field: to_count(values.get(key)) for field, key in D2_FIELD_KEYS.items()}
    hours = {field: seconds_to_hours(values.get(key)) for field, key in D2_HOUR_KEYS.items()}
    return D2PlayerStats(
        id=payload.profile.id,
        name=payload.profile.name or "",
        longest_rogue=seconds_to_minutes(values.get(D2_LONGEST_ROGUE_KEY)),
        all_names=list(all_names or []),
        **counts,
        **hours,
    )
