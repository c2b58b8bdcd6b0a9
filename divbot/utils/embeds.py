"""
Shared embed utilities for the Division tracker bot.

Builds one embed per stats record. Fields are grouped into sections so the
larger Division 2 record stays well under Discord's 25-field limit.
"""

import discord
from typing import List, Tuple, Union

from divbot.constants import Games, UIConstants
from divbot.data_models.stats import D1PlayerStats, D2PlayerStats

Section = Tuple[str, List[Tuple[str, str]]]


def _d1_sections(stats: D1PlayerStats) -> List[Section]:
    return [
        ("📊 Overview", [
            ("Level", f"{stats.level:,}"),
            ("Play Time", f"{stats.playtime:,} h"),
            ("Main Story", stats.main_story),
            ("Gear Score", f"{stats.gear_score:,}"),
        ]),
        ("☣️ Dark Zone", [
            ("DZ Rank", f"{stats.dz_rank:,}"),
            ("Underground Rank", f"{stats.ug_rank:,}"),
            ("Rogue Kills", f"{stats.rogue_kills:,}"),
            ("Items Extracted", f"{stats.items_extracted:,}"),
        ]),
        ("⚔️ Combat", [
            ("NPC Kills", f"{stats.total_kills:,}"),
            ("Skill Kills", f"{stats.skill_kills:,}"),
        ]),
    ]


def _d2_sections(stats: D2PlayerStats) -> List[Section]:
    return [
        ("📊 Overview", [
            ("Level", f"{stats.level:,}"),
            ("Play Time", f"{stats.total_playtime:,} h"),
            ("Gear Score", f"{stats.gear_score:,}"),
            ("E-Credits", f"{stats.e_credit:,}"),
            ("Commendations", f"{stats.commendation_count:,} ({stats.commendation_score:,} pts)"),
        ]),
        ("⚔️ Combat", [
            ("PvP Kills", f"{stats.pvp_kills:,}"),
            ("NPC Kills", f"{stats.npc_kills:,}"),
            ("Player Kills", f"{stats.player_kills:,}"),
            ("Headshots", f"{stats.headshots:,}"),
            ("Headshot Kills", f"{stats.headshot_kills:,}"),
        ]),
        ("🔫 Weapons", [
            ("Rifle", f"{stats.rifle_kills:,}"),
            ("SMG", f"{stats.smg_kills:,}"),
            ("Shotgun", f"{stats.shotgun_kills:,}"),
            ("Pistol", f"{stats.pistol_kills:,}"),
        ]),
        ("🎯 Specializations", [
            ("Sharpshooter", f"{stats.sharpshooter_kills:,}"),
            ("Survivalist", f"{stats.survivalist_kills:,}"),
            ("Demolitionist", f"{stats.demolitionist_kills:,}"),
        ]),
        ("⭐ Experience", [
            ("Total XP", f"{stats.xp_total:,}"),
            ("PvE XP", f"{stats.pve_xp:,}"),
            ("PvP XP", f"{stats.pvp_xp:,}"),
            ("Clan XP", f"{stats.clan_xp:,}"),
        ]),
        ("☣️ Dark Zone", [
            ("DZ Rank", f"{stats.dz_rank:,}"),
            ("DZ Time", f"{stats.dz_playtime:,} h"),
            ("Rogues Killed", f"{stats.rogues_killed:,}"),
            ("Rogue Time", f"{stats.rogue_playtime:,} h"),
            ("Longest Rogue", f"{stats.longest_rogue:,} min"),
        ]),
        ("🏳️ Conflict", [
            ("Conflict Rank", f"{stats.conflict_rank:,}"),
            ("Conflict Time", f"{stats.conflict_playtime:,} h"),
        ]),
    ]


def build_stats_embed(stats: Union[D1PlayerStats, D2PlayerStats]) -> discord.Embed:
    """
    Build the embed for one player's stats record.

    Args:
        stats: Record produced by the record mapper

    Returns:
        Formatted Discord embed ready for display
    """
    if isinstance(stats, D2PlayerStats):
        game, color, sections = Games.DIVISION_2, UIConstants.DIVISION_2_COLOR, _d2_sections(stats)
    else:
        game, color, sections = Games.DIVISION_1, UIConstants.DIVISION_1_COLOR, _d1_sections(stats)

    embed = discord.Embed(
        title=f"{Games.NAMES[game]}: {stats.name or 'Unknown player'}",
        color=color
    )

    for title, rows in sections:
        embed.add_field(
            name=title,
            value="\n".join(f"**{label}:** {value}" for label, value in rows),
            inline=True
        )

    if stats.all_names:
        embed.add_field(name="📜 Known Names", value=", ".join(stats.all_names)[:1024], inline=False)

    embed.set_footer(text=f"Profile ID: {stats.id}")
    return embed
