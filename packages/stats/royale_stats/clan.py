from __future__ import annotations

import math
from typing import Any

ROLE_KEYS: dict[str, str] = {
    "leader": "leader_count",
    "coLeader": "co_leader_count",
    "elder": "elder_count",
    "member": "member_count",
}

# Accept both the upstream camelCase names and snake_case.
MEMBER_SORT_KEYS: dict[str, str] = {
    "name": "name",
    "trophies": "trophies",
    "donations": "donations",
    "donations_received": "donationsReceived",
    "donationsReceived": "donationsReceived",
    "clan_rank": "clanRank",
    "clanRank": "clanRank",
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def sort_members(
    members: list[dict[str, Any]], *, sort_by: str = "trophies", order: str = "desc"
) -> list[dict[str, Any]]:
    if order not in ("asc", "desc"):
        raise ValueError(f"order must be 'asc' or 'desc', got {order!r}")
    field = MEMBER_SORT_KEYS.get(str(sort_by or ""), "trophies")

    def _key(m: dict[str, Any]) -> Any:
        if field == "name":
            return str(m.get("name") or "").casefold()
        return int(m.get(field) or 0)

    return sorted(members or [], key=_key, reverse=(order == "desc"))


def _clan_header(clan: dict[str, Any]) -> dict[str, Any]:
    return {
        "tag": clan.get("tag"),
        "name": clan.get("name"),
        "description": clan.get("description"),
        "type": clan.get("type"),
        "badge_id": clan.get("badgeId"),
        "clan_score": clan.get("clanScore"),
        "clan_war_trophies": clan.get("clanWarTrophies"),
        "required_trophies": clan.get("requiredTrophies"),
        "members": clan.get("members"),
        "location": clan.get("location"),
    }


def _member_summary(clan: dict[str, Any]) -> dict[str, Any]:
    members = [m for m in clan.get("memberList") or [] if isinstance(m, dict)]
    summary: dict[str, Any] = {
        "total_members": clan.get("members", len(members)),
        "avg_trophies": 0,
        "total_donations": 0,
        "total_donations_received": 0,
        "avg_donations": 0,
        "leader_count": 0,
        "co_leader_count": 0,
        "elder_count": 0,
        "member_count": 0,
    }
    if not members:
        return summary

    trophies = sum(int(m.get("trophies") or 0) for m in members)
    donations = sum(int(m.get("donations") or 0) for m in members)
    received = sum(int(m.get("donationsReceived") or 0) for m in members)
    summary["avg_trophies"] = _round_half_up(trophies / len(members))
    summary["total_donations"] = donations
    summary["total_donations_received"] = received
    summary["avg_donations"] = _round_half_up(donations / len(members))
    for m in members:
        key = ROLE_KEYS.get(str(m.get("role") or ""))
        if key:
            summary[key] += 1
    return summary


def _current_war(river_race: dict[str, Any]) -> dict[str, Any]:
    mine = river_race.get("clan") or {}
    played = int(mine.get("battlesPlayed") or 0)
    wins = int(mine.get("wins") or 0)
    return {
        "state": river_race.get("state"),
        "period_index": river_race.get("periodIndex"),
        "period_type": river_race.get("periodType"),
        "fame": int(mine.get("fame") or 0),
        "total_decks_used": int(mine.get("totalDecksUsed") or 0),
        "participants": len(mine.get("participants") or []),
        "battles_played": played,
        "wins": wins,
        "losses": played - wins,
        "winrate": wins / played if played > 0 else 0.0,
        "rank": int(mine.get("rank") or 0),
        "clans_in_race": len(river_race.get("clans") or []),
    }


def _war_history_row(war: dict[str, Any], *, clan_tag: str | None) -> dict[str, Any]:
    standing: dict[str, Any] = {}
    for s in war.get("standings") or []:
        if (s.get("clan") or {}).get("tag") == clan_tag:
            standing = s
            break
    entry = standing.get("clan") or {}
    return {
        "season_id": war.get("seasonId"),
        "section_index": war.get("sectionIndex"),
        "created_date": war.get("createdDate"),
        "rank": int(standing.get("rank") or 0),
        "trophy_change": int(standing.get("trophyChange") or 0),
        "fame": int(entry.get("fame") or 0),
        "participants": len(entry.get("participants") or []),
        "battles_played": int(entry.get("battlesPlayed") or 0),
        "wins": int(entry.get("wins") or 0),
        "clan_score": int(entry.get("clanScore") or 0),
    }


def calculate_clan_analytics(
    clan: dict[str, Any],
    river_race: dict[str, Any] | None = None,
    river_race_log: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Clan summary, current river race and per-war history for one clan.

    `river_race` and `river_race_log` are optional: clans outside a war (or a
    failed fetch) simply yield `current_war=None` / an empty history.
    """
    history: list[dict[str, Any]] = []
    if river_race_log and isinstance(river_race_log.get("items"), list):
        history = [
            _war_history_row(war, clan_tag=clan.get("tag"))
            for war in river_race_log["items"]
            if isinstance(war, dict)
        ]

    return {
        "clan": _clan_header(clan),
        "summary": _member_summary(clan),
        "current_war": _current_war(river_race) if river_race else None,
        "war_history": history,
    }
