from __future__ import annotations

from typing import Any


def summarize_player(player: dict[str, Any]) -> dict[str, Any]:
    """Reduce an upstream player profile to the fields the dashboard shows."""
    wins = int(player.get("wins") or 0)
    losses = int(player.get("losses") or 0)
    arena = player.get("arena") or {}
    clan = player.get("clan")
    return {
        "name": player.get("name"),
        "tag": player.get("tag"),
        "level": player.get("expLevel"),
        "trophies": player.get("trophies"),
        "best_trophies": player.get("bestTrophies"),
        "wins": wins,
        "losses": losses,
        "winrate": wins / (wins + losses) if (wins + losses) else None,
        "battle_count": player.get("battleCount"),
        "three_crown_wins": player.get("threeCrownWins"),
        "arena": {
            "id": arena.get("id"),
            "name": arena.get("name"),
            "icon_url": str((arena.get("iconUrls") or {}).get("small") or ""),
        },
        "clan": {
            "tag": clan.get("tag"),
            "name": clan.get("name"),
            "badge_id": clan.get("badgeId"),
        }
        if isinstance(clan, dict)
        else None,
        "current_path_of_legend": player.get("currentPathOfLegendSeasonResult"),
    }
