from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

PLAYER_TAG = "#PLAYER1"

DECK_A = [
    "Hog Rider",
    "Musketeer",
    "Ice Golem",
    "Cannon",
    "Fireball",
    "The Log",
    "Ice Spirit",
    "Skeletons",
]
DECK_B = [
    "Golem",
    "Night Witch",
    "Baby Dragon",
    "Lightning",
    "Tornado",
    "Lumberjack",
    "Barbarian Barrel",
    "Mega Minion",
]

BASE_TIME = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


def battle_time(dt: datetime) -> str:
    return dt.strftime("%Y%m%dT%H%M%S.000Z")


def cards(names: list[str], *, level: int = 11) -> list[dict[str, Any]]:
    return [{"name": n, "level": level, "maxLevel": 14} for n in names]


def make_battle(
    *,
    minutes_ago: int = 0,
    battle_type: str = "PvP",
    my_cards: list[str] | None = None,
    opp_cards: list[str] | None = None,
    opp_level: int = 11,
    trophy_change: int | None = None,
    crowns: tuple[int, int] = (1, 0),
    player_tag: str = PLAYER_TAG,
    now: datetime = BASE_TIME,
) -> dict[str, Any]:
    me: dict[str, Any] = {
        "tag": player_tag,
        "name": "Me",
        "crowns": crowns[0],
        "cards": cards(my_cards if my_cards is not None else DECK_A),
    }
    if trophy_change is not None:
        me["trophyChange"] = trophy_change
    return {
        "type": battle_type,
        "battleTime": battle_time(now - timedelta(minutes=minutes_ago)),
        "gameMode": {"id": 72000006, "name": "Ladder"},
        "team": [me],
        "opponent": [
            {
                "tag": "#OPP",
                "name": "Them",
                "crowns": crowns[1],
                "cards": cards(opp_cards if opp_cards is not None else DECK_B, level=opp_level),
            }
        ],
    }


def make_team_battle(
    *,
    minutes_ago: int = 0,
    battle_type: str = "clanMate2v2",
    include_opponents: bool = True,
    player_tag: str = PLAYER_TAG,
    now: datetime = BASE_TIME,
) -> dict[str, Any]:
    rosters = [
        [
            {"tag": player_tag, "cards": cards(DECK_A)},
            {"tag": "#MATE", "cards": cards(DECK_B)},
        ]
    ]
    if include_opponents:
        rosters.append(
            [
                {"tag": "#OPPA", "cards": cards(["Miner", "Poison"])},
                {"tag": "#OPPB", "cards": cards(["Giant"])},
            ]
        )
    return {
        "type": battle_type,
        "battleTime": battle_time(now - timedelta(minutes=minutes_ago)),
        "teams": rosters,
    }
