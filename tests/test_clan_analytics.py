from __future__ import annotations

import pytest

from royale_stats.clan import calculate_clan_analytics, sort_members

CLAN_TAG = "#CLAN1"


def _members() -> list[dict]:
    return [
        {"name": "bravo", "role": "leader", "trophies": 7000, "donations": 100,
         "donationsReceived": 40, "clanRank": 2},
        {"name": "Alpha", "role": "coLeader", "trophies": 7500, "donations": 301,
         "donationsReceived": 80, "clanRank": 1},
        {"name": "charlie", "role": "elder", "trophies": 6000, "donations": 0,
         "donationsReceived": 120, "clanRank": 3},
        {"name": "delta", "role": "member", "trophies": 6000, "donations": 50,
         "donationsReceived": 0, "clanRank": 4},
    ]


def _clan() -> dict:
    return {
        "tag": CLAN_TAG,
        "name": "Royals",
        "type": "inviteOnly",
        "badgeId": 16000000,
        "clanScore": 60000,
        "clanWarTrophies": 3200,
        "requiredTrophies": 5000,
        "members": 4,
        "memberList": _members(),
    }


def _river_race() -> dict:
    return {
        "state": "full",
        "periodIndex": 3,
        "periodType": "warDay",
        "clan": {
            "tag": CLAN_TAG,
            "fame": 12000,
            "totalDecksUsed": 48,
            "participants": [{"tag": "#A"}, {"tag": "#B"}],
            "battlesPlayed": 20,
            "wins": 12,
            "rank": 2,
        },
        "clans": [{}, {}, {}, {}, {}],
    }


def _river_race_log() -> dict:
    return {
        "items": [
            {
                "seasonId": 110,
                "sectionIndex": 2,
                "createdDate": "20260301T100000.000Z",
                "standings": [
                    {"rank": 1, "trophyChange": 100, "clan": {"tag": "#OTHER", "fame": 1}},
                    {
                        "rank": 3,
                        "trophyChange": -20,
                        "clan": {
                            "tag": CLAN_TAG,
                            "fame": 9000,
                            "participants": [{}, {}, {}],
                            "battlesPlayed": 30,
                            "wins": 14,
                            "clanScore": 3100,
                        },
                    },
                ],
            },
            {"seasonId": 110, "sectionIndex": 1, "standings": []},
        ]
    }


def test_member_summary() -> None:
    out = calculate_clan_analytics(_clan())
    s = out["summary"]

    assert s["total_members"] == 4
    assert s["avg_trophies"] == 6625
    assert s["total_donations"] == 451
    assert s["total_donations_received"] == 240
    assert s["avg_donations"] == 113
    assert (s["leader_count"], s["co_leader_count"], s["elder_count"], s["member_count"]) == (
        1,
        1,
        1,
        1,
    )
    assert out["clan"]["name"] == "Royals"
    assert out["clan"]["clan_war_trophies"] == 3200
    assert out["current_war"] is None
    assert out["war_history"] == []


def test_current_war() -> None:
    war = calculate_clan_analytics(_clan(), _river_race())["current_war"]
    assert war["fame"] == 12000
    assert war["participants"] == 2
    assert (war["wins"], war["losses"]) == (12, 8)
    assert war["winrate"] == 0.6
    assert war["rank"] == 2
    assert war["clans_in_race"] == 5


def test_war_history_uses_own_standing() -> None:
    history = calculate_clan_analytics(_clan(), None, _river_race_log())["war_history"]
    assert len(history) == 2

    first = history[0]
    assert first["rank"] == 3
    assert first["trophy_change"] == -20
    assert first["fame"] == 9000
    assert first["participants"] == 3
    assert first["clan_score"] == 3100

    # No standing for this clan: zeroed row.
    assert history[1]["rank"] == 0
    assert history[1]["fame"] == 0


def test_clan_without_members() -> None:
    out = calculate_clan_analytics({"tag": CLAN_TAG, "members": 0, "memberList": []})
    assert out["summary"]["avg_trophies"] == 0
    assert out["summary"]["leader_count"] == 0


def test_sort_members_by_trophies_desc_is_stable() -> None:
    names = [m["name"] for m in sort_members(_members())]
    assert names == ["Alpha", "bravo", "charlie", "delta"]


def test_sort_members_by_name_case_insensitive() -> None:
    names = [m["name"] for m in sort_members(_members(), sort_by="name", order="asc")]
    assert names == ["Alpha", "bravo", "charlie", "delta"]


@pytest.mark.parametrize("key", ["donations_received", "donationsReceived"])
def test_sort_members_by_donations_received(key: str) -> None:
    names = [m["name"] for m in sort_members(_members(), sort_by=key)]
    assert names == ["charlie", "Alpha", "bravo", "delta"]


def test_sort_members_unknown_key_falls_back_to_trophies() -> None:
    names = [m["name"] for m in sort_members(_members(), sort_by="level", order="asc")]
    assert names == ["charlie", "delta", "bravo", "Alpha"]


def test_sort_members_rejects_bad_order() -> None:
    with pytest.raises(ValueError):
        sort_members(_members(), order="up")
