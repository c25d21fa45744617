from __future__ import annotations

from collections.abc import Iterable

from royale_stats.models import Battle, CardPlay, Participant


def normalize_tag(tag: str) -> str:
    """`"#abc123"`, `"abc123"` and `" #ABC123 "` all become `"#ABC123"`."""
    raw = str(tag or "").strip().replace("#", "").upper()
    if not raw:
        raise ValueError("tag is required")
    if not raw.isalnum():
        raise ValueError(f"invalid tag: {tag!r}")
    return f"#{raw}"


def _same_tag(participant: Participant, player_tag: str) -> bool:
    return participant.tag.strip().upper() == player_tag


def find_player(battle: Battle, player_tag: str) -> Participant | None:
    for p in battle.team or []:
        if _same_tag(p, player_tag):
            return p
    for roster in battle.teams or []:
        for p in roster:
            if _same_tag(p, player_tag):
                return p
    return None


def player_deck(battle: Battle, player_tag: str) -> list[CardPlay] | None:
    me = find_player(battle, player_tag)
    if me is None or not me.cards:
        return None
    return me.cards


def opponent_deck(battle: Battle, player_tag: str) -> list[CardPlay] | None:
    """Cards of the first opposing participant, or None when no opposing roster exists.

    1v1 shape: `team` + `opponent`. Team shape: a list of rosters in `teams`,
    where the opposing roster is the first one the player is not part of.
    """
    if battle.team is not None and battle.opponent:
        return battle.opponent[0].cards
    if battle.teams and len(battle.teams) >= 2:
        for roster in battle.teams:
            if roster and not any(_same_tag(p, player_tag) for p in roster):
                return roster[0].cards
    return None


def player_won(battle: Battle, player_tag: str) -> bool | None:
    """True/False when the outcome can be attributed, None when it cannot."""
    me = None
    for p in battle.team or []:
        if _same_tag(p, player_tag):
            me = p
            break
    if me is not None and me.trophy_change:
        return me.trophy_change > 0

    if battle.team and battle.opponent:
        mine = (me or battle.team[0]).crowns or 0
        theirs = battle.opponent[0].crowns or 0
        if mine != theirs:
            return mine > theirs
    return None


def crowns_for_against(battle: Battle, player_tag: str) -> tuple[int, int]:
    me = find_player(battle, player_tag)
    theirs = battle.opponent[0].crowns if battle.opponent else None
    return int((me.crowns if me else None) or 0), int(theirs or 0)


def deck_fingerprint(cards: Iterable[CardPlay]) -> str:
    return "|".join(sorted(c.name for c in cards))
