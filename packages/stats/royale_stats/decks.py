from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class DeckNotFoundError(LookupError):
    pass


def parse_deck_ids(value: str | Iterable[str]) -> list[str]:
    """Comma-separated fingerprints; card names inside a fingerprint are `|`-joined."""
    parts = value.split(",") if isinstance(value, str) else list(value)
    out: list[str] = []
    for p in parts:
        deck_id = str(p or "").strip()
        if deck_id and deck_id not in out:
            out.append(deck_id)
    return out


def find_deck(report: dict[str, Any], deck_id: str) -> dict[str, Any] | None:
    wanted = str(deck_id or "").strip()
    for deck in report.get("decks") or []:
        if deck.get("deck_id") == wanted:
            return deck
    return None


def compare_decks(report: dict[str, Any], deck_ids: str | Iterable[str]) -> dict[str, Any]:
    wanted = parse_deck_ids(deck_ids)
    if not wanted:
        raise ValueError("at least one deck id is required")

    decks = [d for d in report.get("decks") or [] if d.get("deck_id") in wanted]
    if not decks:
        raise DeckNotFoundError("No matching decks found")

    def _wr(d: dict[str, Any]) -> float:
        return float(d.get("winrate") or 0.0)

    best = decks[0]
    most_played = decks[0]
    for d in decks[1:]:
        if _wr(d) > _wr(best):
            best = d
        if int(d.get("battles") or 0) > int(most_played.get("battles") or 0):
            most_played = d

    return {
        "decks": decks,
        "summary": {
            "total_battles": sum(int(d.get("battles") or 0) for d in decks),
            "avg_winrate": sum(_wr(d) for d in decks) / len(decks),
            "best_deck": best,
            "most_played": most_played,
        },
    }
