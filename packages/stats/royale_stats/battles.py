from __future__ import annotations

import math
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from royale_stats.catalog import CardCatalog, card_metadata
from royale_stats.filters import BattleFilters
from royale_stats.models import Battle, CardPlay
from royale_stats.outcomes import (
    crowns_for_against,
    deck_fingerprint,
    normalize_tag,
    opponent_deck,
    player_deck,
    player_won,
)
from royale_stats.streaks import compute_streaks


def parse_battles(raw: Iterable[Any]) -> tuple[list[Battle], int]:
    """Validate raw battle-log entries. Returns (battles, skipped_count)."""
    battles: list[Battle] = []
    skipped = 0
    for item in raw or []:
        if isinstance(item, Battle):
            battles.append(item)
            continue
        if not isinstance(item, dict):
            skipped += 1
            continue
        try:
            battles.append(Battle.model_validate(item))
        except ValidationError:
            skipped += 1
    return battles, skipped


def _winrate(wins: int, losses: int) -> float | None:
    decided = int(wins) + int(losses)
    return wins / decided if decided else None


def _round1(value: float) -> float:
    return round(float(value) * 10) / 10


def _add_outcome(row: dict[str, Any], won: bool | None) -> None:
    if won is True:
        row["wins"] += 1
    elif won is False:
        row["losses"] += 1


def _ensure_card_row(table: dict[str, dict[str, Any]], name: str) -> dict[str, Any]:
    row = table.get(name)
    if row is not None:
        return row
    row = {
        "name": name,
        "count": 0,
        "wins": 0,
        "losses": 0,
        "_levels": [],
        "_elixir": 0,
    }
    table[name] = row
    return row


def _add_card(
    table: dict[str, dict[str, Any]], card: CardPlay, won: bool | None
) -> None:
    row = _ensure_card_row(table, card.name)
    row["count"] += 1
    _add_outcome(row, won)
    if card.level is not None:
        row["_levels"].append(int(card.level))
    if card.elixir_cost:
        row["_elixir"] = int(card.elixir_cost)


def _finalize_card(
    row: dict[str, Any], *, retained_total: int, catalog: CardCatalog | None
) -> dict[str, Any]:
    levels: list[int] = list(row["_levels"])
    meta = card_metadata(catalog, row["name"])
    if not meta["elixir_cost"] and row["_elixir"]:
        meta["elixir_cost"] = int(row["_elixir"])
    return {
        "name": row["name"],
        "count": row["count"],
        "percentage": row["count"] / retained_total if retained_total else 0.0,
        "wins": row["wins"],
        "losses": row["losses"],
        "winrate": _winrate(row["wins"], row["losses"]),
        "metadata": meta,
        "opponent_stats": {
            "avg_level": _round1(sum(levels) / len(levels)) if levels else None,
            "max_level": max(levels) if levels else None,
            "min_level": min(levels) if levels else None,
            "level_distribution": levels,
        },
    }


def _finalize_deck(row: dict[str, Any], *, top_cards: int | None) -> dict[str, Any]:
    opponents = []
    for opp in row["_opponents"].values():
        levels = opp["_levels"]
        opponents.append(
            {
                "name": opp["name"],
                "count": opp["count"],
                "wins": opp["wins"],
                "losses": opp["losses"],
                "winrate": _winrate(opp["wins"], opp["losses"]),
                "avg_level": _round1(sum(levels) / len(levels)) if levels else None,
            }
        )
    opponents.sort(key=lambda r: (-int(r["count"]), str(r["name"])))
    if top_cards is not None:
        opponents = opponents[: max(0, int(top_cards))]
    return {
        "deck_id": row["deck_id"],
        "deck": row["deck"],
        "battles": row["battles"],
        "wins": row["wins"],
        "losses": row["losses"],
        "winrate": _winrate(row["wins"], row["losses"]),
        "top_opponent_cards": opponents,
    }


def _counter_cards(
    cards: list[dict[str, Any]], *, min_encounters: int, limit: int
) -> list[dict[str, Any]]:
    # A win rate needs at least one decided game.
    floor = max(1, int(min_encounters))
    eligible = [c for c in cards if int(c["wins"]) + int(c["losses"]) >= floor]
    eligible.sort(key=lambda c: (float(c["winrate"]), -int(c["count"]), str(c["name"])))
    return [
        {
            "name": c["name"],
            "count": c["count"],
            "wins": c["wins"],
            "losses": c["losses"],
            "winrate": c["winrate"],
            "loss_rate": 1.0 - float(c["winrate"]),
            "metadata": c["metadata"],
        }
        for c in eligible[: max(0, int(limit))]
    ]


def aggregate_battles(
    battle_log: Iterable[Any],
    *,
    player_tag: str,
    filters: BattleFilters | None = None,
    card_catalog: CardCatalog | None = None,
    now: datetime | None = None,
    counter_min_encounters: int = 3,
    counter_limit: int = 10,
    deck_top_cards: int | None = 10,
) -> dict[str, Any]:
    """Turn a raw battle log into card, deck, streak and counter statistics.

    Retained battles are those that pass `filters` and have a locatable,
    non-empty opponent roster. Every per-card and per-deck figure, the
    streaks and the crown averages are computed over retained battles only.
    """
    tag = normalize_tag(player_tag)
    filters = filters or BattleFilters()
    now_dt = now or datetime.now(UTC)

    battles, skipped = parse_battles(battle_log)
    selected = [
        b
        for b in battles
        if filters.accepts(battle_type=b.type, battle_time=b.battle_time, now=now_dt)
    ]

    battle_types: dict[str, int] = {}
    for b in selected:
        battle_types[b.type] = battle_types.get(b.type, 0) + 1

    card_rows: dict[str, dict[str, Any]] = {}
    deck_rows: dict[str, dict[str, Any]] = {}
    retained: list[tuple[Battle, bool | None]] = []
    total_wins = 0
    total_losses = 0
    crowns_for = 0
    crowns_against = 0

    for b in selected:
        opp_cards = opponent_deck(b, tag)
        if not opp_cards:
            continue
        won = player_won(b, tag)
        retained.append((b, won))

        if won is True:
            total_wins += 1
        elif won is False:
            total_losses += 1
        c_for, c_against = crowns_for_against(b, tag)
        crowns_for += c_for
        crowns_against += c_against

        my_cards = player_deck(b, tag)
        if my_cards:
            deck_id = deck_fingerprint(my_cards)
            deck = deck_rows.get(deck_id)
            if deck is None:
                deck = {
                    "deck_id": deck_id,
                    "deck": [{"name": c.name, "level": c.level} for c in my_cards],
                    "battles": 0,
                    "wins": 0,
                    "losses": 0,
                    "_opponents": {},
                }
                deck_rows[deck_id] = deck
            deck["battles"] += 1
            _add_outcome(deck, won)
            for card in opp_cards:
                _add_card(deck["_opponents"], card, won)

        for card in opp_cards:
            _add_card(card_rows, card, won)

    retained_total = len(retained)
    cards = [
        _finalize_card(row, retained_total=retained_total, catalog=card_catalog)
        for row in card_rows.values()
    ]
    cards.sort(key=lambda c: (-int(c["count"]), str(c["name"])))

    decks = [_finalize_deck(row, top_cards=deck_top_cards) for row in deck_rows.values()]
    decks.sort(key=lambda d: (-int(d["battles"]), str(d["deck_id"])))

    all_levels = [lvl for c in cards for lvl in c["opponent_stats"]["level_distribution"]]
    elixir_sum = 0
    elixir_n = 0
    for c in cards:
        cost = int(c["metadata"]["elixir_cost"] or 0)
        if cost > 0:
            elixir_sum += cost * int(c["count"])
            elixir_n += int(c["count"])

    # Upstream lists newest first; streaks need oldest first.
    chronological = sorted(retained, key=lambda pair: pair[0].battle_time)
    streaks = compute_streaks(won for _, won in chronological)

    date_range = None
    if selected:
        oldest = min(b.battle_time for b in selected)
        newest = max(b.battle_time for b in selected)
        date_range = {
            "from": oldest.isoformat(),
            "to": newest.isoformat(),
            "days_span": math.ceil((newest - oldest).total_seconds() / 86400),
        }

    return {
        "player_tag": tag,
        "analysis": {
            "total_battles": len(selected),
            "processed_battles": retained_total,
            "skipped_records": skipped,
            "battle_types": battle_types,
            "date_range": date_range,
            "unique_cards": len(cards),
            "avg_opponent_level": _round1(sum(all_levels) / len(all_levels))
            if all_levels
            else 0.0,
            "avg_elixir_cost": _round1(elixir_sum / elixir_n) if elixir_n else 0.0,
            "total_wins": total_wins,
            "total_losses": total_losses,
            "overall_winrate": _winrate(total_wins, total_losses) or 0.0,
            "most_common_card": cards[0]["name"] if cards else None,
            "unique_decks_used": len(decks),
            "avg_crowns_for": _round1(crowns_for / retained_total)
            if retained_total
            else 0.0,
            "avg_crowns_against": _round1(crowns_against / retained_total)
            if retained_total
            else 0.0,
            "streaks": streaks.as_dict(),
        },
        "cards": cards,
        "decks": decks,
        "counter_cards": _counter_cards(
            cards, min_encounters=counter_min_encounters, limit=counter_limit
        ),
        "filters": filters.describe(),
    }
