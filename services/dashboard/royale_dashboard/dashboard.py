from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from royale_stats.battles import aggregate_battles
from royale_stats.catalog import build_card_catalog
from royale_stats.clan import calculate_clan_analytics, sort_members
from royale_stats.decks import DeckNotFoundError, compare_decks, find_deck
from royale_stats.filters import BattleFilters
from royale_stats.models import CardMeta
from royale_stats.outcomes import normalize_tag
from royale_stats.player import summarize_player

from royale_dashboard.clash_client import ClashApiError, ClashRoyaleClient
from royale_dashboard.logs import log_event


def load_card_catalog(client: ClashRoyaleClient) -> dict[str, CardMeta]:
    """Card metadata is decoration; a failed fetch yields an empty catalog."""
    try:
        items = client.get_cards()
    except ClashApiError as exc:
        log_event(
            "card_catalog_unavailable",
            level="warning",
            settings=client.settings,
            error=exc.message,
            status=exc.status_code,
        )
        return {}
    catalog = build_card_catalog(items)
    log_event("card_catalog_loaded", settings=client.settings, cards=len(catalog))
    return catalog


def player_profile(client: ClashRoyaleClient, tag: str) -> dict[str, Any]:
    return summarize_player(client.get_player(normalize_tag(tag)))


def _optional_profile(client: ClashRoyaleClient, tag: str) -> dict[str, Any] | None:
    try:
        return player_profile(client, tag)
    except ClashApiError as exc:
        log_event(
            "player_profile_unavailable",
            level="warning",
            settings=client.settings,
            tag=tag,
            error=exc.message,
        )
        return None


def player_card_counts(
    client: ClashRoyaleClient,
    tag: str,
    *,
    types: str | Iterable[str] | None = None,
    time_range: str | None = None,
    catalog: dict[str, CardMeta] | None = None,
    now: datetime | None = None,
    include_profile: bool = True,
) -> dict[str, Any]:
    full_tag = normalize_tag(tag)
    filters = BattleFilters.build(types=types, time_range=time_range)
    settings = client.settings
    now_dt = now or datetime.now(UTC)

    battle_log = client.get_battle_log(full_tag)
    profile = _optional_profile(client, full_tag) if include_profile else None

    if not battle_log:
        return {
            "player_tag": full_tag,
            "player": profile,
            "analysis": {
                "total_battles": 0,
                "processed_battles": 0,
                "battle_types": {},
                "date_range": None,
            },
            "cards": [],
            "decks": [],
            "counter_cards": [],
            "filters": filters.describe(),
            "message": "No battles found",
            "generated_at": now_dt.isoformat(),
        }

    if catalog is None:
        catalog = load_card_catalog(client)

    report = aggregate_battles(
        battle_log,
        player_tag=full_tag,
        filters=filters,
        card_catalog=catalog,
        now=now_dt,
        counter_min_encounters=settings.counter_min_encounters,
        counter_limit=settings.counter_cards_limit,
        deck_top_cards=settings.deck_top_opponent_cards,
    )
    report["player"] = profile
    report["generated_at"] = now_dt.isoformat()
    log_event(
        "card_counts_built",
        settings=settings,
        tag=full_tag,
        total_battles=report["analysis"]["total_battles"],
        processed_battles=report["analysis"]["processed_battles"],
    )
    return report


def deck_details(
    client: ClashRoyaleClient,
    tag: str,
    deck_id: str,
    *,
    catalog: dict[str, CardMeta] | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    full_tag = normalize_tag(tag)
    report = player_card_counts(
        client, full_tag, catalog=catalog, now=now, include_profile=False
    )
    deck = find_deck(report, deck_id)
    if deck is None:
        raise DeckNotFoundError("Deck not found")
    return {"deck": deck, "player": {"tag": full_tag}}


def compare_player_decks(
    client: ClashRoyaleClient,
    tag: str,
    deck_ids: str | Iterable[str],
    *,
    catalog: dict[str, CardMeta] | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    report = player_card_counts(
        client, tag, catalog=catalog, now=now, include_profile=False
    )
    return compare_decks(report, deck_ids)


def clan_members(
    client: ClashRoyaleClient,
    tag: str,
    *,
    sort_by: str = "trophies",
    order: str = "desc",
) -> dict[str, Any]:
    full_tag = normalize_tag(tag)
    clan = client.get_clan(full_tag)
    return {
        "clan_tag": full_tag,
        "clan_name": clan.get("name"),
        "member_count": clan.get("members"),
        "members": sort_members(
            list(clan.get("memberList") or []), sort_by=sort_by, order=order
        ),
    }


def clan_analytics(client: ClashRoyaleClient, tag: str) -> dict[str, Any]:
    full_tag = normalize_tag(tag)
    clan = client.get_clan(full_tag)
    river_race = _river_race_part(client, full_tag, client.get_current_river_race)
    river_race_log = _river_race_part(client, full_tag, client.get_river_race_log)
    return calculate_clan_analytics(clan, river_race, river_race_log)


def _river_race_part(
    client: ClashRoyaleClient, tag: str, fetch: Any
) -> dict[str, Any] | None:
    try:
        return fetch(tag)
    except ClashApiError as exc:
        if not client.settings.clan_river_race_optional:
            raise
        log_event(
            "river_race_unavailable",
            level="warning",
            settings=client.settings,
            tag=tag,
            error=exc.message,
            status=exc.status_code,
        )
        return None
