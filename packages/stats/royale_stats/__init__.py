__all__ = [
    "COMPETITIVE_TYPES",
    "Battle",
    "BattleFilters",
    "CardMeta",
    "DeckNotFoundError",
    "aggregate_battles",
    "build_card_catalog",
    "calculate_clan_analytics",
    "compare_decks",
    "compute_streaks",
    "deck_fingerprint",
    "find_deck",
    "normalize_tag",
    "sort_members",
    "summarize_player",
]

from royale_stats.battles import aggregate_battles
from royale_stats.catalog import build_card_catalog
from royale_stats.clan import calculate_clan_analytics, sort_members
from royale_stats.decks import DeckNotFoundError, compare_decks, find_deck
from royale_stats.filters import COMPETITIVE_TYPES, BattleFilters
from royale_stats.models import Battle, CardMeta
from royale_stats.outcomes import deck_fingerprint, normalize_tag
from royale_stats.player import summarize_player
from royale_stats.streaks import compute_streaks
