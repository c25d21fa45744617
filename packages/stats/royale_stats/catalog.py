from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from royale_stats.models import CardMeta

CardCatalog = Mapping[str, CardMeta]


def build_card_catalog(items: Iterable[dict[str, Any]]) -> dict[str, CardMeta]:
    """Index the upstream `/cards` items by card name."""
    out: dict[str, CardMeta] = {}
    for item in items:
        if not isinstance(item, dict):
            continue
        name = str(item.get("name") or "").strip()
        if not name:
            continue
        icons = item.get("iconUrls") or {}
        out[name] = CardMeta(
            id=item.get("id"),
            name=name,
            icon_url=str(icons.get("medium") or icons.get("small") or ""),
            elixir_cost=int(item.get("elixirCost") or 0),
            rarity=str(item.get("rarity") or "COMMON").upper(),
            max_level=int(item.get("maxLevel") or 14),
            max_evolution_level=int(item.get("maxEvolutionLevel") or 0),
        )
    return out


def card_metadata(catalog: CardCatalog | None, name: str) -> dict[str, Any]:
    meta = (catalog or {}).get(name) or CardMeta(name=name)
    return {
        "icon_url": meta.icon_url,
        "elixir_cost": meta.elixir_cost,
        "rarity": meta.rarity,
        "max_level": meta.max_level,
    }
