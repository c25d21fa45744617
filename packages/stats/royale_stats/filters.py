from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

COMPETITIVE_TYPES: frozenset[str] = frozenset(
    {
        "PvP",
        "PVP",
        "casual1v1",
        "CASUAL_1V1",
        "pathOfLegend",
        "PATH_OF_LEGEND",
        "tournament",
        "TOURNAMENT",
        "riverRacePvP",
        "RIVER_RACE_PVP",
    }
)

TIME_RANGES: dict[str, timedelta] = {
    "1h": timedelta(hours=1),
    "6h": timedelta(hours=6),
    "12h": timedelta(hours=12),
    "24h": timedelta(hours=24),
    "1d": timedelta(days=1),
    "3d": timedelta(days=3),
    "7d": timedelta(days=7),
    "14d": timedelta(days=14),
    "30d": timedelta(days=30),
}


def time_range_delta(value: str | None) -> timedelta | None:
    raw = str(value or "").strip()
    if not raw or raw == "all":
        return None
    delta = TIME_RANGES.get(raw)
    if delta is None:
        raise ValueError(
            f"unknown time range: {raw!r} (expected one of {', '.join(TIME_RANGES)})"
        )
    return delta


def parse_types(value: str | Iterable[str] | None) -> frozenset[str] | None:
    """Accepts a comma-separated string or an iterable of battle type tags."""
    if value is None:
        return None
    parts = value.split(",") if isinstance(value, str) else list(value)
    out = frozenset(str(p).strip() for p in parts if str(p or "").strip())
    if not out or out == {"all"}:
        return None
    return out


@dataclass(frozen=True)
class BattleFilters:
    types: frozenset[str] | None = None
    time_range: str | None = None

    @classmethod
    def build(
        cls,
        *,
        types: str | Iterable[str] | None = None,
        time_range: str | None = None,
    ) -> "BattleFilters":
        tr = str(time_range or "").strip() or None
        if tr == "all":
            tr = None
        time_range_delta(tr)  # raises on unknown ranges
        return cls(types=parse_types(types), time_range=tr)

    @property
    def accepted_types(self) -> frozenset[str]:
        return self.types if self.types is not None else COMPETITIVE_TYPES

    @property
    def max_age(self) -> timedelta | None:
        return time_range_delta(self.time_range)

    def accepts(self, *, battle_type: str, battle_time: datetime, now: datetime) -> bool:
        max_age = self.max_age
        if max_age is not None and (now - battle_time) > max_age:
            return False
        return battle_type in self.accepted_types

    def describe(self) -> dict[str, object]:
        return {
            "types": sorted(self.types) if self.types is not None else ["all"],
            "time_range": self.time_range or "all",
        }
