from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

BATTLE_TIME_FORMAT = "%Y%m%dT%H%M%S.%fZ"


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


class CardPlay(_UpstreamModel):
    name: str
    level: int | None = None
    max_level: int | None = None
    elixir_cost: int | None = None
    evolution_level: int | None = None


class Participant(_UpstreamModel):
    tag: str = ""
    name: str = ""
    crowns: int | None = None
    trophy_change: int | None = None
    starting_trophies: int | None = None
    cards: list[CardPlay] = Field(default_factory=list)


class Battle(_UpstreamModel):
    type: str = ""
    battle_time: datetime
    game_mode: str | None = None
    team: list[Participant] | None = None
    opponent: list[Participant] | None = None
    teams: list[list[Participant]] | None = None

    @field_validator("battle_time", mode="before")
    @classmethod
    def _parse_battle_time(cls, v: Any) -> Any:
        if isinstance(v, str) and "T" in v and "-" not in v and ":" not in v:
            raw = v if "." in v else v.replace("Z", ".000Z")
            return datetime.strptime(raw, BATTLE_TIME_FORMAT).replace(tzinfo=UTC)
        return v

    @field_validator("battle_time")
    @classmethod
    def _ensure_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    @field_validator("game_mode", mode="before")
    @classmethod
    def _game_mode_name(cls, v: Any) -> Any:
        # Upstream sends {"id": ..., "name": ...}.
        if isinstance(v, dict):
            return v.get("name")
        return v


class CardMeta(BaseModel):
    id: int | None = None
    name: str
    icon_url: str = ""
    elixir_cost: int = 0
    rarity: str = "COMMON"
    max_level: int = 14
    max_evolution_level: int = 0
