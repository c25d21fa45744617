from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ROYALE_", extra="ignore")

    # Clash Royale developer API (token is bound to whitelisted IPs upstream).
    api_token: str | None = None
    api_base_url: str = "https://api.clashroyale.com/v1"
    api_timeout_sec: float = 10.0

    log_json: bool = False
    artifacts_dir: str = "./artifacts"

    # Battle aggregation knobs.
    counter_min_encounters: int = 3
    counter_cards_limit: int = 10
    deck_top_opponent_cards: int = 10

    # Clan river race data is optional for clans that are not in a war.
    clan_river_race_optional: bool = True

    @field_validator("api_token")
    @classmethod
    def _strip_token(cls, v: str | None) -> str | None:
        raw = str(v or "").strip()
        return raw or None

    @field_validator("api_base_url")
    @classmethod
    def _validate_base_url(cls, v: str) -> str:
        raw = str(v or "").strip().rstrip("/")
        if not raw.startswith(("http://", "https://")):
            raise ValueError(
                f"ROYALE_API_BASE_URL must be an http(s) URL, got {v!r}"
            )
        return raw

    @field_validator(
        "counter_min_encounters", "counter_cards_limit", "deck_top_opponent_cards"
    )
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if int(v) < 0:
            raise ValueError("must be >= 0")
        return int(v)
