from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from royale_dashboard.core.config import Settings
from royale_dashboard.logs import log_event


class ClashApiConfigError(RuntimeError):
    pass


class ClashApiError(Exception):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def error_message(status_code: int, *, resource: str = "player") -> str:
    if status_code == 400:
        return f"Invalid {resource} tag format"
    if status_code == 403:
        return "API authentication failed - check token and IP whitelist"
    if status_code == 404:
        return f"{resource.capitalize()} not found"
    if status_code == 429:
        return "Rate limit exceeded - try again later"
    if status_code == 503:
        return "Clash Royale API temporarily unavailable"
    return f"API Error: {status_code}"


def encode_tag(tag: str) -> str:
    return quote(str(tag), safe="")


class ClashRoyaleClient:
    """Thin synchronous client for the Clash Royale public API.

    Pass `transport` to swap the network layer (tests use `httpx.MockTransport`).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings or Settings()
        token = self.settings.api_token
        if not token:
            raise ClashApiConfigError(
                "ROYALE_API_TOKEN is not configured (see https://developer.clashroyale.com)"
            )
        self._http = httpx.Client(
            base_url=self.settings.api_base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=float(self.settings.api_timeout_sec),
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ClashRoyaleClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _get(self, path: str, *, resource: str) -> Any:
        try:
            resp = self._http.get(path)
        except httpx.HTTPError as exc:
            log_event(
                "upstream_request_failed",
                level="error",
                settings=self.settings,
                path=path,
                error=str(exc)[:300],
            )
            raise ClashApiError(
                f"Clash Royale API request failed: {str(exc)[:300]}"
            ) from exc

        if not (200 <= resp.status_code < 300):
            log_event(
                "upstream_error",
                level="warning",
                settings=self.settings,
                path=path,
                status=resp.status_code,
            )
            raise ClashApiError(
                error_message(resp.status_code, resource=resource),
                status_code=resp.status_code,
            )
        return resp.json()

    def get_player(self, tag: str) -> dict[str, Any]:
        return self._get(f"/players/{encode_tag(tag)}", resource="player")

    def get_battle_log(self, tag: str) -> list[dict[str, Any]]:
        data = self._get(f"/players/{encode_tag(tag)}/battlelog", resource="player")
        battles = list(data) if isinstance(data, list) else []
        log_event(
            "battle_log_fetched", settings=self.settings, tag=tag, battles=len(battles)
        )
        return battles

    def get_clan(self, tag: str) -> dict[str, Any]:
        return self._get(f"/clans/{encode_tag(tag)}", resource="clan")

    def get_current_river_race(self, tag: str) -> dict[str, Any]:
        return self._get(f"/clans/{encode_tag(tag)}/currentriverrace", resource="clan")

    def get_river_race_log(self, tag: str) -> dict[str, Any]:
        return self._get(f"/clans/{encode_tag(tag)}/riverracelog", resource="clan")

    def get_cards(self) -> list[dict[str, Any]]:
        data = self._get("/cards", resource="card")
        items = data.get("items") if isinstance(data, dict) else None
        return list(items or [])
