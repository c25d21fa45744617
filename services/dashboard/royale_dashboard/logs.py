from __future__ import annotations

import json
import sys
from datetime import UTC, datetime

from royale_dashboard.core.config import Settings


def log_event(
    event: str,
    *,
    level: str = "info",
    settings: Settings | None = None,
    **fields: object,
) -> None:
    settings = settings or Settings()
    if not settings.log_json:
        return
    payload: dict[str, object] = {
        "ts": datetime.now(UTC).isoformat(),
        "level": level,
        "event": event,
        **fields,
    }
    _log_json(payload)


def _log_json(payload: dict[str, object]) -> None:
    try:
        print(
            json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str),
            file=sys.stderr,
        )
    except Exception:  # noqa: BLE001
        pass
