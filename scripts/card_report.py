from __future__ import annotations

import argparse
import sys
from datetime import UTC, datetime
from pathlib import Path

import orjson

from royale_dashboard.clash_client import (
    ClashApiConfigError,
    ClashApiError,
    ClashRoyaleClient,
)
from royale_dashboard.core.config import Settings
from royale_dashboard.dashboard import player_card_counts
from royale_stats.filters import TIME_RANGES
from royale_stats.outcomes import normalize_tag


def _pct(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{float(value) * 100:.1f}%"


def _md_cards(rows: list[dict], *, title: str, n: int = 10) -> str:
    lines = [f"### {title}"]
    for r in rows[:n]:
        lines.append(
            f"- `{r.get('name')}` — seen={int(r.get('count') or 0)}, "
            f"W/L={int(r.get('wins') or 0)}/{int(r.get('losses') or 0)}, "
            f"wr={_pct(r.get('winrate'))}"
        )
    if len(lines) == 1:
        lines.append("- (no data)")
    return "\n".join(lines)


def _md_decks(rows: list[dict], *, n: int = 5) -> str:
    lines = ["### Decks (by battles)"]
    for d in rows[:n]:
        cards = ", ".join(str(c.get("name")) for c in d.get("deck") or [])
        lines.append(
            f"- {cards} — battles={int(d.get('battles') or 0)}, "
            f"wr={_pct(d.get('winrate'))}"
        )
    if len(lines) == 1:
        lines.append("- (no data)")
    return "\n".join(lines)


def render_markdown(payload: dict) -> str:
    analysis = payload.get("analysis") or {}
    streaks = analysis.get("streaks") or {}
    filters = payload.get("filters") or {}
    player = payload.get("player") or {}
    md_lines = [
        f"# Card Report: {player.get('name') or payload.get('player_tag')}",
        "",
        f"- generated_at: `{payload.get('generated_at')}`",
        f"- types: `{','.join(filters.get('types') or ['all'])}` · "
        f"time_range: `{filters.get('time_range') or 'all'}`",
        f"- battles: `{int(analysis.get('processed_battles') or 0)}` of "
        f"`{int(analysis.get('total_battles') or 0)}` · "
        f"W/L={int(analysis.get('total_wins') or 0)}/{int(analysis.get('total_losses') or 0)} · "
        f"wr={_pct(analysis.get('overall_winrate'))}",
        f"- streaks: current={int(streaks.get('current') or 0):+d}, "
        f"longest_win={int(streaks.get('longest_win') or 0)}, "
        f"longest_loss={int(streaks.get('longest_loss') or 0)}",
        "",
        _md_cards(list(payload.get("cards") or []), title="Most faced cards"),
        "",
        _md_cards(list(payload.get("counter_cards") or []), title="Biggest counters"),
        "",
        _md_decks(list(payload.get("decks") or [])),
    ]
    if payload.get("message"):
        md_lines.extend(["", f"_{payload['message']}_"])
    return "\n".join(md_lines).rstrip() + "\n"


def main() -> None:
    settings = Settings()
    parser = argparse.ArgumentParser(
        description="Aggregate a player's battle log into card/deck statistics."
    )
    parser.add_argument("--tag", required=True, help="Player tag, e.g. #2PP.")
    parser.add_argument(
        "--types",
        default=None,
        help="Comma-separated battle types (default: competitive types).",
    )
    parser.add_argument(
        "--time-range",
        default=None,
        choices=["all", *TIME_RANGES],
        help="Only include battles newer than this window.",
    )
    parser.add_argument(
        "--out-dir",
        default=str(Path(settings.artifacts_dir) / "reports"),
        help="Output directory (default: artifacts/reports).",
    )
    args = parser.parse_args()

    try:
        tag = normalize_tag(args.tag)
    except ValueError as exc:
        parser.error(str(exc))

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    now = datetime.now(UTC)
    try:
        with ClashRoyaleClient(settings) as client:
            payload = player_card_counts(
                client, tag, types=args.types, time_range=args.time_range, now=now
            )
    except ClashApiConfigError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(2) from exc
    except ClashApiError as exc:
        print(exc.message, file=sys.stderr)
        raise SystemExit(1) from exc

    report_name = f"cards_{tag.lstrip('#')}_{now.strftime('%Y%m%d')}"
    json_path = out_dir / f"{report_name}.json"
    json_path.write_bytes(
        orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)
    )
    md_path = out_dir / f"{report_name}.md"
    md_path.write_text(render_markdown(payload), encoding="utf-8")

    print(str(json_path))
    print(str(md_path))


if __name__ == "__main__":
    main()
