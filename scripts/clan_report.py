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
from royale_dashboard.dashboard import clan_analytics, clan_members
from royale_stats.outcomes import normalize_tag


def render_markdown(analytics: dict, members: dict) -> str:
    clan = analytics.get("clan") or {}
    summary = analytics.get("summary") or {}
    war = analytics.get("current_war")
    md_lines = [
        f"# Clan Report: {clan.get('name')} (`{clan.get('tag')}`)",
        "",
        f"- members: `{summary.get('total_members')}` · "
        f"avg_trophies=`{summary.get('avg_trophies')}` · "
        f"donations=`{summary.get('total_donations')}` "
        f"(avg `{summary.get('avg_donations')}`)",
        f"- roles: leader={summary.get('leader_count')}, "
        f"co_leader={summary.get('co_leader_count')}, "
        f"elder={summary.get('elder_count')}, member={summary.get('member_count')}",
        "",
        "## Current war",
    ]
    if war:
        md_lines.append(
            f"- state=`{war.get('state')}` · rank={war.get('rank')} of "
            f"{war.get('clans_in_race')} · fame={war.get('fame')} · "
            f"W/L={war.get('wins')}/{war.get('losses')}"
        )
    else:
        md_lines.append("- (not in a river race)")

    md_lines.extend(["", "## War history"])
    history = list(analytics.get("war_history") or [])
    for row in history:
        md_lines.append(
            f"- S{row.get('season_id')}/{row.get('section_index')}: "
            f"rank={row.get('rank')}, fame={row.get('fame')}, "
            f"trophies={int(row.get('trophy_change') or 0):+d}"
        )
    if not history:
        md_lines.append("- (no data)")

    md_lines.extend(["", "## Members"])
    for m in members.get("members") or []:
        md_lines.append(
            f"- {m.get('name')} ({m.get('role')}) — trophies={m.get('trophies')}, "
            f"donations={m.get('donations')}"
        )
    return "\n".join(md_lines).rstrip() + "\n"


def main() -> None:
    settings = Settings()
    parser = argparse.ArgumentParser(
        description="Summarize a clan's members and river race history."
    )
    parser.add_argument("--tag", required=True, help="Clan tag, e.g. #9VUJYRP.")
    parser.add_argument(
        "--sort-by",
        default="trophies",
        choices=["name", "trophies", "donations", "donations_received", "clan_rank"],
    )
    parser.add_argument("--order", default="desc", choices=["asc", "desc"])
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

    try:
        with ClashRoyaleClient(settings) as client:
            analytics = clan_analytics(client, tag)
            members = clan_members(
                client, tag, sort_by=str(args.sort_by), order=str(args.order)
            )
    except ClashApiConfigError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(2) from exc
    except ClashApiError as exc:
        print(exc.message, file=sys.stderr)
        raise SystemExit(1) from exc

    now = datetime.now(UTC)
    report_name = f"clan_{tag.lstrip('#')}_{now.strftime('%Y%m%d')}"
    payload = {
        "generated_at": now.isoformat(),
        "analytics": analytics,
        "members": members,
    }
    json_path = out_dir / f"{report_name}.json"
    json_path.write_bytes(
        orjson.dumps(payload, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)
    )
    md_path = out_dir / f"{report_name}.md"
    md_path.write_text(render_markdown(analytics, members), encoding="utf-8")

    print(str(json_path))
    print(str(md_path))


if __name__ == "__main__":
    main()
