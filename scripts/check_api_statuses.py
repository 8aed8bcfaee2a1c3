"""Check that the upstream feeds behind each configured widget respond.

Run from any working directory; the project root `.env` is loaded so a
football-data.org token configured there is used for the authenticated check.
"""
from __future__ import annotations

import argparse
import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import requests
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_PATH = PROJECT_ROOT / ".env"

load_dotenv(ENV_PATH)

from config import (
    ESPN_API_URL,
    FOOTBALL_DATA_API_TOKEN,
    FOOTBALL_DATA_API_URL,
    FOOTBALL_DATA_COMPETITION,
    OPENFOOTBALL_FILE,
    OPENFOOTBALL_INDEX_URL,
    OPENFOOTBALL_RAW_URL,
    USER_AGENT,
    WIDGETS_CONFIG_PATH,
)
from widgets import WidgetConfig, build_widget_configs, load_widgets_config


@dataclass
class ApiResult:
    widget: str
    name: str
    url: str
    status: str
    http_status: Optional[int]
    detail: str


def _checks_for_widget(config: WidgetConfig) -> List[Dict[str, object]]:
    if config.provider == "football_data":
        competition = config.competition or FOOTBALL_DATA_COMPETITION
        url = f"{FOOTBALL_DATA_API_URL}/competitions/{competition}/standings"
        token = config.api_token or FOOTBALL_DATA_API_TOKEN
        if not token:
            return [{"name": "football-data.org standings", "url": url, "skip": "api_token not configured"}]
        return [
            {
                "name": "football-data.org standings",
                "url": url,
                "headers": {"X-Auth-Token": token},
            }
        ]

    if config.provider == "espn_schedule":
        base = f"{ESPN_API_URL}/{config.sport}/{config.league}"
        return [
            {"name": "ESPN scoreboard", "url": f"{base}/scoreboard"},
            {"name": "ESPN team schedule", "url": f"{base}/teams/{config.team_id}/schedule"},
        ]

    checks: List[Dict[str, object]] = [
        {"name": "openfootball season index", "url": OPENFOOTBALL_INDEX_URL},
    ]
    season = config.season if config.season not in ("", "latest", "auto") else None
    if season:
        checks.append(
            {
                "name": f"openfootball {season} text",
                "url": f"{OPENFOOTBALL_RAW_URL}/{season}/{config.source_file or OPENFOOTBALL_FILE}",
            }
        )
    return checks


def build_checks(configs: Iterable[WidgetConfig]) -> List[Dict[str, object]]:
    checks = []
    for config in configs:
        for check in _checks_for_widget(config):
            check["widget"] = config.id
            checks.append(check)
    return checks


def check_endpoint(
    widget: str,
    name: str,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: int = 10,
) -> ApiResult:
    merged = {"User-Agent": USER_AGENT, **(headers or {})}
    try:
        response = requests.get(url, headers=merged, timeout=timeout)
    except requests.RequestException as exc:
        return ApiResult(widget, name, url, "error", None, str(exc))
    status = "ok" if response.ok else "error"
    detail = f"HTTP {response.status_code}"
    if not response.ok:
        detail = f"{detail}: {response.text[:200]}"
    return ApiResult(widget, name, response.url, status, response.status_code, detail)


def format_results(results: Iterable[ApiResult]) -> str:
    lines = []
    for result in results:
        prefix = {"ok": "✅", "skipped": "⏭️"}.get(result.status, "❌")
        lines.append(" - ".join([prefix, f"[{result.widget}] {result.name}", result.detail]))
        lines.append(f"    URL: {result.url}")
    return "\n".join(lines)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Check the feeds behind each configured widget")
    parser.add_argument("--config", default=WIDGETS_CONFIG_PATH, help="Path to widgets_config.json")
    parser.add_argument("--json", action="store_true", help="Return machine-readable output")
    parser.add_argument("--timeout", type=int, default=10, help="Request timeout in seconds (default: 10)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configs = build_widget_configs(load_widgets_config(os.path.expanduser(args.config)))

    results: List[ApiResult] = []
    for check in build_checks(configs):
        if check.get("skip"):
            results.append(
                ApiResult(str(check["widget"]), str(check["name"]), str(check["url"]), "skipped", None, str(check["skip"]))
            )
            continue
        results.append(
            check_endpoint(
                str(check["widget"]),
                str(check["name"]),
                str(check["url"]),
                headers=check.get("headers"),
                timeout=args.timeout,
            )
        )

    if args.json:
        print(json.dumps([asdict(result) for result in results], indent=2))
    else:
        print(format_results(results))

    return 0 if all(r.status in {"ok", "skipped"} for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
