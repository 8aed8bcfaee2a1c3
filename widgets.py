"""Widget definitions loaded from ``widgets_config.json``."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from config import (
    DEFAULT_MATCH_LIMIT,
    DEFAULT_MAX_ROWS,
    DEFAULT_SEASON,
    DEFAULT_UPDATE_INTERVAL,
    FOOTBALL_DATA_API_TOKEN,
    FOOTBALL_DATA_COMPETITION,
    MIN_UPDATE_INTERVAL,
    OPENFOOTBALL_FILE,
)
from messages import FetchRequest
from providers_catalog import PROVIDER_IDS

KNOWN_PROVIDERS: Set[str] = set(PROVIDER_IDS)

_DEFAULT_TITLES = {
    "football_data": "UEFA Champions League Table",
    "openfootball": "UEFA Champions League Table",
    "espn_schedule": "Live Stats",
}


@dataclass
class WidgetConfig:
    id: str
    provider: str
    title: str
    season: str = DEFAULT_SEASON
    favorite_team: Optional[str] = None
    favorite_logo_url: Optional[str] = None
    api_token: str = ""
    upcoming_limit: int = DEFAULT_MATCH_LIMIT
    max_rows: int = DEFAULT_MAX_ROWS
    update_interval: int = DEFAULT_UPDATE_INTERVAL
    show_header: bool = True
    show_upcoming: bool = True
    competition: str = FOOTBALL_DATA_COMPETITION
    team_id: Optional[str] = None
    team_display_name: Optional[str] = None
    sport: str = "basketball"
    league: str = "wnba"
    source_file: str = OPENFOOTBALL_FILE

    def fetch_request(self) -> FetchRequest:
        return FetchRequest(
            widget_id=self.id,
            provider=self.provider,
            season=self.season,
            favorite_team=self.favorite_team,
            api_token=self.api_token,
            upcoming_limit=self.upcoming_limit,
            competition=self.competition,
            team_id=self.team_id,
            sport=self.sport,
            league=self.league,
            source_file=self.source_file,
        )


def load_widgets_config(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError("Widget configuration must be a JSON object")
    return data


def _optional_str(raw: Dict[str, Any], key: str, widget_id: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, (str, int)) or isinstance(value, bool):
        raise ValueError(f"'{key}' for '{widget_id}' must be a string")
    value = str(value).strip()
    return value or None


def _positive_int(raw: Dict[str, Any], key: str, widget_id: str, default: int) -> int:
    if key not in raw or raw[key] is None:
        return default
    value = raw[key]
    if isinstance(value, bool):
        raise ValueError(f"'{key}' for '{widget_id}' must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{key}' for '{widget_id}' must be an integer") from exc
    if number <= 0:
        raise ValueError(f"'{key}' for '{widget_id}' must be greater than zero")
    return number


def _flag(raw: Dict[str, Any], key: str, default: bool) -> bool:
    value = raw.get(key, default)
    if isinstance(value, str):
        return value.strip().lower() not in {"0", "false", "no", "off"}
    return bool(value)


def build_widget_config(widget_id: str, raw: Dict[str, Any]) -> WidgetConfig:
    if not isinstance(raw, dict):
        raise ValueError(f"Configuration for '{widget_id}' must be an object")

    provider = raw.get("provider")
    if provider not in KNOWN_PROVIDERS:
        raise ValueError(f"Unknown provider '{provider}' for '{widget_id}'")

    interval = _positive_int(raw, "update_interval", widget_id, DEFAULT_UPDATE_INTERVAL)
    if interval < MIN_UPDATE_INTERVAL:
        logging.warning(
            "update_interval for '%s' raised from %ds to %ds", widget_id, interval, MIN_UPDATE_INTERVAL
        )
        interval = MIN_UPDATE_INTERVAL

    api_token = _optional_str(raw, "api_token", widget_id)
    if provider == "football_data" and not api_token:
        api_token = FOOTBALL_DATA_API_TOKEN

    return WidgetConfig(
        id=widget_id,
        provider=provider,
        title=_optional_str(raw, "title", widget_id) or _DEFAULT_TITLES[provider],
        season=_optional_str(raw, "season", widget_id) or DEFAULT_SEASON,
        favorite_team=_optional_str(raw, "favorite_team", widget_id),
        favorite_logo_url=_optional_str(raw, "favorite_logo_url", widget_id),
        api_token=api_token or "",
        upcoming_limit=_positive_int(raw, "upcoming_limit", widget_id, DEFAULT_MATCH_LIMIT),
        max_rows=_positive_int(raw, "max_rows", widget_id, DEFAULT_MAX_ROWS),
        update_interval=interval,
        show_header=_flag(raw, "show_header", True),
        show_upcoming=_flag(raw, "show_upcoming", True),
        competition=_optional_str(raw, "competition", widget_id) or FOOTBALL_DATA_COMPETITION,
        team_id=_optional_str(raw, "team_id", widget_id),
        team_display_name=_optional_str(raw, "team_display_name", widget_id),
        sport=_optional_str(raw, "sport", widget_id) or "basketball",
        league=_optional_str(raw, "league", widget_id) or "wnba",
        source_file=_optional_str(raw, "source_file", widget_id) or OPENFOOTBALL_FILE,
    )


def build_widget_configs(config: Dict[str, Any]) -> List[WidgetConfig]:
    if not isinstance(config, dict):
        raise ValueError("Widget configuration must be a JSON object")

    widgets = config.get("widgets")
    if not isinstance(widgets, dict) or not widgets:
        raise ValueError("Configuration must provide a non-empty 'widgets' mapping")

    configs: List[WidgetConfig] = []
    for widget_id, raw in widgets.items():
        if not isinstance(widget_id, str) or not widget_id.strip():
            raise ValueError("Widget identifiers must be non-empty strings")
        if isinstance(raw, dict) and not _flag(raw, "enabled", True):
            # Disabled widgets stay in the file without being started.
            continue
        configs.append(build_widget_config(widget_id, raw))

    if not configs:
        raise ValueError("Configuration must contain at least one enabled widget")

    return configs
