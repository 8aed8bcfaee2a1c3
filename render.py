"""HTML fragments for the standings and game widgets."""
from __future__ import annotations

from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import TEMPLATES_DIR
from providers import get_provider
from standings import format_goal_difference, limit_rows, resolve_favorite_row
from utils import format_game_datetime, format_match_date, log_call

STANDINGS_COLUMNS = [
    ("position", "#"),
    ("team", "Team"),
    ("played", "P"),
    ("wins", "W"),
    ("draws", "D"),
    ("losses", "L"),
    ("goals_for", "GF"),
    ("goals_against", "GA"),
    ("goal_difference", "GD"),
    ("points", "Pts"),
]

_env = Environment(
    loader=FileSystemLoader(TEMPLATES_DIR),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)
_env.filters["goal_difference"] = format_goal_difference
_env.filters["match_date"] = format_match_date
_env.filters["game_datetime"] = format_game_datetime


def _header_text(config, state: Dict[str, Any]) -> str:
    season_label = state.get("season") or (
        config.season if config.season not in ("latest", "auto") else ""
    )
    return f"{config.title} ({season_label})" if season_label else config.title


@log_call
def render_standings(config, state: Dict[str, Any]) -> str:
    table = state.get("table") or []
    favorite = resolve_favorite_row(table, state.get("favorite_name"), state.get("favorite_team_id"))
    rows = [
        {**row, "is_favorite": row is favorite}
        for row in limit_rows(table, config.max_rows, favorite)
    ]
    upcoming = state.get("upcoming_matches") or []
    return _env.get_template("standings.html").render(
        config=config,
        state=state,
        header=_header_text(config, state),
        columns=STANDINGS_COLUMNS,
        rows=rows,
        upcoming=upcoming if config.show_upcoming else [],
    )


@log_call
def render_game(config, state: Dict[str, Any]) -> str:
    upcoming = (state.get("upcoming_games") or [])[: config.upcoming_limit]
    return _env.get_template("game.html").render(
        config=config,
        state=state,
        team_name=config.team_display_name or config.team_id or config.title,
        live=state.get("live_game"),
        upcoming=upcoming,
    )


_RENDERERS = {
    "standings.html": render_standings,
    "game.html": render_game,
}


def render_widget(config, state: Dict[str, Any]) -> str:
    template = get_provider(config.provider).template
    return _RENDERERS[template](config, state)
