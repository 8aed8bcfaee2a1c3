#!/usr/bin/env python3
"""
data_fetch.py

Remote data fetchers for the standings and game widgets (football-data.org,
ESPN, openfootball), sharing one requests.Session with retries.
"""

import datetime
import logging
import re
from typing import Callable, List, Optional, Tuple, TypeVar

from config import (
    DEFAULT_MATCH_LIMIT,
    ESPN_API_URL,
    FOOTBALL_DATA_API_URL,
    OPENFOOTBALL_INDEX_URL,
    OPENFOOTBALL_RAW_URL,
    USER_AGENT,
)
from services.http_client import FetchError, get_json, get_session, get_text

import boxscore
import standings

T = TypeVar("T")

# ─── Shared HTTP session ─────────────────────────────────────────────────────
_session = get_session()

LATEST_SEASONS = {"", "latest", "auto"}
SEASON_FALLBACK_STATUSES = {403, 404}
_YEAR_RE = re.compile(r"^\d{4}$")
_SEASON_DIR_RE = re.compile(r"^(\d{4})(?:[-/_]\d{2,4})?$")


def _positive_limit(value, default: int = DEFAULT_MATCH_LIMIT) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return default


# -----------------------------------------------------------------------------
# football-data.org: standings + next matches
# -----------------------------------------------------------------------------
def _football_data_headers(token: str) -> dict:
    return {
        "X-Auth-Token": token,
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }


def _season_param(season: Optional[str]) -> dict:
    season = (season or "").strip()
    if season.lower() not in LATEST_SEASONS and _YEAR_RE.match(season):
        return {"season": season}
    return {}


def _fetch_upcoming_matches(team_id, token: str, limit: int, season: str, competition: str):
    if not team_id:
        return []

    params = {
        "status": "SCHEDULED",
        "competitions": competition,
        "limit": str(max(limit, 1)),
    }
    params.update(_season_param(season))

    url = f"{FOOTBALL_DATA_API_URL}/teams/{team_id}/matches"
    data = get_json(_session, url, headers=_football_data_headers(token), params=params)
    return standings.map_upcoming_matches((data or {}).get("matches"), team_id, limit)


def fetch_football_data(request) -> dict:
    """Standings table, season label and favourite's next matches."""

    token = (request.api_token or "").strip()
    if not token:
        raise FetchError("Missing api_token for football-data.org.")

    limit = _positive_limit(request.upcoming_limit)
    url = f"{FOOTBALL_DATA_API_URL}/competitions/{request.competition}/standings"
    data = get_json(
        _session,
        url,
        headers=_football_data_headers(token),
        params=_season_param(request.season),
    )

    table_source = standings.select_standings_table(data)
    if not table_source or not isinstance(table_source.get("table"), list):
        raise FetchError("No standings data returned by football-data.org")

    table = [standings.map_table_entry(entry) for entry in table_source["table"]]
    favorite = standings.find_favorite_team(table, request.favorite_team)

    upcoming = []
    if favorite and favorite.get("team_id"):
        try:
            upcoming = _fetch_upcoming_matches(
                favorite["team_id"], token, limit, request.season, request.competition
            )
        except Exception as exc:
            logging.error("Unable to load upcoming matches for %s: %s", favorite["team"], exc)

    return {
        "table": table,
        "season": standings.format_season_label((data or {}).get("season")),
        "favorite_team": (
            {
                "name": favorite["team"],
                "crest": favorite.get("crest"),
                "team_id": favorite.get("team_id"),
            }
            if favorite
            else None
        ),
        "upcoming_matches": upcoming,
    }


# -----------------------------------------------------------------------------
# ESPN: team schedule + live box score
# -----------------------------------------------------------------------------
def fetch_espn_schedule(request, now: Optional[datetime.datetime] = None) -> dict:
    team_id = (request.team_id or "").strip()
    if not team_id:
        raise FetchError("Missing team_id for the ESPN schedule.")

    base = f"{ESPN_API_URL}/{request.sport}/{request.league}"
    schedule = get_json(_session, f"{base}/teams/{team_id}/schedule") or {}
    now = now or datetime.datetime.now(datetime.timezone.utc)

    live_event, upcoming_events = boxscore.split_schedule(
        schedule.get("events"), now, _positive_limit(request.upcoming_limit)
    )

    live_game = None
    if live_event is not None:
        summary = get_json(_session, f"{base}/summary", params={"event": live_event.get("id")})
        live_game = boxscore.build_live_game(live_event, summary, team_id)

    upcoming = [boxscore.format_upcoming(event, team_id) for event in upcoming_events]
    return {
        "live_game": live_game,
        "upcoming_games": [game for game in upcoming if game],
    }


# -----------------------------------------------------------------------------
# openfootball: plain-text results with season fallback
# -----------------------------------------------------------------------------
def season_start_year(label: str) -> Optional[int]:
    match = _SEASON_DIR_RE.match(label or "")
    return int(match.group(1)) if match else None


def sort_seasons(labels) -> List[str]:
    """Season labels newest first; labels without a start year are dropped."""

    seasons = [label for label in labels if season_start_year(label) is not None]
    return sorted(seasons, key=season_start_year, reverse=True)


def fetch_openfootball_seasons() -> List[str]:
    listing = get_json(_session, OPENFOOTBALL_INDEX_URL, headers={"Accept": "application/json"})
    if not isinstance(listing, list):
        raise FetchError("Unexpected openfootball season index format")
    names = [
        entry.get("name")
        for entry in listing
        if isinstance(entry, dict) and entry.get("type", "dir") == "dir"
    ]
    return sort_seasons(name for name in names if isinstance(name, str))


def fetch_openfootball_text(season: str, source_file: str) -> str:
    return get_text(_session, f"{OPENFOOTBALL_RAW_URL}/{season}/{source_file}")


def fetch_with_season_fallback(
    season: Optional[str],
    load: Callable[[str], T],
    list_seasons: Callable[[], List[str]],
) -> Tuple[str, T]:
    """Load *season*, falling back through the season index.

    Candidates are tried one after another; 403/404 moves on to the next one,
    any other failure is raised straight away.
    """
    requested = (season or "").strip()
    tried: List[str] = []

    if requested.lower() not in LATEST_SEASONS:
        tried.append(requested)
        try:
            return requested, load(requested)
        except FetchError as exc:
            if exc.status not in SEASON_FALLBACK_STATUSES:
                raise
            logging.info(
                "Season %s unavailable (HTTP %s); checking the season index", requested, exc.status
            )

    for candidate in list_seasons():
        if candidate in tried:
            continue
        tried.append(candidate)
        try:
            return candidate, load(candidate)
        except FetchError as exc:
            if exc.status not in SEASON_FALLBACK_STATUSES:
                raise
            logging.info("Season %s unavailable (HTTP %s); trying next", candidate, exc.status)

    if tried:
        raise FetchError(f"No season data available (tried {', '.join(tried)})", status=404)
    raise FetchError("No seasons listed in the season index", status=404)


def fetch_openfootball(request) -> dict:
    season, text = fetch_with_season_fallback(
        request.season,
        lambda candidate: fetch_openfootball_text(candidate, request.source_file),
        fetch_openfootball_seasons,
    )

    table = [row.as_dict() for row in standings.build_table(text)]
    if not table:
        logging.info("No league-stage results found for season %s", season)

    favorite = standings.find_favorite_team(table, request.favorite_team)
    return {
        "table": table,
        "season": season,
        "favorite_team": (
            {"name": favorite["team"], "crest": None, "team_id": None} if favorite else None
        ),
        "upcoming_matches": [],
    }
