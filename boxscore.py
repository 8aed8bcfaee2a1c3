"""Map ESPN schedule and summary payloads to the game widget model."""
from __future__ import annotations

import datetime
from typing import Any, Dict, List, Optional

from utils import parse_iso_datetime

_TEAM_KEYS = ("abbreviation", "shortDisplayName", "displayName", "slug", "id", "uid")


def _team_matches(team: Any, target: str) -> bool:
    if not isinstance(team, dict) or not target:
        return False
    candidates = [str(team[key]).lower() for key in _TEAM_KEYS if team.get(key)]
    return target in candidates


def _first_competition(event: dict) -> Optional[dict]:
    competitions = event.get("competitions") or []
    return competitions[0] if competitions else None


def _venue_name(competition: dict) -> str:
    venue = competition.get("venue") or {}
    return venue.get("fullName") or venue.get("displayName") or ""


def _team_name(competitor: Optional[dict], default: str = "Opponent") -> str:
    team = (competitor or {}).get("team")
    if not team:
        return default
    return team.get("displayName") or team.get("shortDisplayName") or team.get("name") or default


def event_state(event: dict) -> Optional[str]:
    competition = _first_competition(event) or {}
    return ((competition.get("status") or {}).get("type") or {}).get("state")


def find_favorite_competitor(competition: dict, team_id: str) -> Optional[dict]:
    competitors = competition.get("competitors") or []
    target = (team_id or "").lower()
    for competitor in competitors:
        if _team_matches(competitor.get("team"), target):
            return competitor
    return competitors[0] if competitors else None


def find_opponent(competition: dict, favorite: Optional[dict]) -> Optional[dict]:
    competitors = competition.get("competitors") or []
    if favorite is None:
        if len(competitors) > 1:
            return competitors[1]
        return competitors[0] if competitors else None
    for competitor in competitors:
        if competitor is not favorite:
            return competitor
    return None


def map_stats(labels: Any, stats: Any) -> Dict[str, Any]:
    if not isinstance(labels, list) or not isinstance(stats, list):
        return {}
    return dict(zip(labels, stats))


def extract_player_stats(players_data: Any, team_id: str) -> List[Dict[str, Any]]:
    if not isinstance(players_data, list):
        return []

    target = (team_id or "").lower()
    team_entry = next(
        (entry for entry in players_data if _team_matches(entry.get("team"), target)),
        None,
    )
    if not team_entry or not isinstance(team_entry.get("statistics"), list):
        return []

    stats_entry = next(
        (stat for stat in team_entry["statistics"] if isinstance(stat.get("athletes"), list)),
        None,
    )
    if stats_entry is None:
        return []

    labels = stats_entry.get("labels") if isinstance(stats_entry.get("labels"), list) else []
    players = []
    for athlete in stats_entry["athletes"]:
        line = map_stats(labels, athlete.get("stats"))
        info = athlete.get("athlete") or {}
        players.append(
            {
                "id": info.get("id"),
                "name": info.get("displayName") or info.get("shortName") or "Unknown",
                "position": (info.get("position") or {}).get("abbreviation"),
                "points": line.get("PTS") or line.get("Points") or "",
                "rebounds": line.get("REB") or line.get("Rebounds") or "",
                "assists": line.get("AST") or line.get("Assists") or "",
                "steals": line.get("STL") or line.get("Steals") or "",
            }
        )
    return players


def format_upcoming(event: dict, team_id: str) -> Optional[Dict[str, Any]]:
    competition = _first_competition(event)
    if not competition:
        return None

    favorite = find_favorite_competitor(competition, team_id)
    opponent = find_opponent(competition, favorite)
    return {
        "id": event.get("id"),
        "date": event.get("date"),
        "opponent": _team_name(opponent),
        "venue": _venue_name(competition),
        "is_home": bool(favorite) and favorite.get("homeAway") == "home",
    }


def _score(competitor: Optional[dict]) -> str:
    score = (competitor or {}).get("score")
    # The schedule feed nests scores; the scoreboard feed uses plain strings.
    if isinstance(score, dict):
        score = score.get("displayValue") or score.get("value")
    return str(score) if score not in (None, "") else "0"


def _status_detail(event: dict, competition: dict) -> str:
    comp_type = (competition.get("status") or {}).get("type") or {}
    event_type = (event.get("status") or {}).get("type") or {}
    return (
        comp_type.get("detail")
        or comp_type.get("shortDetail")
        or event_type.get("detail")
        or "Live"
    )


def build_live_game(event: dict, summary: Optional[dict], team_id: str) -> Optional[Dict[str, Any]]:
    competition = _first_competition(event)
    if not competition:
        return None

    favorite = find_favorite_competitor(competition, team_id)
    opponent = find_opponent(competition, favorite)
    boxscore = (summary or {}).get("boxscore") or {}

    return {
        "event_id": event.get("id"),
        "status": _status_detail(event, competition),
        "start_time": event.get("date"),
        "team_score": _score(favorite),
        "opponent_score": _score(opponent),
        "opponent": _team_name(opponent),
        "venue": _venue_name(competition),
        "players": extract_player_stats(boxscore.get("players"), team_id),
    }


def split_schedule(events: Any, now: datetime.datetime, limit: int):
    """Return ``(live_event, upcoming_events)`` from an ESPN team schedule.

    The first in-progress event is live; scheduled events dated *now* or later
    are upcoming, earliest first, truncated to *limit*.
    """
    live_event = None
    upcoming = []
    for event in events if isinstance(events, list) else []:
        if not _first_competition(event):
            continue
        state = event_state(event)
        event_date = parse_iso_datetime(event.get("date"))
        if state == "in" and live_event is None:
            live_event = event
        elif state == "pre" and event_date is not None and event_date >= now:
            upcoming.append((event_date, event))

    upcoming.sort(key=lambda item: item[0])
    return live_event, [event for _, event in upcoming[: max(limit, 0)]]
