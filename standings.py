"""League table construction and standings normalisation.

Two sources feed the standings widgets:

* plain-text result dumps (openfootball style) which are parsed line by line
  and folded into :class:`TeamRecord` objects before being ranked, and
* JSON standings payloads (football-data.org) whose entries are mapped to the
  same row shape.

Both produce dictionaries with the keys listed in :data:`ROW_KEYS` so the
renderer does not care where a table came from.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence

ROW_KEYS = (
    "position",
    "team",
    "short_name",
    "tla",
    "crest",
    "team_id",
    "played",
    "wins",
    "draws",
    "losses",
    "goals_for",
    "goals_against",
    "goal_difference",
    "points",
)

POINTS_WIN = 3
POINTS_DRAW = 1

# Stage headers in the text dumps, e.g. "» League Stage, Matchday 1".
_HEADER_MARKERS = ("»", "▪")
_LEAGUE_STAGE_RE = re.compile(r"\b(league\s+(stage|phase)|group\b)", re.IGNORECASE)
_KNOCKOUT_STAGE_RE = re.compile(
    r"\b(knockout|play-?offs?|round\s+of\s+\d+|quarter-?finals?|semi-?finals?|finals?)\b",
    re.IGNORECASE,
)

_MATCH_RE = re.compile(
    r"""
    ^\s*
    (?:\d{1,2}[:.]\d{2}\s+)?           # kick-off time
    (?P<home>\S.*?)
    \s+vs?\.?\s+                       # "v" / "vs" / "vs."
    (?P<away>\S.*?)
    \s+(?P<home_goals>\d+)\s*-\s*(?P<away_goals>\d+)
    (?:\s+.*)?                         # half-time score, a.e.t., notes
    \s*$
    """,
    re.VERBOSE,
)
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class MatchResult:
    home: str
    away: str
    home_goals: int
    away_goals: int


@dataclass
class TeamRecord:
    """Running totals for one team; only ever incremented."""

    team: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0

    def add_result(self, scored: int, conceded: int) -> None:
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        self.goal_difference = self.goals_for - self.goals_against
        if scored > conceded:
            self.wins += 1
            self.points += POINTS_WIN
        elif scored == conceded:
            self.draws += 1
            self.points += POINTS_DRAW
        else:
            self.losses += 1


@dataclass
class StandingsRow:
    position: int
    record: TeamRecord
    short_name: Optional[str] = None
    tla: Optional[str] = None
    crest: Optional[str] = None
    team_id: Optional[Any] = None

    def as_dict(self) -> Dict[str, Any]:
        rec = self.record
        return {
            "position": self.position,
            "team": rec.team,
            "short_name": self.short_name,
            "tla": self.tla,
            "crest": self.crest,
            "team_id": self.team_id,
            "played": rec.played,
            "wins": rec.wins,
            "draws": rec.draws,
            "losses": rec.losses,
            "goals_for": rec.goals_for,
            "goals_against": rec.goals_against,
            "goal_difference": rec.goal_difference,
            "points": rec.points,
        }


# -----------------------------------------------------------------------------
# Plain-text dumps
# -----------------------------------------------------------------------------
def normalize_team_name(name: str) -> str:
    return _WHITESPACE_RE.sub(" ", name or "").strip()


def is_stage_header(line: str) -> bool:
    return line.lstrip().startswith(_HEADER_MARKERS)


def stage_flag_for_header(line: str, current: bool) -> bool:
    """Return the league-stage flag after reading header *line*.

    League/group headers switch counting on, knockout headers switch it off and
    anything else (``» Matchday 3``) keeps the current state.
    """
    text = line.strip().lstrip("".join(_HEADER_MARKERS)).strip()
    if _LEAGUE_STAGE_RE.search(text):
        return True
    if _KNOCKOUT_STAGE_RE.search(text):
        return False
    return current


def parse_match_line(line: str) -> Optional[MatchResult]:
    match = _MATCH_RE.match(line)
    if not match:
        return None
    home = normalize_team_name(match.group("home"))
    away = normalize_team_name(match.group("away"))
    if not home or not away:
        return None
    return MatchResult(
        home=home,
        away=away,
        home_goals=int(match.group("home_goals")),
        away_goals=int(match.group("away_goals")),
    )


def iter_league_matches(text: str) -> Iterable[MatchResult]:
    in_league_stage = False
    for line in (text or "").splitlines():
        if is_stage_header(line):
            in_league_stage = stage_flag_for_header(line, in_league_stage)
            continue
        if not in_league_stage:
            continue
        result = parse_match_line(line)
        if result is not None:
            yield result


def fold_matches(matches: Iterable[MatchResult]) -> Dict[str, TeamRecord]:
    records: Dict[str, TeamRecord] = {}
    for result in matches:
        home = records.setdefault(result.home, TeamRecord(result.home))
        away = records.setdefault(result.away, TeamRecord(result.away))
        home.add_result(result.home_goals, result.away_goals)
        away.add_result(result.away_goals, result.home_goals)
    return records


def ranking_key(record: TeamRecord):
    # Locale-style name order: case-insensitive first, then lowercase first.
    return (
        -record.points,
        -record.goal_difference,
        -record.goals_for,
        record.team.casefold(),
        record.team.swapcase(),
    )


def rank_records(records: Iterable[TeamRecord]) -> List[StandingsRow]:
    ordered = sorted(records, key=ranking_key)
    return [StandingsRow(position=index + 1, record=rec) for index, rec in enumerate(ordered)]


def build_table(text: str) -> List[StandingsRow]:
    """Parse a results dump and return the ranked league-stage table."""

    return rank_records(fold_matches(iter_league_matches(text)).values())


# -----------------------------------------------------------------------------
# JSON standings (football-data.org)
# -----------------------------------------------------------------------------
def select_standings_table(data: Any) -> Optional[dict]:
    if not isinstance(data, dict) or not isinstance(data.get("standings"), list):
        return None

    standings = data["standings"]
    for standing in standings:
        if not standing or standing.get("type") != "TOTAL":
            continue
        if (
            standing.get("stage") in ("LEAGUE_PHASE", "REGULAR_SEASON")
            or standing.get("group") is None
        ):
            return standing

    return standings[0] if standings and standings[0] else None


def map_table_entry(entry: dict) -> Dict[str, Any]:
    team = entry.get("team") or {}
    return {
        "position": entry.get("position"),
        "team": team.get("name") or "",
        "short_name": team.get("shortName"),
        "tla": team.get("tla"),
        "crest": team.get("crest"),
        "team_id": team.get("id"),
        "played": entry.get("playedGames"),
        "wins": entry.get("won"),
        "draws": entry.get("draw"),
        "losses": entry.get("lost"),
        "goals_for": entry.get("goalsFor"),
        "goals_against": entry.get("goalsAgainst"),
        "goal_difference": entry.get("goalDifference"),
        "points": entry.get("points"),
    }


def normalize_name(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return _WHITESPACE_RE.sub(" ", value.lower()).strip()


def _row_names(row: dict) -> List[str]:
    names = (row.get("team"), row.get("short_name"), row.get("tla"))
    return [n for n in (normalize_name(name) for name in names) if n]


def find_favorite_team(table: Sequence[dict], favorite_name: Optional[str]) -> Optional[dict]:
    """Return the row for the configured favourite team, if any.

    Exact (case-insensitive) matches on name, short name or TLA win first;
    otherwise the first row whose names contain, or are contained in, the
    favourite. Overlapping names resolve to the earliest row in table order.
    """
    target = normalize_name(favorite_name)
    if not target:
        return None

    for row in table:
        if target in _row_names(row):
            return row

    for row in table:
        if any(target in name or name in target for name in _row_names(row)):
            return row

    return None


def build_match_location(match: Optional[dict], is_home: bool) -> str:
    if not match:
        return "TBD"
    base = "Home" if is_home else "Away"
    venue = match.get("venue")
    if venue:
        return f"{base} · {venue}"
    return base


def map_upcoming_matches(matches: Any, team_id: Any, limit: int) -> List[Dict[str, Any]]:
    if not isinstance(matches, list) or not team_id:
        return []

    upcoming = []
    for match in matches[: max(limit, 0)]:
        home_team = match.get("homeTeam") or {}
        is_home = home_team.get("id") == team_id
        opponent = (match.get("awayTeam") if is_home else home_team) or {}
        opponent_name = opponent.get("name") or "TBD"
        upcoming.append(
            {
                "id": match.get("id"),
                "utc_date": match.get("utcDate"),
                "display_opponent": f"{'vs' if is_home else '@'} {opponent_name}",
                "location": build_match_location(match, is_home),
            }
        )
    return upcoming


def _year(value: Any) -> Optional[int]:
    if not isinstance(value, str) or len(value) < 4:
        return None
    try:
        return int(value[:4])
    except ValueError:
        return None


def format_season_label(season: Any) -> Optional[str]:
    if not isinstance(season, dict):
        return None

    start_year = _year(season.get("startDate"))
    end_year = _year(season.get("endDate"))

    if start_year is not None and end_year is not None:
        return f"{start_year}-{str(end_year)[-2:]}"
    if start_year is not None:
        return f"{start_year}-{str(start_year + 1)[-2:]}"
    if season.get("currentMatchday"):
        return f"Matchday {season['currentMatchday']}"
    return None


def format_goal_difference(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, int):
        return "" if value is None else str(value)
    return f"+{value}" if value > 0 else str(value)


def resolve_favorite_row(
    table: Sequence[dict],
    favorite_name: Optional[str],
    favorite_team_id: Any = None,
) -> Optional[dict]:
    """The single row to highlight: by team id when known, else by name."""

    if favorite_team_id:
        for row in table:
            if row.get("team_id") == favorite_team_id:
                return row
    return find_favorite_team(table, favorite_name)


def limit_rows(
    table: Sequence[dict],
    max_rows: Optional[int],
    favorite_row: Optional[dict] = None,
) -> List[dict]:
    """Keep the first *max_rows* rows plus the favourite, ordered by position."""

    limit = max_rows if isinstance(max_rows, int) and max_rows > 0 else len(table)
    rows: List[dict] = []
    for row in table:
        if len(rows) < limit or row is favorite_row:
            rows.append(row)
    return sorted(rows, key=lambda r: (r.get("position") is None, r.get("position") or 0))
