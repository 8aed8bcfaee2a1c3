import pytest

import standings
from standings import build_table, parse_match_line, stage_flag_for_header


LEAGUE_HEADER = "» League Stage, Matchday 1"


def _rows(text):
    return [row.as_dict() for row in build_table(text)]


def test_two_results_fold_into_table():
    text = "\n".join([LEAGUE_HEADER, "Team A v Team B 2-1", "Team B v Team A 0-0"])

    rows = _rows(text)

    assert [row["team"] for row in rows] == ["Team A", "Team B"]
    team_a, team_b = rows
    assert team_a["position"] == 1
    assert (team_a["played"], team_a["wins"], team_a["draws"], team_a["losses"]) == (2, 1, 1, 0)
    assert team_a["points"] == 4
    assert team_a["goal_difference"] == 1
    assert team_b["position"] == 2
    assert (team_b["played"], team_b["wins"], team_b["draws"], team_b["losses"]) == (2, 0, 1, 1)
    assert team_b["points"] == 1
    assert team_b["goal_difference"] == -1


def test_matches_before_any_header_are_ignored():
    text = "\n".join(["Team A v Team B 5-0", LEAGUE_HEADER, "Team B v Team C 1-0"])

    rows = _rows(text)

    assert {row["team"] for row in rows} == {"Team B", "Team C"}
    assert rows[0]["team"] == "Team B"
    assert rows[0]["goals_for"] == 1


def test_knockout_header_stops_counting_and_neutral_header_keeps_state():
    text = "\n".join(
        [
            LEAGUE_HEADER,
            "Team A v Team B 1-0",
            "» Matchday 2",
            "Team B v Team A 3-0",
            "» Round of 16",
            "Team A v Team C 4-0",
            "▪ League Phase",
            "Team C v Team B 2-2",
        ]
    )

    rows = {row["team"]: row for row in _rows(text)}

    assert rows["Team A"]["played"] == 2
    assert rows["Team B"]["played"] == 3
    assert rows["Team C"]["played"] == 1
    assert rows["Team C"]["goals_for"] == 2


@pytest.mark.parametrize(
    "header, current, expected",
    [
        ("» League Stage, Matchday 8", False, True),
        ("» Group A", False, True),
        ("» Quarter-finals", True, False),
        ("» Final", True, False),
        ("» Knockout Round Play-offs", True, False),
        ("» Matchday 3", True, True),
        ("» Matchday 3", False, False),
    ],
)
def test_stage_flag_for_header(header, current, expected):
    assert stage_flag_for_header(header, current) is expected


def test_malformed_lines_are_skipped():
    text = "\n".join(
        [
            LEAGUE_HEADER,
            "Team A v Team B",
            "Team A vs Team B x-1",
            "just some notes",
            "",
            "Team A v Team B 1-1",
        ]
    )

    rows = _rows(text)

    assert [row["played"] for row in rows] == [1, 1]


def test_parse_match_line_handles_time_spacing_and_trailer():
    result = parse_match_line("  20.00  Real   Madrid  vs.  Bayern München  2 - 1  (1-0)")

    assert result == standings.MatchResult("Real Madrid", "Bayern München", 2, 1)


def test_parse_match_line_rejects_text_without_score():
    assert parse_match_line("Team A v Team B") is None


def test_empty_input_gives_empty_table():
    assert build_table("") == []
    assert build_table(LEAGUE_HEADER) == []


def test_tie_breaks_on_goal_difference_then_goals_for_then_name():
    text = "\n".join(
        [
            LEAGUE_HEADER,
            # Delta and Alpha tie on points and goal difference; Delta scored more.
            "Delta v Echo 3-2",
            "Alpha v Foxtrot 1-0",
            # Bravo and Charlie are level on everything.
            "Bravo v Golf 2-0",
            "Charlie v Hotel 2-0",
        ]
    )

    order = [row["team"] for row in _rows(text)]

    assert order[:4] == ["Bravo", "Charlie", "Delta", "Alpha"]


def test_name_tie_break_ignores_case_like_a_locale_compare():
    text = "\n".join([LEAGUE_HEADER, "PSV v X 1-0", "Paris v Y 1-0", "ajax v Z 1-0", "Ajax v W 1-0"])

    order = [row["team"] for row in _rows(text)]

    assert order[:4] == ["ajax", "Ajax", "Paris", "PSV"]


def test_sorting_an_already_ranked_table_is_stable():
    text = "\n".join(
        [LEAGUE_HEADER, "A v B 1-0", "C v D 2-2", "B v C 0-3", "D v A 1-1"]
    )
    rows = build_table(text)

    again = standings.rank_records(row.record for row in rows)

    assert [row.record.team for row in again] == [row.record.team for row in rows]


def test_table_invariants_hold():
    results = [
        "Arsenal v PSV 7-1",
        "PSV v Juventus 2-1",
        "Juventus v Arsenal 0-0",
        "Arsenal v PSV 2-2",
        "Juventus v PSV 0-3",
    ]
    decisive, drawn = 3, 2
    text = "\n".join([LEAGUE_HEADER] + results)

    rows = _rows(text)

    assert [row["position"] for row in rows] == list(range(1, len(rows) + 1))
    for row in rows:
        assert row["played"] == row["wins"] + row["draws"] + row["losses"]
        assert row["points"] == 3 * row["wins"] + row["draws"]
        assert row["goal_difference"] == row["goals_for"] - row["goals_against"]
    assert sum(row["goals_for"] for row in rows) == sum(row["goals_against"] for row in rows)
    assert sum(row["points"] for row in rows) == 3 * decisive + 2 * drawn
    assert sum(row["wins"] for row in rows) == decisive
    assert sum(row["draws"] for row in rows) == 2 * drawn


def test_select_standings_table_prefers_league_phase_total():
    data = {
        "standings": [
            {"stage": "LEAGUE_PHASE", "type": "HOME", "table": [{"position": 9}]},
            {"stage": "LEAGUE_PHASE", "type": "TOTAL", "group": None, "table": [{"position": 1}]},
        ]
    }

    assert standings.select_standings_table(data)["type"] == "TOTAL"
    assert standings.select_standings_table({"standings": "nope"}) is None


def test_map_table_entry_uses_row_keys():
    entry = {
        "position": 3,
        "team": {"id": 57, "name": "Arsenal FC", "shortName": "Arsenal", "tla": "ARS", "crest": "ars.png"},
        "playedGames": 6,
        "won": 4,
        "draw": 1,
        "lost": 1,
        "goalsFor": 15,
        "goalsAgainst": 3,
        "goalDifference": 12,
        "points": 13,
    }

    row = standings.map_table_entry(entry)

    assert set(row) == set(standings.ROW_KEYS)
    assert row["team"] == "Arsenal FC"
    assert row["team_id"] == 57
    assert row["goal_difference"] == 12


@pytest.mark.parametrize(
    "season, expected",
    [
        ({"startDate": "2024-09-17", "endDate": "2025-05-31"}, "2024-25"),
        ({"startDate": "2024-09-17"}, "2024-25"),
        ({"currentMatchday": 6}, "Matchday 6"),
        ({}, None),
        (None, None),
    ],
)
def test_format_season_label(season, expected):
    assert standings.format_season_label(season) == expected


@pytest.mark.parametrize("value, expected", [(5, "+5"), (0, "0"), (-2, "-2"), (None, "")])
def test_format_goal_difference(value, expected):
    assert standings.format_goal_difference(value) == expected


def test_limit_rows_keeps_favorite_outside_the_cut():
    table = [{"position": i, "team": f"Team {i}", "team_id": i} for i in range(1, 13)]

    rows = standings.limit_rows(table, 10, favorite_row=table[11])

    assert [row["position"] for row in rows] == list(range(1, 11)) + [12]


def test_limit_rows_without_limit_returns_everything():
    table = [{"position": 2, "team": "B"}, {"position": 1, "team": "A"}]

    assert [row["team"] for row in standings.limit_rows(table, None)] == ["A", "B"]
