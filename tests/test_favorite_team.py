from standings import find_favorite_team, map_upcoming_matches, resolve_favorite_row


def _row(team, short_name=None, tla=None, team_id=None):
    return {"team": team, "short_name": short_name, "tla": tla, "team_id": team_id}


def test_lowercase_name_matches_by_substring():
    table = [_row("Real Madrid CF"), _row("Arsenal FC")]

    assert find_favorite_team(table, "arsenal")["team"] == "Arsenal FC"


def test_exact_match_wins_over_earlier_substring_match():
    table = [
        _row("FC Internazionale Milano", short_name="Inter"),
        _row("AC Milan", short_name="Milan", tla="MIL"),
    ]

    assert find_favorite_team(table, "Milan")["team"] == "AC Milan"


def test_tla_matches_exactly():
    table = [_row("Paris Saint-Germain FC", short_name="PSG", tla="PSG"), _row("PSV", tla="PSV")]

    assert find_favorite_team(table, "psv")["team"] == "PSV"


def test_overlapping_names_resolve_to_table_order():
    table = [_row("Real Madrid CF"), _row("Club Atlético de Madrid")]

    assert find_favorite_team(table, "Madrid")["team"] == "Real Madrid CF"


def test_no_favorite_or_no_match():
    table = [_row("Arsenal FC")]

    assert find_favorite_team(table, None) is None
    assert find_favorite_team(table, "   ") is None
    assert find_favorite_team(table, "Celtic") is None


def test_resolve_favorite_row_prefers_team_id():
    table = [_row("Team 1", team_id=1), _row("Team 12", team_id=12)]

    assert resolve_favorite_row(table, "Team 1", favorite_team_id=12)["team"] == "Team 12"
    assert resolve_favorite_row(table, "team 1")["team"] == "Team 1"
    assert resolve_favorite_row(table, "Chelsea", favorite_team_id=61) is None


def test_upcoming_matches_describe_home_and_away():
    matches = [
        {
            "id": 1,
            "utcDate": "2025-03-04T20:00:00Z",
            "venue": "Emirates Stadium",
            "homeTeam": {"id": 57, "name": "Arsenal FC"},
            "awayTeam": {"id": 674, "name": "PSV"},
        },
        {
            "id": 2,
            "utcDate": "2025-04-08T19:00:00Z",
            "homeTeam": {"id": 86, "name": "Real Madrid CF"},
            "awayTeam": {"id": 57, "name": "Arsenal FC"},
        },
        {
            "id": 3,
            "utcDate": "2025-04-16T19:00:00Z",
            "homeTeam": {"id": 57, "name": "Arsenal FC"},
            "awayTeam": None,
        },
    ]

    upcoming = map_upcoming_matches(matches, 57, 3)

    assert [m["display_opponent"] for m in upcoming] == ["vs PSV", "@ Real Madrid CF", "vs TBD"]
    assert upcoming[0]["location"] == "Home · Emirates Stadium"
    assert upcoming[1]["location"] == "Away"
    assert upcoming[0]["utc_date"] == "2025-03-04T20:00:00Z"


def test_upcoming_matches_respect_limit_and_missing_team():
    matches = [{"id": i, "homeTeam": {"id": 57}, "awayTeam": {"name": "X"}} for i in range(5)]

    assert len(map_upcoming_matches(matches, 57, 2)) == 2
    assert map_upcoming_matches(matches, None, 2) == []
    assert map_upcoming_matches(None, 57, 2) == []
