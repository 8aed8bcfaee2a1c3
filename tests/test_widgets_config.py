import json
from pathlib import Path

import pytest

import widgets
from widgets import build_widget_configs, load_widgets_config

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def test_shipped_config_is_valid(monkeypatch):
    monkeypatch.setattr(widgets, "FOOTBALL_DATA_API_TOKEN", None)

    configs = build_widget_configs(load_widgets_config(str(PROJECT_ROOT / "widgets_config.json")))

    by_id = {config.id: config for config in configs}
    assert by_id["ucl"].provider == "football_data"
    assert by_id["ucl"].favorite_team == "Arsenal"
    assert by_id["fever"].team_id == "ind"
    assert by_id["fever"].update_interval == 300


def test_defaults_are_applied():
    (config,) = build_widget_configs({"widgets": {"table": {"provider": "openfootball"}}})

    assert config.title == "UEFA Champions League Table"
    assert config.season == "latest"
    assert config.max_rows == 10
    assert config.upcoming_limit == 3
    assert config.update_interval == 1800
    assert config.show_header is True
    assert config.source_file == "cl.txt"


def test_short_update_interval_is_raised_to_minimum():
    (config,) = build_widget_configs(
        {"widgets": {"fever": {"provider": "espn_schedule", "team_id": "ind", "update_interval": 5}}}
    )

    assert config.update_interval == 60


def test_football_data_falls_back_to_environment_token(monkeypatch):
    monkeypatch.setattr(widgets, "FOOTBALL_DATA_API_TOKEN", "env-token")

    (from_env,) = build_widget_configs({"widgets": {"ucl": {"provider": "football_data"}}})
    (explicit,) = build_widget_configs(
        {"widgets": {"ucl": {"provider": "football_data", "api_token": "mine"}}}
    )

    assert from_env.api_token == "env-token"
    assert explicit.api_token == "mine"
    assert explicit.fetch_request().api_token == "mine"


def test_disabled_widgets_are_skipped():
    configs = build_widget_configs(
        {
            "widgets": {
                "on": {"provider": "openfootball"},
                "off": {"provider": "openfootball", "enabled": False},
            }
        }
    )

    assert [config.id for config in configs] == ["on"]


def test_show_flags_accept_strings():
    (config,) = build_widget_configs(
        {"widgets": {"t": {"provider": "openfootball", "show_header": "off", "show_upcoming": "yes"}}}
    )

    assert config.show_header is False
    assert config.show_upcoming is True


@pytest.mark.parametrize(
    "raw, message",
    [
        ({"provider": "fotmob"}, "Unknown provider"),
        ({"provider": "openfootball", "max_rows": "many"}, "must be an integer"),
        ({"provider": "openfootball", "max_rows": 0}, "greater than zero"),
        ({"provider": "openfootball", "upcoming_limit": True}, "must be an integer"),
        ({"provider": "openfootball", "title": ["x"]}, "must be a string"),
        ("openfootball", "must be an object"),
    ],
)
def test_invalid_widget_entries(raw, message):
    with pytest.raises(ValueError, match=message):
        build_widget_configs({"widgets": {"bad": raw}})


@pytest.mark.parametrize(
    "config",
    [
        {},
        {"widgets": []},
        {"widgets": {"off": {"provider": "openfootball", "enabled": False}}},
    ],
)
def test_invalid_top_level(config):
    with pytest.raises(ValueError):
        build_widget_configs(config)


def test_load_widgets_config_requires_object(tmp_path):
    path = tmp_path / "widgets_config.json"
    path.write_text(json.dumps(["not", "an", "object"]))

    with pytest.raises(ValueError):
        load_widgets_config(str(path))
