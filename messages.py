"""Messages exchanged between a widget and its data provider."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from config import (
    DEFAULT_MATCH_LIMIT,
    DEFAULT_SEASON,
    FOOTBALL_DATA_COMPETITION,
    OPENFOOTBALL_FILE,
)

DATA = "data"
ERROR = "error"


@dataclass(frozen=True)
class FetchRequest:
    """Everything a provider needs for one refresh."""

    widget_id: str
    provider: str
    season: str = DEFAULT_SEASON
    favorite_team: Optional[str] = None
    api_token: str = ""
    upcoming_limit: int = DEFAULT_MATCH_LIMIT
    competition: str = FOOTBALL_DATA_COMPETITION
    team_id: Optional[str] = None
    sport: str = "basketball"
    league: str = "wnba"
    source_file: str = OPENFOOTBALL_FILE


@dataclass(frozen=True)
class WidgetMessage:
    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def data(cls, payload: Dict[str, Any]) -> "WidgetMessage":
        return cls(DATA, payload)

    @classmethod
    def error(cls, message: str) -> "WidgetMessage":
        return cls(ERROR, {"message": message})

    @property
    def ok(self) -> bool:
        return self.kind == DATA
