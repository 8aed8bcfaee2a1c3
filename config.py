# config.py

#!/usr/bin/env python3
import logging
import os
from pathlib import Path
from typing import Optional

import pytz
from dotenv import load_dotenv

# ─── Environment helpers ───────────────────────────────────────────────────────

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))


def _initialise_env() -> None:
    """Load environment variables from `.env` if present."""

    candidate_paths = []

    project_root = Path(SCRIPT_DIR)
    candidate_paths.append(project_root / ".env")

    cwd_path = Path.cwd() / ".env"
    if cwd_path != candidate_paths[0]:
        candidate_paths.append(cwd_path)

    for path in candidate_paths:
        if not path.is_file():
            continue
        try:
            load_dotenv(path, override=False)
        except OSError as exc:
            logging.warning("Could not load %s: %s", path, exc)


_ENV_LOADED = False


def _should_load_env() -> bool:
    """Return ``True`` when dotenv files should be loaded."""

    if os.environ.get("STANDINGS_WIDGETS_SKIP_DOTENV"):
        return False

    # Skip filesystem scans when running under pytest to keep test startup fast.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return False

    return True


def load_environment() -> None:
    """Load environment variables from `.env` files once, if allowed."""

    global _ENV_LOADED

    if _ENV_LOADED or not _should_load_env():
        return

    _initialise_env()
    _ENV_LOADED = True


load_environment()


def _get_first_env_var(*names: str):
    """Return the first populated environment variable from *names.*"""

    for name in names:
        value = os.environ.get(name)
        if value:
            return value

    return None


def _int_from_env(name: str, default: int) -> int:
    raw_value = os.environ.get(name)
    if raw_value is None:
        return default
    try:
        value = int(raw_value)
    except (TypeError, ValueError):
        logging.warning("Invalid %s value %r; using default %d", name, raw_value, default)
        return default
    if value <= 0:
        logging.warning("%s must be greater than zero; using default %d", name, default)
        return default
    return value


def _timezone_from_env(name: str, default: str):
    raw_value = (os.environ.get(name) or "").strip() or default
    try:
        return pytz.timezone(raw_value)
    except pytz.UnknownTimeZoneError:
        logging.warning("Unknown %s value %r; using %s", name, raw_value, default)
        return pytz.timezone(default)


# ─── HTTP ─────────────────────────────────────────────────────────────────────

USER_AGENT = os.environ.get(
    "STANDINGS_WIDGETS_USER_AGENT",
    "standings-widgets/1.0 (+https://github.com/openfootball)",
)
HTTP_TIMEOUT = _int_from_env("HTTP_TIMEOUT", 10)


def get_proxy_url() -> Optional[str]:
    """Return the proxy configured through the usual environment variables."""

    return _get_first_env_var("HTTPS_PROXY", "https_proxy", "HTTP_PROXY", "http_proxy")


# ─── API endpoints ────────────────────────────────────────────────────────────

FOOTBALL_DATA_API_URL = os.environ.get(
    "FOOTBALL_DATA_API_URL", "https://api.football-data.org/v4"
)
FOOTBALL_DATA_API_TOKEN = _get_first_env_var(
    "FOOTBALL_DATA_API_TOKEN", "FOOTBALL_DATA_TOKEN"
)
FOOTBALL_DATA_COMPETITION = os.environ.get("FOOTBALL_DATA_COMPETITION", "CL")

ESPN_API_URL = os.environ.get(
    "ESPN_API_URL", "https://site.api.espn.com/apis/site/v2/sports"
)

OPENFOOTBALL_RAW_URL = os.environ.get(
    "OPENFOOTBALL_RAW_URL",
    "https://raw.githubusercontent.com/openfootball/champions-league/master",
)
OPENFOOTBALL_INDEX_URL = os.environ.get(
    "OPENFOOTBALL_INDEX_URL",
    "https://api.github.com/repos/openfootball/champions-league/contents",
)
OPENFOOTBALL_FILE = os.environ.get("OPENFOOTBALL_FILE", "cl.txt")

# ─── Widget defaults ──────────────────────────────────────────────────────────

DEFAULT_UPDATE_INTERVAL = _int_from_env("UPDATE_INTERVAL_SECONDS", 30 * 60)
MIN_UPDATE_INTERVAL = 60
DEFAULT_MATCH_LIMIT = 3
DEFAULT_MAX_ROWS = 10
DEFAULT_SEASON = "latest"

DISPLAY_TIMEZONE = _timezone_from_env("DISPLAY_TIMEZONE", "America/Chicago")

# ─── Server ───────────────────────────────────────────────────────────────────

WIDGETS_CONFIG_PATH = os.environ.get(
    "WIDGETS_CONFIG_PATH", os.path.join(SCRIPT_DIR, "widgets_config.json")
)
TEMPLATES_DIR = os.path.join(SCRIPT_DIR, "templates")
SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")
SERVER_PORT = _int_from_env("SERVER_PORT", 5001)
