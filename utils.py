import datetime
import functools
import logging
from typing import Optional

from config import DISPLAY_TIMEZONE


# ─── Logging decorator ──────────────────────────────────────────────────────
def log_call(func):
    """
    Decorator that logs entry & exit at DEBUG level only.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logging.debug(f"→ {func.__name__}()")
        result = func(*args, **kwargs)
        logging.debug(f"← {func.__name__}()")
        return result
    return wrapper


# ─── Date & Time Helpers ─────────────────────────────────────────────────────
def parse_iso_datetime(value) -> Optional[datetime.datetime]:
    """Parse API timestamps like ``2025-03-04T20:00:00Z`` (naive values are UTC)."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    return parsed


def format_time_no_leading(dt_time: datetime.time) -> str:
    return dt_time.strftime("%I:%M %p").lstrip("0")


def format_match_date(value, tz=DISPLAY_TIMEZONE) -> str:
    """``Mar 4, 2:00 PM`` in the display timezone; ``TBD`` when missing."""
    if not value:
        return "TBD"
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return str(value)
    local = parsed.astimezone(tz)
    return f"{local.strftime('%b')} {local.day}, {format_time_no_leading(local.time())}"


def format_game_datetime(value, tz=DISPLAY_TIMEZONE) -> str:
    """``Tue, Mar 4, 2:00 PM`` in the display timezone; empty when missing."""
    if not value:
        return ""
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return str(value)
    local = parsed.astimezone(tz)
    return f"{local.strftime('%a, %b')} {local.day}, {format_time_no_leading(local.time())}"
