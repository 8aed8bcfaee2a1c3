"""Data-source strategies for the widgets.

Each widget names a provider; the provider decides which fetcher runs and
which template renders the result. :func:`handle_fetch_request` is the only
entry point the widgets use and it never raises: every failure comes back as
an ``error`` message.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict

import requests

import data_fetch
from messages import FetchRequest, WidgetMessage
from providers_catalog import PROVIDER_LABELS
from services.http_client import FetchError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Provider:
    id: str
    label: str
    fetcher: str
    template: str
    requires_token: bool = False

    def fetch(self, request: FetchRequest) -> dict:
        # Resolved at call time so fetchers can be swapped out in tests.
        return getattr(data_fetch, self.fetcher)(request)


PROVIDERS: Dict[str, Provider] = {
    "football_data": Provider(
        "football_data",
        PROVIDER_LABELS["football_data"],
        "fetch_football_data",
        "standings.html",
        requires_token=True,
    ),
    "espn_schedule": Provider(
        "espn_schedule",
        PROVIDER_LABELS["espn_schedule"],
        "fetch_espn_schedule",
        "game.html",
    ),
    "openfootball": Provider(
        "openfootball",
        PROVIDER_LABELS["openfootball"],
        "fetch_openfootball",
        "standings.html",
    ),
}


def get_provider(provider_id: str) -> Provider:
    try:
        return PROVIDERS[provider_id]
    except KeyError:
        raise ValueError(f"Unknown provider '{provider_id}'") from None


def describe_error(exc: Exception, provider: Provider) -> str:
    """Human-readable text for the inline error shown by the widget."""

    status = getattr(exc, "status", None)
    if status == 403:
        if provider.requires_token:
            return f"{provider.label} rejected the request (403). Check your api_token."
        return f"{provider.label} refused access (403)."
    if status == 429:
        return f"{provider.label} rate limit exceeded. Try again later."
    return str(exc) or "Unable to load data"


def handle_fetch_request(request: FetchRequest) -> WidgetMessage:
    try:
        provider = get_provider(request.provider)
    except ValueError as exc:
        _LOGGER.error("%s: %s", request.widget_id, exc)
        return WidgetMessage.error(str(exc))

    try:
        payload = provider.fetch(request)
    except (FetchError, requests.RequestException, ValueError) as exc:
        message = describe_error(exc, provider)
        _LOGGER.error("%s: %s", request.widget_id, message)
        return WidgetMessage.error(message)
    except Exception as exc:
        _LOGGER.exception("%s: unexpected error from %s", request.widget_id, provider.label)
        return WidgetMessage.error(str(exc) or exc.__class__.__name__)

    return WidgetMessage.data(payload)
