"""Shared HTTP session and JSON/text helpers for the widget fetchers."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from config import HTTP_TIMEOUT, USER_AGENT, get_proxy_url

_LOGGER = logging.getLogger(__name__)

_SESSION: Optional[requests.Session] = None


class FetchError(Exception):
    """Raised when a remote source cannot be loaded."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


def _make_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})

    retry = Retry(
        total=3,
        backoff_factor=0.3,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=frozenset(["GET"]),
        raise_on_status=False,
    )
    session.mount("https://", HTTPAdapter(max_retries=retry))
    session.mount("http://", HTTPAdapter(max_retries=retry))

    proxy_url = get_proxy_url()
    if proxy_url:
        # requests honours the proxy variables itself; pin them so a later
        # change to the environment does not split one refresh across proxies.
        session.proxies.update({"http": proxy_url, "https": proxy_url})
        _LOGGER.info("Using HTTP proxy %s", proxy_url)

    return session


def get_session() -> requests.Session:
    """Return the process-wide session, creating it on first use."""

    global _SESSION
    if _SESSION is None:
        _SESSION = _make_session()
    return _SESSION


def _check_response(resp) -> None:
    if 200 <= resp.status_code < 300:
        return
    text = (resp.text or "").strip()
    detail = f": {text[:200]}" if text else ""
    raise FetchError(
        f"Request failed with status {resp.status_code}{detail}",
        status=resp.status_code,
    )


def get_json(
    session,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: int = HTTP_TIMEOUT,
) -> Any:
    """GET *url* and decode the JSON body, raising :class:`FetchError` on non-2xx."""

    resp = session.get(url, headers=headers, params=params, timeout=timeout)
    _check_response(resp)
    return resp.json()


def get_text(
    session,
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: int = HTTP_TIMEOUT,
) -> str:
    """GET *url* and return the body as text, raising :class:`FetchError` on non-2xx."""

    resp = session.get(url, headers=headers, timeout=timeout)
    _check_response(resp)
    return resp.text
