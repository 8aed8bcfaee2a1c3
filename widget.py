"""Display component: owns one widget's refresh timer, state and rendering."""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional

from messages import FetchRequest, WidgetMessage
from providers import handle_fetch_request
from refresh import RefreshTimer
from render import render_widget
from widgets import WidgetConfig

_LOGGER = logging.getLogger(__name__)


class Widget:
    def __init__(
        self,
        config: WidgetConfig,
        *,
        fetcher: Callable[[FetchRequest], WidgetMessage] = handle_fetch_request,
    ):
        self.config = config
        self._fetcher = fetcher
        self._state_lock = threading.Lock()
        self._refresh_lock = threading.Lock()
        self.timer = RefreshTimer(self.refresh, name=f"refresh-{config.id}")

        self.loaded = False
        self.error: Optional[str] = None
        self.payload: Dict[str, Any] = {}
        self.favorite_name: Optional[str] = config.favorite_team
        self.favorite_team_id: Any = None
        self.favorite_logo: Optional[str] = config.favorite_logo_url

    # ─── Lifecycle ────────────────────────────────────────────────────────────
    def start(self) -> None:
        _LOGGER.info("Starting widget %s (%s)", self.config.id, self.config.provider)
        self.timer.schedule(0)

    def stop(self) -> None:
        self.timer.stop()

    # ─── Refresh ──────────────────────────────────────────────────────────────
    def build_request(self) -> FetchRequest:
        return self.config.fetch_request()

    def refresh(self) -> WidgetMessage:
        """Run one fetch sequence and schedule the next tick."""

        with self._refresh_lock:
            try:
                message = self._fetcher(self.build_request())
                self.receive(message)
            finally:
                self.timer.schedule(self.config.update_interval)
        return message

    def receive(self, message: WidgetMessage) -> None:
        with self._state_lock:
            if message.ok:
                self._apply_data(message.payload)
            else:
                self.error = message.payload.get("message") or "Unable to load data"
                self.loaded = True
                _LOGGER.warning("Widget %s error: %s", self.config.id, self.error)

    def _apply_data(self, payload: Dict[str, Any]) -> None:
        self.payload = dict(payload or {})
        self.error = None
        self.loaded = True

        favorite = self.payload.get("favorite_team") or {}
        self.favorite_team_id = favorite.get("team_id")
        self.favorite_name = favorite.get("name") or self.config.favorite_team
        self.favorite_logo = self.config.favorite_logo_url or favorite.get("crest")

    # ─── Output ───────────────────────────────────────────────────────────────
    def snapshot(self) -> Dict[str, Any]:
        with self._state_lock:
            return {
                **self.payload,
                "id": self.config.id,
                "provider": self.config.provider,
                "loaded": self.loaded,
                "error": self.error,
                "favorite_name": self.favorite_name,
                "favorite_team_id": self.favorite_team_id,
                "favorite_logo": self.favorite_logo,
            }

    def render(self) -> str:
        return render_widget(self.config, self.snapshot())
