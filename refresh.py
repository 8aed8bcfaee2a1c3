"""Owned, cancellable refresh timer for the widgets."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

_LOGGER = logging.getLogger(__name__)


class RefreshTimer:
    """Single pending callback; scheduling again replaces the pending one.

    ``stop()`` cancels the pending tick and refuses any later scheduling, so a
    refresh that is still running when the widget is torn down cannot re-arm
    the timer.
    """

    def __init__(self, callback: Callable[[], object], *, name: str = "refresh-timer"):
        self._callback = callback
        self._name = name
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._stopped = False

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    @property
    def stopped(self) -> bool:
        return self._stopped

    def schedule(self, delay: float) -> bool:
        with self._lock:
            if self._stopped:
                return False
            self._cancel_locked()
            timer = threading.Timer(max(float(delay), 0.0), self._fire)
            timer.name = self._name
            timer.daemon = True
            self._timer = timer
            timer.start()
            return True

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def stop(self) -> None:
        with self._lock:
            self._stopped = True
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self) -> None:
        with self._lock:
            # A replaced or cancelled timer can still wake up; only the
            # current one may run the callback.
            if self._stopped or self._timer is not threading.current_thread():
                return
            self._timer = None

        try:
            self._callback()
        except Exception:
            _LOGGER.exception("Refresh callback %s failed", self._name)
