#!/usr/bin/env python3
"""
Entry point for the standings widgets service.

Loads widgets_config.json, starts each widget's refresh timer and serves the
rendered fragments over HTTP until SIGTERM or CTRL-C.
"""
import argparse
import logging
import signal
import sys
import threading
from typing import List, Optional

from config import WIDGETS_CONFIG_PATH, load_environment
from widgets import build_widget_configs, load_widgets_config
from widget import Widget
import server

# ─── Logging ─────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(message)s",
    datefmt="%H:%M:%S",
    force=True,
)
logging.getLogger("requests").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)

_widgets: List[Widget] = []
_shutdown_lock = threading.Lock()
_shutdown_done = False


def build_widgets(path: str) -> List[Widget]:
    configs = build_widget_configs(load_widgets_config(path))
    return [Widget(config) for config in configs]


def start_widgets(widgets: List[Widget]) -> None:
    for widget in widgets:
        widget.start()


def request_shutdown(reason: str) -> None:
    """Stop every widget timer exactly once."""

    global _shutdown_done
    with _shutdown_lock:
        if _shutdown_done:
            return
        _shutdown_done = True
    logging.info("✋ Shutdown requested (%s).", reason)
    for widget in _widgets:
        widget.stop()


# ─── SIGTERM handler ─────────────────────────────────────────────────────────
def _handle_sigterm(signum, frame):
    logging.info("✋ SIGTERM caught, requesting shutdown…")
    request_shutdown("SIGTERM")
    sys.exit(0)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Serve sports standings widgets.")
    parser.add_argument("--config", default=WIDGETS_CONFIG_PATH, help="Path to widgets_config.json")
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--debug", action="store_true", help="Use the Flask development server")
    args = parser.parse_args(argv)

    load_environment()
    logging.info("🖥️  Starting standings widgets…")

    try:
        widgets = build_widgets(args.config)
    except (OSError, ValueError) as exc:
        logging.error("Unable to load widget configuration from %s: %s", args.config, exc)
        return 1

    if not widgets:
        logging.warning("No widgets enabled in %s", args.config)

    _widgets[:] = widgets
    server.register_widgets(widgets)
    signal.signal(signal.SIGTERM, _handle_sigterm)
    start_widgets(widgets)

    try:
        server.serve(args.host, args.port, debug=args.debug)
    except KeyboardInterrupt:
        logging.info("✋ CTRL-C caught, requesting shutdown…")
    finally:
        request_shutdown("exit")
    return 0


if __name__ == "__main__":
    sys.exit(main())
