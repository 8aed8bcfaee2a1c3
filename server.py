#!/usr/bin/env python3
"""Small HTTP service that serves the rendered widget fragments."""
from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, Optional

from flask import Flask, Response, abort, jsonify, render_template

from config import SERVER_HOST, SERVER_PORT, TEMPLATES_DIR
from widget import Widget

_logger = logging.getLogger(__name__)

app = Flask(__name__, template_folder=TEMPLATES_DIR)

_registry_lock = threading.Lock()
_widgets: Dict[str, Widget] = {}


def register_widgets(widgets: Iterable[Widget]) -> None:
    with _registry_lock:
        _widgets.clear()
        for widget in widgets:
            _widgets[widget.config.id] = widget


def registered_widgets() -> Dict[str, Widget]:
    with _registry_lock:
        return dict(_widgets)


def _get_widget(widget_id: str) -> Widget:
    widget = registered_widgets().get(widget_id)
    if widget is None:
        abort(404)
    return widget


@app.route("/")
def index() -> str:
    widgets = list(registered_widgets().values())
    return render_template("index.html", widgets=widgets)


@app.route("/widgets/<widget_id>")
def widget_fragment(widget_id: str):
    widget = _get_widget(widget_id)
    return Response(widget.render(), mimetype="text/html")


@app.route("/api/widgets")
def api_widgets():
    return jsonify(
        status="ok",
        widgets=[widget.snapshot() for widget in registered_widgets().values()],
    )


@app.route("/api/widgets/<widget_id>")
def api_widget(widget_id: str):
    widget = _get_widget(widget_id)
    return jsonify(status="ok", widget=widget.snapshot())


@app.route("/api/widgets/<widget_id>/refresh", methods=["POST"])
def api_refresh(widget_id: str):
    widget = _get_widget(widget_id)
    message = widget.refresh()
    if not message.ok:
        return jsonify(status="error", message=message.payload.get("message")), 502
    return jsonify(status="ok", widget=widget.snapshot())


def serve(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False) -> None:
    host = host or SERVER_HOST
    port = port or SERVER_PORT
    _logger.info("Serving widgets on http://%s:%d/", host, port)
    if debug:
        app.run(host=host, port=port, debug=True, use_reloader=False)
    else:
        from waitress import serve as waitress_serve

        waitress_serve(app, host=host, port=port)
