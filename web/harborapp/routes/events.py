"""
Event intake route: instrumentation sources POST public-data messages here.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from harborapp.bus import EventBus
from harborapp.plugin import PUBLIC_DATA

bp = Blueprint("events", __name__, url_prefix="/")


@bp.route("/events", methods=["POST"])
def ingest_events():
    """
    Dispatch one message or a list of messages on the public-data channel.

    Body (JSON):
      {"type": "console", "data": {...}}   or   [{...}, {...}]
    """
    body = request.get_json(silent=True)
    if body is None:
        return jsonify({"success": False, "error": "Expected a JSON body"}), 400

    messages = body if isinstance(body, list) else [body]
    bus: EventBus = current_app.extensions["event_bus"]
    for message in messages:
        bus.dispatch_event(PUBLIC_DATA, message)

    return jsonify({"success": True, "received": len(messages)})
