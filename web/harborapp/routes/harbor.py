"""
Harbor control routes: status, pause/resume/reharbor, and offline-log export.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from harborapp.plugin import EXPORT_ERRORS, DataHarborPlugin
from harborapp.utils import utcnow_iso

bp = Blueprint("harbor", __name__, url_prefix="/harbor")


def _plugin() -> DataHarborPlugin:
    return current_app.extensions["harbor_plugin"]


def _clear_cache_flag() -> bool:
    data = request.get_json(silent=True) or {}
    return bool(data.get("clear_cache", True))


@bp.route("/status")
def harbor_status():
    """Return harbor counters and plugin flags."""
    plugin = _plugin()
    return jsonify(
        {
            "timestamp": utcnow_iso(),
            "paused": plugin.is_paused,
            "initialized": plugin.initialized,
            "stock": list(plugin.harbor.stock),
            **plugin.harbor.stats(),
        }
    )


@bp.route("/pause", methods=["POST"])
def pause_harbor():
    _plugin().pause()
    return jsonify({"success": True, "paused": True})


@bp.route("/resume", methods=["POST"])
def resume_harbor():
    _plugin().resume()
    return jsonify({"success": True, "paused": False})


@bp.route("/reharbor", methods=["POST"])
def reharbor():
    """Drop harbored data and restart recording (and the period timer)."""
    _plugin().reharbor()
    current_app.logger.info("Harbor reset by request")
    return jsonify({"success": True})


@bp.route("/download", methods=["POST"])
def download_snapshot():
    """
    Write the snapshot to EXPORT_FOLDER.

    Body (JSON, optional):
      { "clear_cache": true }
    """
    plugin = _plugin()
    try:
        path = plugin.export("download", clear_cache=_clear_cache_flag())
    except EXPORT_ERRORS as e:
        current_app.logger.error("Download failed: %s", e)
        return jsonify({"success": False, "error": "Download failed"}), 500
    return jsonify({"success": True, "file": path.name if path is not None else None})


@bp.route("/upload", methods=["POST"])
def upload_snapshot():
    """
    Upload the snapshot to the remote collector and return the replay URL.

    Body (JSON, optional):
      { "clear_cache": true }
    """
    plugin = _plugin()
    if not plugin.api_base:
        return jsonify({"success": False, "error": "Upload is not configured"}), 400

    url = plugin.on_offline_log("upload", clear_cache=_clear_cache_flag())
    if not url:
        return jsonify({"success": False, "error": "Upload failed"}), 502
    return jsonify({"success": True, "url": url})
