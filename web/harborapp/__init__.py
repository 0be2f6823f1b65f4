"""
Flask app factory: registers config, logging, the harbor plugin, blueprints,
and error handlers.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Type

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from data_harbor import DATA_TYPES
from harborapp.bus import EventBus
from harborapp.config import Config, DevelopmentConfig, ProductionConfig
from harborapp.plugin import DataHarborPlugin, HostConfig, PluginConfig
from harborapp.utils import ensure_dirs, init_logging
from harborapp.routes import events as events_bp
from harborapp.routes import harbor as harbor_bp


def create_app(config_class: Type[Config] | None = None) -> Flask:
    """Create and configure the collector application."""
    app = Flask(__name__)

    # Config selection
    cfg: Type[Config]
    env = os.getenv("FLASK_ENV", "production").lower()
    if config_class is not None:
        cfg = config_class
    elif env.startswith("dev"):
        cfg = DevelopmentConfig
    else:
        cfg = ProductionConfig
    app.config.from_object(cfg)

    # Ensure folders
    export_dir = Path(app.config["EXPORT_FOLDER"])
    ensure_dirs(export_dir)

    # Sessions
    app.secret_key = app.config["SECRET_KEY"]

    # Logging
    logger = init_logging(app)
    app.logger = logger  # align Flask's logger with ours

    # Event bus + harbor plugin stored in extensions registry
    bus = EventBus(logger=logger)
    plugin = DataHarborPlugin(
        PluginConfig(
            maximum=app.config["HARBOR_MAXIMUM"],
            period=app.config["HARBOR_PERIOD_MS"],
            cared_data={kind: kind in app.config["HARBOR_CARED_DATA"] for kind in DATA_TYPES},
            export_folder=export_dir,
            compress=app.config["EXPORT_COMPRESS"],
        ),
        logger=logger,
    )
    plugin.on_init(
        bus,
        HostConfig(
            api=app.config["HARBOR_API"],
            enable_ssl=app.config["HARBOR_ENABLE_SSL"],
            offline=app.config["HARBOR_OFFLINE"],
            project=app.config["HARBOR_PROJECT"],
            title=app.config["HARBOR_TITLE"],
            client_origin=app.config["HARBOR_CLIENT_ORIGIN"],
        ),
    )
    app.extensions["event_bus"] = bus
    app.extensions["harbor_plugin"] = plugin

    # Error handlers
    @app.errorhandler(RequestEntityTooLarge)
    def handle_body_too_large(_e):
        return jsonify({"success": False, "error": "Request body too large"}), 413

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify({"success": False, "error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(e: Exception):
        app.logger.exception("Unhandled error")
        return jsonify({"success": False, "error": "Internal server error"}), 500

    # Blueprints
    app.register_blueprint(events_bp.bp)
    app.register_blueprint(harbor_bp.bp)

    # Health
    @app.route("/healthz")
    def healthz():
        return jsonify({"status": "ok"}), 200

    return app

