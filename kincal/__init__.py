# -*- coding: utf-8 -*-
from flask import Flask, jsonify

from .config import Config, ensure_instance
from .extensions import db, migrate
from .logs import configure_logging

# блюпринты
from .modules.calendar_feed import bp as calendar_feed_bp
from .modules.events import bp as events_bp


def create_app(config_object=Config):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)
    ensure_instance(app)
    configure_logging(app)

    # модели должны быть импортированы до create_all / flask db migrate
    from . import models  # noqa: F401

    db.init_app(app)
    migrate.init_app(app, db)

    # --- блюпринты ---
    app.register_blueprint(calendar_feed_bp)
    app.register_blueprint(events_bp)

    # --- healthcheck ---
    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    return app
