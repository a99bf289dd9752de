from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify

from .api import register_routes
from .db.session import init_db
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)


def create_app(database_url: Optional[str] = None, log_level: Optional[str] = None) -> Flask:
    setup_logging(log_level)
    app = Flask(__name__)
    init_db(database_url)
    register_routes(app)

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    logger.info("archsim API ready")
    return app


if __name__ == "__main__":
    create_app().run(debug=True)
