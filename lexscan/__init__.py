"""
LexScan Application Factory
"""
import logging
import os

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from lexscan.utils.config import get_config


def configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    app.logger.setLevel(level)


def register_error_handlers(app: Flask) -> None:
    from lexscan.api import error_response
    from lexscan.services.upload_service import size_error

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(error):
        return error_response(size_error(app.config['MAX_UPLOAD_SIZE']), 400)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"success": False, "error": "Route not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"success": False, "error": "Method not allowed"}), 405

    @app.errorhandler(Exception)
    def internal_error(error):
        if isinstance(error, HTTPException):
            return jsonify({"success": False, "error": error.description}), error.code
        app.logger.exception("Unhandled error")
        return error_response("Internal server error", 500)


def create_app(config_name=None):
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    app = Flask(__name__)
    app.config.from_object(get_config(env))

    configure_logging(app)
    CORS(app, origins=app.config['CORS_ORIGINS'], send_wildcard=True)

    from lexscan.api import api_bp
    app.register_blueprint(api_bp)

    register_error_handlers(app)

    app.logger.info(
        "LexScan ready (env=%s, model=%s, openai configured=%s)",
        env,
        app.config['OPENAI_MODEL'],
        bool(app.config['OPENAI_API_KEY']),
    )
    return app
