"""
Main Flask Application
"""
import logging

from flask import Flask
from flask_cors import CORS

from part_finder import config
from part_finder.logging_config import setup_logging
from part_finder.services.ai_service import AIService
from part_finder.services.search_flow import SessionRegistry
from part_finder.services.search_logger import log_search_result

logger = logging.getLogger(__name__)


def create_app(ai_service=None, search_log_enabled=None, configure_logging=True, session_limit=None):
    """
    Build the part finder app

    Args:
        ai_service: Service used for searches; defaults to an OpenAI-backed AIService
        search_log_enabled: Overrides SEARCH_LOG_ENABLED
        configure_logging: Set up root logging (off in tests)
        session_limit: Overrides SESSION_LIMIT
    """
    if configure_logging:
        setup_logging(config.LOG_LEVEL)

    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY
    CORS(app)

    if search_log_enabled is None:
        search_log_enabled = config.SEARCH_LOG_ENABLED

    app.config["AI_SERVICE"] = ai_service or AIService()
    app.config["SESSIONS"] = SessionRegistry(
        max_sessions=config.SESSION_LIMIT if session_limit is None else session_limit,
        idle_seconds=config.SESSION_IDLE_SECONDS,
    )
    app.config["SEARCH_LOGGER"] = log_search_result if search_log_enabled else None

    if not config.get_api_key():
        logger.warning("OPENAI_API_KEY is not set; searches will be refused until it is")

    # Register blueprints
    from part_finder.api.page_routes import page_bp
    from part_finder.api.search_routes import search_bp
    from part_finder.api.enquiry_routes import enquiry_bp

    app.register_blueprint(page_bp)
    app.register_blueprint(search_bp, url_prefix='/api')
    app.register_blueprint(enquiry_bp, url_prefix='/api')

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
