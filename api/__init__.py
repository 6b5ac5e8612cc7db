from datetime import timedelta
import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from .rate_limit import setup_rate_limiting
from models import storage  # DBStorage singleton (scoped_session)
from services.auth_service import AuthService
from services.todo_service import ToDoItemService
from utils.security import TokenIssuer

API_VERSION = "1.0.0"

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "To-Do List API",
        "version": API_VERSION,
        "description": "REST API for managing per-user to-do items with JWT authentication.",
    },
    "basePath": "/",
    "schemes": ["http"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Services are built here and stored in app.extensions so views and tests
    share one wiring point.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    configure_logging(app.config["LOG_LEVEL"])

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    storage.reload(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))

    token_issuer = TokenIssuer.from_config(app.config)
    app.extensions["token_issuer"] = token_issuer
    app.extensions["auth_service"] = AuthService(
        storage,
        token_issuer,
        refresh_token_lifetime=timedelta(days=app.config["REFRESH_TOKEN_EXPIRES_DAYS"]),
    )
    app.extensions["todo_item_service"] = ToDoItemService(storage)

    setup_rate_limiting(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .todo_items import bp as todo_items_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(todo_items_bp, url_prefix="/api")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to To-Do List API",
            "docs": "/apidocs/",
            "health": "/health",
        }, 200

    return app
