from flask import Flask
from flasgger import Swagger
from flask_cors import CORS
import logging

from .config import get_config
from .errors import register_error_handlers
from utils.auth_services import AuthServices, EXTENSION_KEY

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Token Auth API",
        "version": "1.0.0",
        "description": "Issues access/refresh token pairs, rotates and revokes refresh tokens, guards protected routes.",
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


def create_app(config_name: str | None = None, clock=None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Each app owns its own identity store and refresh token registry
    (app.extensions["auth"]); pass a clock to control token expiry in tests.
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    logging.basicConfig(level=logging.DEBUG if app.debug else logging.INFO)

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    # raises RuntimeError when a signing secret is missing
    app.extensions[EXTENSION_KEY] = AuthServices.from_config(app.config, clock=clock)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .protected import bp as protected_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(protected_bp, url_prefix="/api/v1")

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Token Auth API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
