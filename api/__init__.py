import logging

import click
from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import DBStorage
from services import EXTENSION_KEY, Services
from utils.clock import Clock
from utils.mailer import Mailer

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Blog API",
        "version": "1.0.0",
        "description": "Accounts and sessions of the blog: registration, login, token refresh, recovery and email verification.",
    },
    "basePath": "/",  # blueprints live under /api/v1
    "schemes": ["http"],
    "securityDefinitions": {
        "AccessToken": {
            "type": "apiKey",
            "name": "X-Access-Token",
            "in": "header",
            "description": "The access token returned by /login or /registration, without any prefix.",
        }
    },
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}

API_PREFIX = "/api/v1"


def create_app(config_name: str | None = None, storage=None, mailer=None, clock=None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    storage, mailer and clock can be handed in (tests do); otherwise
    they are built from the configuration.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    if storage is None:
        storage = DBStorage(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()
    app.extensions[EXTENSION_KEY] = Services.build(
        app.config,
        storage,
        mailer if mailer is not None else Mailer.from_config(app.config),
        clock if clock is not None else Clock(),
    )

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .recovery import bp as recovery_bp
    from .emails import bp as emails_bp
    from .account import bp as account_bp

    for blueprint in (health_bp, auth_bp, recovery_bp, emails_bp, account_bp):
        app.register_blueprint(blueprint, url_prefix=API_PREFIX)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": f"Welcome to {app.config['APP_NAME']}",
            "docs": "/apidocs/",
            "health": f"{API_PREFIX}/health",
        }, 200

    @app.cli.command("seed-user")
    def seed_user():
        """Create the default user from USER_EMAIL / USER_PASSWORD."""
        email = (app.config.get("USER_EMAIL") or "").strip().lower()
        password = app.config.get("USER_PASSWORD")
        if not email or not password:
            raise click.ClickException("USER_EMAIL and USER_PASSWORD must be set")
        services = app.extensions[EXTENSION_KEY]
        result = services.auth.register(
            email, password, app.config.get("USER_FIRSTNAME", ""), app.config.get("USER_LASTNAME", "")
        )
        if result.ok:
            click.echo(f"created {email}")
        else:
            click.echo(f"{email}: {result.error.value}")

    return app
