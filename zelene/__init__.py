import os

from flask import Flask

# Load .env only for local/dev. In prod, env vars come from the platform.
if os.getenv("APP_ENV", "development") != "production":
    from dotenv import load_dotenv
    load_dotenv(".env", override=False)

from .config import get_config
from .errors import register_error_handlers
from .extensions import attachments, csrf, db, limiter, login_manager, mail, migrate
from .observability import init_logging, init_sentry
from .security import init_security


def create_app(config_overrides=None):
    app = Flask(__name__, template_folder="templates")

    # Rate limit storage: Redis in staging/prod, memory elsewhere
    app_env = (os.getenv("APP_ENV", "development") or "development").lower()
    use_redis = app_env in ("staging", "production")
    storage_uri = os.environ.get("REDIS_URL") if use_redis else "memory://"
    if use_redis and not storage_uri:
        raise RuntimeError("REDIS_URL is required in staging/production for rate limiting")
    app.config["RATELIMIT_STORAGE_URI"] = storage_uri
    app.config.setdefault("RATELIMIT_HEADERS_ENABLED", True)

    app.config.from_object(get_config())
    app.config["APP_ENV"] = app_env
    if config_overrides:
        app.config.update(config_overrides)

    def _require(name: str):
        val = os.getenv(name) or app.config.get(name)
        if not val:
            raise RuntimeError(f"Missing required environment variable: {name}")
        return val

    if app_env in ("staging", "production"):
        # Enforce hard requirements at startup (not at import time)
        _require("SECRET_KEY")
        _require("DATABASE_URL")
        _require("MAIL_USERNAME")
        _require("MAIL_PASSWORD")

    init_logging(app)
    init_sentry(app)
    if app_env in ("staging", "production"):
        init_security(app)

    # Extensions; mail transport and attachment store live for the app's lifetime
    db.init_app(app)
    migrate.init_app(app, db, directory="migrations")
    csrf.init_app(app)
    login_manager.init_app(app)
    limiter.init_app(app)
    mail.init_app(app)
    attachments.init_app(app)

    from . import models  # noqa: F401  (register tables, user_loader)

    from .blueprints.queries import bp as queries_bp, lookup_bp
    from .blueprints.admin_queries import view_bp, mutations_bp
    from .blueprints.posts import post_bp, tag_bp
    from .blueprints.users import auth_bp, profile_bp, admin_bp
    from .blueprints.stats import admin_stats_bp, weekly_stats_bp
    from .blueprints.api import bp as api_bp
    from .blueprints.forms import bp as forms_bp

    # Public
    app.register_blueprint(queries_bp)
    app.register_blueprint(lookup_bp)
    app.register_blueprint(post_bp)
    app.register_blueprint(tag_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(forms_bp)

    # Admin
    app.register_blueprint(view_bp)
    app.register_blueprint(mutations_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(admin_stats_bp)
    app.register_blueprint(weekly_stats_bp)

    # REST + health
    app.register_blueprint(api_bp)

    register_error_handlers(app)

    from .cli import register_cli
    register_cli(app)

    app.logger.info("app_started", extra={"event": "app_started", "env": app_env})
    return app
