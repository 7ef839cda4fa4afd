"""
Student Project Tracker
Flask application factory.

Usage:
    from app import create_app
    app = create_app()           # APP_ENV, or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event

from app.config import config
from app.middleware.jwt_auth import init_jwt_middleware
from app.middleware.logging_config import configure_logging
from app.middleware.rate_limiter import init_rate_limits
from app.middleware.security_headers import init_security_headers
from app.middleware.timing import init_request_timing
from app.models import db
from app.utils.errors import register_error_handlers

logger = logging.getLogger(__name__)


# ── SQLite FK enforcement (global engine event) ─────────────────────────
@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(key_func=get_remote_address, default_limits=[])


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: One of "development", "testing", "production".
                     Defaults to the APP_ENV env var, or "development".

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    # Instantiated so ProductionConfig can refuse to start half-configured.
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Middleware (order: timing, then principal resolution) ────────────
    init_request_timing(app)
    init_security_headers(app)
    init_jwt_middleware(app)

    # ── Import all models so create_all / Alembic see them ───────────────
    from app.models import audit as _audit_models            # noqa: F401
    from app.models import evaluation as _evaluation_models  # noqa: F401
    from app.models import github as _github_models          # noqa: F401
    from app.models import profile as _profile_models        # noqa: F401
    from app.models import project as _project_models        # noqa: F401
    from app.models import team as _team_models              # noqa: F401
    from app.models import tracking as _tracking_models      # noqa: F401

    # ── Create missing tables (CREATE IF NOT EXISTS semantics) ───────────
    if app.config.get("SQLALCHEMY_DATABASE_URI", "").startswith("sqlite:///"):
        os.makedirs(app.instance_path, exist_ok=True)
    with app.app_context():
        db.create_all()

    # ── Blueprints ───────────────────────────────────────────────────────
    from app.blueprints.audit_bp import audit_bp
    from app.blueprints.auth_bp import auth_bp
    from app.blueprints.evaluation_bp import evaluation_bp
    from app.blueprints.github_bp import github_bp
    from app.blueprints.health_bp import health_bp
    from app.blueprints.milestone_bp import milestone_bp
    from app.blueprints.project_bp import project_bp
    from app.blueprints.task_bp import task_bp
    from app.blueprints.team_bp import team_bp
    from app.blueprints.user_bp import user_bp

    for bp in (health_bp, auth_bp, user_bp, project_bp, task_bp, milestone_bp,
               team_bp, evaluation_bp, github_bp, audit_bp):
        app.register_blueprint(bp)

    # ── Error handlers ───────────────────────────────────────────────────
    register_error_handlers(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app
