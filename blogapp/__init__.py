from __future__ import annotations

import os
import traceback
from typing import Any, Dict

import click
import structlog
from flask import Flask, jsonify, g, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from blogapp.config import Config
from blogapp.errors import APIError, AuthenticationError, DuplicateKeyError
from blogapp.extensions import (
    db,
    migrate,
    login_manager,
    limiter,
)
from blogapp.logging_config import configure_logging
from blogapp.security import apply_security_headers
from blogapp.models.user import User  # ensure models imported for migrations

logger = structlog.get_logger(__name__)


def create_app(config_overrides: Dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=False)

    # Load config
    app.config.from_object(Config())
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    os.makedirs(app.config["UPLOAD_FOLDER"], exist_ok=True)

    # Stateless bearer auth: identity comes from the Authorization header only
    login_manager.session_protection = None

    @login_manager.request_loader
    def load_user_from_request(req) -> User | None:
        if not req.headers.get("Authorization"):
            return None
        from blogapp.services.auth import resolve_bearer_identity
        try:
            return resolve_bearer_identity(req.headers.get("Authorization"))
        except AuthenticationError as e:
            # Kept for the unauthorized handler; public routes treat the caller as anonymous
            g.auth_error = e
            return None

    @login_manager.unauthorized_handler
    def unauthorized_request():
        raise getattr(g, "auth_error", None) or AuthenticationError(
            "missing_token", "Authentication token missing"
        )

    # Request context enrichment for logging
    @app.before_request
    def add_request_context() -> None:
        g.request_id = request.headers.get("X-Request-ID") or os.urandom(8).hex()

    # Security headers
    @app.after_request
    def set_headers(resp):
        return apply_security_headers(resp)

    # Blueprints
    from blogapp.blueprints.api.auth import bp as auth_bp
    from blogapp.blueprints.api.posts import bp as posts_bp
    from blogapp.blueprints.api.categories import bp as categories_bp
    from blogapp.blueprints.media import bp as media_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(posts_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(media_bp)

    # Health route
    @app.get("/api/health")
    def health():
        try:
            db.session.execute(db.text("SELECT 1"))
            db_ok = "connected"
        except Exception:
            db_ok = "error"
        return jsonify({"status": "ok", "db": db_ok}), 200

    # Error handlers: every failure leaves as JSON
    @app.errorhandler(APIError)
    def api_error(e: APIError):
        if e.status_code >= 500:
            logger.error("request_failed", path=request.path, error=e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(IntegrityError)
    def integrity_error(e: IntegrityError):
        db.session.rollback()
        dup = DuplicateKeyError()
        return jsonify(dup.to_dict()), dup.status_code

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": "bad_request", "message": str(e)}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "not_found", "message": "resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "method_not_allowed", "message": "method not allowed"}), 405

    @app.errorhandler(413)
    def too_large(e):
        return jsonify({"error": "payload_too_large", "message": "upload exceeds size limit"}), 413

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({"error": "rate_limited", "message": "too many requests"}), 429

    @app.errorhandler(Exception)
    def server_error(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"error": "http_error", "message": e.description}), e.code or 500
        logger.exception("unhandled_error", path=request.path)
        body = {"error": "server_error", "message": "Server Error"}
        if app.config.get("ENV") == "development":
            body["message"] = str(e) or body["message"]
            body["stack"] = traceback.format_exception(type(e), e, e.__traceback__)
        return jsonify(body), 500

    # CLI: create a user account
    @app.cli.command("create-user")
    @click.option("--username", prompt=True)
    @click.option("--email", prompt=True)
    @click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
    def create_user(username: str, email: str, password: str) -> None:
        from blogapp.services.auth import register
        try:
            user = register({"username": username, "email": email, "password": password})
        except APIError as e:
            click.echo(f"Could not create user: {e.message}")
            for err in getattr(e, "errors", []):
                click.echo(f"  {err['field']}: {err['message']}")
            return
        click.echo(f"User {user.username} created")

    # CLI: seed default categories
    @app.cli.command("seed-categories")
    def seed_categories() -> None:
        from blogapp.services.categories import seed_default_categories
        created = seed_default_categories()
        click.echo(f"Seeded {len(created)} categories")

    return app
