"""Application factory."""

import json
import os
import uuid
from datetime import timedelta
from http import HTTPStatus

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from werkzeug.exceptions import HTTPException

from config import Config
from mailer import ConsoleEmailSender, EmailSender, SmtpEmailSender
from models import db
from repositories import InMemoryUserRepository, SqlUserRepository, UserRepository
from routes.auth import auth_bp
from security import CredentialHasher, TokenCodec
from services.auth_service import AuthService
from services.errors import AuthError, DeliveryError, InternalError

jwt = JWTManager()


def create_app(
    config_class: type[Config] = Config,
    *,
    email_sender: EmailSender | None = None,
    repository: UserRepository | None = None,
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    if not app.config.get("JWT_SECRET_KEY"):
        raise ValueError("JWT_SECRET_KEY must be configured.")
    ttl = timedelta(seconds=int(app.config["SESSION_TOKEN_TTL_SECONDS"]))
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = ttl

    # Core subsystems
    jwt.init_app(app)
    if repository is None:
        repository = _build_repository(app)

    tokens = TokenCodec(
        app.config["JWT_SECRET_KEY"],
        session_ttl=ttl,
        algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
        verification_token_bytes=int(app.config["VERIFICATION_TOKEN_BYTES"]),
    )
    app.extensions["auth_service"] = AuthService(
        repository=repository,
        hasher=CredentialHasher(app.config["PASSWORD_HASH_METHOD"]),
        tokens=tokens,
        email_sender=email_sender or _build_email_sender(app),
        verification_url=app.config["VERIFICATION_URL"],
        email_subject=app.config["MAIL_SUBJECT"],
        default_roles=app.config["DEFAULT_ROLES"],
    )

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/auth")

    # Health
    @app.route("/api/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)

    return app


def _build_repository(app: Flask) -> UserRepository:
    store = app.config.get("USER_STORE", "memory")
    if store == "memory":
        return InMemoryUserRepository()
    if store == "sql":
        db.init_app(app)
        with app.app_context():
            db.create_all()
        return SqlUserRepository(db)
    raise ValueError(f"Unknown USER_STORE {store!r}; expected 'memory' or 'sql'.")


def _build_email_sender(app: Flask) -> EmailSender:
    backend = app.config.get("MAIL_BACKEND", "console")
    if backend == "console":
        return ConsoleEmailSender()
    if backend == "smtp":
        return SmtpEmailSender(
            app.config["SMTP_HOST"],
            int(app.config["SMTP_PORT"]),
            app.config["MAIL_SENDER"],
            username=app.config.get("SMTP_USERNAME"),
            password=app.config.get("SMTP_PASSWORD"),
            use_tls=bool(app.config.get("SMTP_USE_TLS")),
            timeout=float(app.config["MAIL_TIMEOUT_SECONDS"]),
        )
    raise ValueError(f"Unknown MAIL_BACKEND {backend!r}; expected 'console' or 'smtp'.")


def _error_response(status: int, error: str, detail: str, **extra):
    request_id = g.get("request_id") or str(uuid.uuid4())
    payload = {"error": error, "detail": detail, "request_id": request_id, **extra}
    response = jsonify(payload)
    response.status_code = status
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(AuthError)
    def _handle_auth_error(error: AuthError):
        if isinstance(error, InternalError):
            app.logger.exception("Internal error while handling request", exc_info=error)
            return _error_response(error.status_code, error.title, InternalError.default_detail)
        if isinstance(error, DeliveryError):
            app.logger.warning("Verification email delivery failed for user %s", error.user_id)
            return _error_response(
                error.status_code,
                error.title,
                error.detail,
                account_created=error.user_id is not None,
            )
        return _error_response(error.status_code, error.title, error.detail)

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = error.get_response()
        payload = {
            "error": getattr(error, "name", "Error"),
            "detail": error.description,
            "request_id": request_id,
        }
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        app.logger.exception("Unhandled application error", exc_info=error)
        return _error_response(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            "An unexpected error occurred.",
        )

    @jwt.unauthorized_loader
    def _missing_session_token(reason: str):
        return _error_response(HTTPStatus.UNAUTHORIZED, "Unauthorized", reason)

    @jwt.invalid_token_loader
    def _invalid_session_token(reason: str):
        return _error_response(HTTPStatus.UNAUTHORIZED, "Invalid Token", reason)

    @jwt.expired_token_loader
    def _expired_session_token(jwt_header, jwt_payload):
        return _error_response(
            HTTPStatus.UNAUTHORIZED, "Invalid Token", "The session token has expired."
        )


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 3001)))
