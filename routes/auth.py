"""Authentication blueprint: register, verify email, login."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt, jwt_required
from markupsafe import escape

from services.auth_service import AuthService
from services.errors import InvalidTokenError
from utils.request_validation import extract_token, parse_json_request

auth_bp = Blueprint("auth", __name__)

VERIFIED_PAGE = (
    "<h1>Your account has been verified!</h1>"
    '<p>You can now <a href="{login_url}">log in</a>.</p>'
)
INVALID_TOKEN_PAGE = "<h1>Invalid or expired verification token.</h1>"


def _auth_service() -> AuthService:
    return current_app.extensions["auth_service"]


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a new Pending account and send its verification email."""
    payload = parse_json_request(request)
    user = _auth_service().register(
        payload.get("name"), payload.get("email"), payload.get("password")
    )
    return (
        jsonify(
            {
                "message": "User registered. Please check your email to activate your account.",
                "user": user.to_dict(),
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/verify", methods=["GET"])
@auth_bp.route("/verify-email", methods=["GET"])
def verify_email_page():
    """Consume a token from an emailed link and render a confirmation page."""
    try:
        _auth_service().verify_email(extract_token(request))
    except InvalidTokenError:
        return INVALID_TOKEN_PAGE, HTTPStatus.BAD_REQUEST, {"Content-Type": "text/html; charset=utf-8"}

    login_url = escape(current_app.config.get("LOGIN_URL", "/"))
    return (
        VERIFIED_PAGE.format(login_url=login_url),
        HTTPStatus.OK,
        {"Content-Type": "text/html; charset=utf-8"},
    )


@auth_bp.route("/verify", methods=["POST"])
@auth_bp.route("/verify-email", methods=["POST"])
def verify_email() -> tuple:
    """Consume a token sent by a client application."""
    _auth_service().verify_email(extract_token(request))
    return jsonify({"message": "Account verified. You can now log in."}), HTTPStatus.OK


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a verified user and return a signed session token."""
    payload = parse_json_request(request)
    token = _auth_service().login(payload.get("email"), payload.get("password"))
    ttl = _auth_service().tokens.session_ttl
    return (
        jsonify(
            {
                "token": token,
                "token_type": "Bearer",
                "expires_in": int(ttl.total_seconds()),
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me() -> tuple:
    """Return the identity asserted by the presented session token."""
    claims = get_jwt()
    return (
        jsonify(
            {
                "id": int(claims["sub"]),
                "email": claims.get("email"),
                "roles": claims.get("roles", []),
            }
        ),
        HTTPStatus.OK,
    )
