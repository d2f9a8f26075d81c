"""Utilities for reading incoming Flask requests."""

from __future__ import annotations

from flask import Request

from services.errors import ValidationError


def parse_json_request(req: Request, *, allow_empty: bool = False) -> dict:
    """Return the parsed JSON object body or raise ValidationError."""

    if not req.is_json:
        raise ValidationError("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise ValidationError("Request JSON body is required.")

    if not isinstance(data, dict):
        raise ValidationError("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise ValidationError("Request JSON body must not be empty.")

    return data


def extract_token(req: Request) -> str:
    """Return the verification token from the query string or JSON body.

    Missing tokens come back as an empty string; callers treat that like
    any other invalid token.
    """

    token = req.args.get("token")
    if not token and req.method == "POST" and req.is_json:
        data = req.get_json(silent=True)
        if isinstance(data, dict) and isinstance(data.get("token"), str):
            token = data["token"]
    return (token or "").strip()
