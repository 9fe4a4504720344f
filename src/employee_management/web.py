"""Shared pieces of the JSON HTTP layer: auth guards, body parsing, error mapping."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from .ai.images import ImageData, image_from_base64
from .core.enums import Role
from .core.exceptions import (
    AccountTerminatedError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DomainError,
    GeofenceViolationError,
    NotFoundError,
    PermissionDeniedError,
    RemoteServiceError,
    ValidationError,
    VerificationFailedError,
)
from .employees.service import SessionUser

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    PermissionDeniedError: 403,
    GeofenceViolationError: 403,
    NotFoundError: 404,
    ConfigurationError: 409,
    ConflictError: 409,
    VerificationFailedError: 422,
    RemoteServiceError: 503,
}


def status_for(error: DomainError) -> int:
    for cls in type(error).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 400


def error_payload(error: DomainError) -> dict:
    payload: dict[str, Any] = {"success": False, "message": str(error)}
    if isinstance(error, AccountTerminatedError):
        payload["reason"] = error.reason
        payload["deletion_date"] = error.deletion_date
    if isinstance(error, GeofenceViolationError):
        payload["distance_m"] = round(error.distance_m)
        payload["radius_m"] = error.radius_m
    return payload


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify(error_payload(e)), status_for(e)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": "Internal server error"}), 500


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return jsonify({"success": False, "message": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def role_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "employee_id" not in session:
                return jsonify({"success": False, "message": "Please log in to continue"}), 401
            if session.get("role") not in allowed:
                return jsonify({"success": False, "message": "You do not have permission to do this"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def remember(user: SessionUser) -> None:
    session.clear()
    session["employee_id"] = user.employee_id
    session["role"] = user.role.value
    session["company_id"] = user.company_id


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def image_field(data: dict, key: str = "photo") -> Optional[ImageData]:
    value = data.get(key)
    if not value:
        return None
    return image_from_base64(str(value))


def require_image(data: dict, key: str = "photo") -> ImageData:
    image = image_field(data, key)
    if image is None:
        raise ValidationError("A photo is required")
    return image


def ok(**payload):
    return jsonify({"success": True, **payload})
