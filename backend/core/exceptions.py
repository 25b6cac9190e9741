"""
Domain exceptions for the Dealer Registry.

Every error response has the same envelope:
{
    "error": {
        "code": "ERROR_CODE",
        "message": "Human-readable description",
        "details": {}
    }
}

Business conflicts (identity active elsewhere, terminal state, stale
version) map to 409 and carry their own code.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

# Codes for DRF's own errors, which only carry a "detail" string
HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_429_TOO_MANY_REQUESTS: "THROTTLED",
}


def error_body(code, message, details=None):
    return {"error": {"code": code, "message": message, "details": details or {}}}


def error_response(code, message, details=None, status_code=status.HTTP_400_BAD_REQUEST):
    """Build an error Response directly, for checks made inside a view."""
    return Response(error_body(code, message, details), status=status_code)


class DomainError(Exception):
    """Base exception for all domain errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, code, message, details=None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(DomainError):
    """Request body or parameters fail validation."""

    def __init__(self, message, details=None):
        super().__init__("VALIDATION_ERROR", message, details)


class InvalidStateError(DomainError):
    """
    Entity is not in the required state: a terminal affiliation, a decided
    transfer, a lost version race or a source dealer that no longer matches.
    """

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message, details=None, code="INVALID_STATE"):
        super().__init__(code, message, details)


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message, details=None):
        super().__init__("NOT_FOUND", message, details)


class PermissionDeniedError(DomainError):
    """Actor lacks the required role."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message, details=None):
        super().__init__("FORBIDDEN", message, details)


class ConflictError(DomainError):
    """
    The identity is already held elsewhere.

    details carries enough for the caller to offer a next action, e.g.
    dealerName and since for a transfer request.
    """

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message, details=None, code="CONFLICT"):
        super().__init__(code, message, details)


def domain_exception_handler(exc, context):
    """
    DRF exception handler.

    DomainError subclasses render with their own code and status. DRF errors
    are wrapped in the same envelope. Anything else is logged and becomes a
    500 INTERNAL_ERROR.
    """
    if isinstance(exc, DomainError):
        return error_response(exc.code, exc.message, exc.details, exc.status_code)

    response = exception_handler(exc, context)

    if response is None:
        logger.exception("Unhandled exception", exc_info=exc)
        return error_response(
            "INTERNAL_ERROR",
            "An internal error occurred",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, DRFValidationError):
        response.data = error_body(
            "VALIDATION_ERROR", "Request validation failed", response.data
        )
    elif isinstance(response.data, dict) and "detail" in response.data:
        response.data = error_body(
            HTTP_ERROR_CODES.get(response.status_code, "ERROR"),
            str(response.data["detail"]),
        )
    else:
        response.data = error_body("INTERNAL_ERROR", "An error occurred", response.data)

    return response
