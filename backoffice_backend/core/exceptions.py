# core/exceptions.py

"""
API ERROR TAXONOMY

Every failure that reaches a client is rendered as:

    {"message": "<human readable>", ...optional structured fields}

Classes:
- ApiError              500  base (never raised directly by services)
- InputValidationError  400  malformed / missing input
- NotFoundError         404  client / product / order absent
- BusinessRuleError     400  insufficient stock, price mismatch, past date, ...
- ConflictError         409  concurrent stock contention, protected deletes

Auth failures stay DRF-native (NotAuthenticated / AuthenticationFailed -> 401,
PermissionDenied -> 403) and are re-shaped by api_exception_handler.

Unexpected exceptions are logged with their stack trace and surfaced as an
opaque 500.
"""

from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from django.http import Http404
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.views import set_rollback

logger = logging.getLogger(__name__)

UNEXPECTED_MESSAGE = "Unexpected server error"


class ApiError(Exception):
    """Base exception for all service-level failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = UNEXPECTED_MESSAGE

    def __init__(self, message: str | None = None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict:
        payload = {"message": self.message}
        for key, value in self.details.items():
            if value is not None:
                payload[key] = value
        return payload


class InputValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class BusinessRuleError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request violates a business rule"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflicting update, please retry"


# ---------------------------------------------------------
# DRF detail flattening
# ---------------------------------------------------------
def _first_message(detail) -> str:
    """
    Reduce DRF's nested error detail to one readable sentence.

    {"email": ["This field is required."]} -> "email: This field is required."
    """
    if isinstance(detail, dict):
        for key, value in detail.items():
            inner = _first_message(value)
            if key in ("non_field_errors", "detail"):
                return inner
            return f"{key}: {inner}"
        return "Invalid request"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request"
    return str(detail)


def api_exception_handler(exc, context):
    """
    REST_FRAMEWORK["EXCEPTION_HANDLER"].

    Domain errors carry their own status code; DRF/Django errors are reshaped
    into the {"message": ...} envelope; anything else is a logged 500.
    """
    if isinstance(exc, ApiError):
        if exc.status_code >= 500:
            logger.error("Service error", extra={"view": _view_name(context)})
        set_rollback()
        return Response(exc.to_payload(), status=exc.status_code)

    if isinstance(exc, ProtectedError):
        set_rollback()
        return Response(
            {"message": "Record is referenced by other records and cannot be deleted"},
            status=status.HTTP_409_CONFLICT,
        )

    if isinstance(exc, Http404):
        exc = drf_exceptions.NotFound()
    elif isinstance(exc, DjangoPermissionDenied):
        exc = drf_exceptions.PermissionDenied()
    elif isinstance(exc, DjangoValidationError):
        exc = drf_exceptions.ValidationError(detail=exc.messages)

    response = drf_exception_handler(exc, context)
    if response is not None:
        detail = getattr(exc, "detail", response.data)
        payload = {"message": _first_message(detail)}
        if isinstance(exc, drf_exceptions.ValidationError):
            payload["errors"] = response.data
        response.data = payload
        return response

    logger.exception("Unhandled API error", extra={"view": _view_name(context)})
    set_rollback()
    return Response(
        {"message": UNEXPECTED_MESSAGE},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _view_name(context) -> str | None:
    view = (context or {}).get("view")
    return view.__class__.__name__ if view is not None else None
