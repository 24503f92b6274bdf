"""
Error taxonomy and the DRF exception handler that renders it.

Operational errors (subclasses of ``AppError``) carry a message that is safe to
show to API clients. Anything else is treated as a programming error: it is
logged and reported as a generic 500, with the traceback attached only when
``DEBUG`` is enabled.
"""

from __future__ import annotations

import logging
import traceback

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework_simplejwt.exceptions import InvalidToken

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something went wrong!"


class AppError(exceptions.APIException):
    """Base class for errors whose message is surfaced to the caller."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_ERROR_MESSAGE
    default_code = "error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        super().__init__(detail=message)
        if status_code is not None:
            self.status_code = status_code

    @property
    def message(self) -> str:
        return str(self.detail)

    @property
    def status(self) -> str:
        return status_label(self.status_code)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input data."


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "You are not logged in. Please log in to get access"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "No document found with that ID"


class InvalidTourError(AppError):
    """Raised when a tour cannot be priced (missing or non-positive price)."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Tour must have a positive price to be booked."


class PaymentProviderError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "There was a problem contacting the payment provider. Please try again later."


class SignatureVerificationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Webhook signature verification failed."


class ReconciliationError(AppError):
    """A verified payment event could not be turned into a booking."""

    default_detail = "Could not reconcile the payment event."


class UserResolutionError(ReconciliationError):
    default_detail = "No user matches the checkout customer email."


def status_label(status_code: int) -> str:
    return "fail" if 400 <= status_code < 500 else "error"


def _flatten_messages(detail) -> list[str]:
    if isinstance(detail, dict):
        messages = []
        for key, value in detail.items():
            for message in _flatten_messages(value):
                messages.append(message if key == "non_field_errors" else f"{key}: {message}")
        return messages
    if isinstance(detail, (list, tuple)):
        messages = []
        for item in detail:
            messages.extend(_flatten_messages(item))
        return messages
    return [str(detail)]


def _translate(exc: Exception) -> Exception:
    """Map framework and database errors onto the operational taxonomy."""
    if isinstance(exc, InvalidToken):
        if "expired" in str(exc.detail).lower():
            return AuthenticationError("Your token has expired. Please log in again")
        return AuthenticationError("Invalid token. Please log in again")
    if isinstance(exc, exceptions.NotAuthenticated):
        return AuthenticationError()
    if isinstance(exc, exceptions.PermissionDenied):
        return AuthorizationError(str(exc.detail).rstrip("."))
    if isinstance(exc, Http404):
        return NotFoundError(str(exc) or None)
    if isinstance(exc, IntegrityError):
        return ValidationError("Duplicate field value. Please use another value")
    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, "message_dict"):
            messages = _flatten_messages(exc.message_dict)
        else:
            messages = list(exc.messages)
        return ValidationError(f"Invalid input data. {'. '.join(messages)}")
    return exc


def _debug_fields(exc: Exception) -> dict:
    if not settings.DEBUG:
        return {}
    return {
        "error": exc.__class__.__name__,
        "stack": traceback.format_exception(type(exc), exc, exc.__traceback__),
    }


def api_exception_handler(exc, context):
    original = exc
    exc = _translate(exc)

    if isinstance(exc, exceptions.ValidationError):
        response = exception_handler(exc, context)
        messages = _flatten_messages(exc.detail)
        response.data = {
            "status": "fail",
            "message": f"Invalid input data. {'. '.join(messages)}".strip(),
            "errors": exc.detail,
            **_debug_fields(original),
        }
        return response

    if isinstance(exc, exceptions.APIException):
        response = exception_handler(exc, context)
        if response is None:
            response = Response(status=exc.status_code)
        response.data = {
            "status": status_label(response.status_code),
            "message": str(exc.detail),
            **_debug_fields(original),
        }
        return response

    logger.error("Unhandled error while processing %s", context.get("request"), exc_info=exc)
    data = {"status": "error", "message": GENERIC_ERROR_MESSAGE}
    if settings.DEBUG:
        data["message"] = str(exc) or GENERIC_ERROR_MESSAGE
        data.update(_debug_fields(exc))
    return Response(data, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
