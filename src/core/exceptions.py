"""Domain exceptions and the project-wide DRF exception handler.

Services raise the exceptions below; API views translate them into DRF
exceptions (``PermissionDenied``, ``ValidationError``...). The handler then
renders every error response as ``{"error": "<message>"}``.
"""
from __future__ import annotations

import logging

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger("agency")


# ---------------------------------------------------------------------------
# Lock-rule violations (403)
# ---------------------------------------------------------------------------

class LockViolation(Exception):
    """A mutation was refused because of the current state of the data."""

    default_message = "This record is locked."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class FinancialFieldsLocked(LockViolation):
    default_message = (
        "This deal has been marked as paid. Value, buckets and probability are locked. "
        "Change the invoice status first to unlock it."
    )

    def __init__(self, fields=(), message: str | None = None):
        self.fields = list(fields)
        super().__init__(message)


class DealIsPaid(LockViolation):
    default_message = "Paid deals cannot be deleted. Change the invoice status first."


class TaskHoursLocked(LockViolation):
    default_message = (
        "Estimated hours are locked: the project is complete and its deal has been paid."
    )


class ProfitShareLocked(LockViolation):
    default_message = "Profit share percentage is locked: a profit share payout has already been made."


class AutoEntryImmutable(LockViolation):
    default_message = (
        "Automatic pay log entries cannot be deleted. "
        "Reverse the pay or profit share status that created it instead."
    )


class CannotSelfDemote(LockViolation):
    default_message = "You cannot remove your own admin access."


class CannotSelfDelete(LockViolation):
    default_message = "You cannot remove yourself."


# ---------------------------------------------------------------------------
# Validation (400) and authentication (401)
# ---------------------------------------------------------------------------

class InvalidRole(ValueError):
    def __init__(self, role=None):
        self.role = role
        super().__init__("Invalid role")


class PinLoginError(Exception):
    """Login failed: unknown member or wrong PIN."""

    status_code = status.HTTP_401_UNAUTHORIZED


class MemberInactive(PinLoginError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Account is inactive"):
        super().__init__(message)


# ---------------------------------------------------------------------------
# DRF exception handler
# ---------------------------------------------------------------------------

def _first_message(detail) -> str:
    """Flatten a DRF error detail (str, list or dict) into one readable line."""
    if isinstance(detail, dict):
        if not detail:
            return "Invalid request"
        key, value = next(iter(detail.items()))
        message = _first_message(value)
        if key in ("detail", "non_field_errors", "error"):
            return message
        return f"{key}: {message}"
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request"
    return str(detail)


def api_exception_handler(exc, context):
    """Render every API error as ``{"error": message}``.

    Exceptions DRF does not know about (store failures, bugs) are logged with
    their traceback and reported as a 500 with a generic message.
    """
    if isinstance(exc, (Http404, DjangoPermissionDenied, exceptions.APIException)):
        response = exception_handler(exc, context)
        if response is not None:
            response.data = {"error": _first_message(response.data)}
        return response

    view = context.get("view")
    logger.exception("Unhandled error in %s", type(view).__name__ if view else "unknown view")
    return Response(
        {"error": "Internal server error"},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
