"""
Error taxonomy for the order-and-pricing engine.

Services raise these exceptions; API views translate them into the
``{"success": false, "message": ...}`` envelope the billing UI expects.

Categories:
- ValidationError: bad input, rejected before any mutation (HTTP 400)
- NotFoundError: unknown SKU, rate, order or return (HTTP 404)
- ConflictError: duplicate return, identifier collision, oversell (HTTP 409)
- StorageError: persistence-layer failure (HTTP 500)
"""

import logging

from django.db import DatabaseError

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class PointOfSaleError(Exception):
    """Base class for all engine errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PointOfSaleError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(PointOfSaleError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(PointOfSaleError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class StorageError(PointOfSaleError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"


# Validation


class InvalidInput(ValidationError):
    default_message = "Invalid input"


class InvalidRate(ValidationError):
    default_message = "Invalid price"


class InvalidPurity(ValidationError):
    default_message = "Invalid purity"


class InvalidReturnReason(ValidationError):
    default_message = "Invalid return reason"


class InvalidReturnType(ValidationError):
    default_message = "Invalid return type"


# Not found


class RateNotFound(NotFoundError):
    default_message = "Rate not found"


class ProductNotFound(NotFoundError):
    default_message = "Product not found"


class OrderNotFound(NotFoundError):
    default_message = "Order not found"


class ReturnNotFound(NotFoundError):
    default_message = "Return not found"


# Conflicts


class DuplicateReturn(ConflictError):
    default_message = "Return already exists for this order"


class OrderPersistenceError(ConflictError):
    default_message = "Order could not be saved"


class InsufficientStock(ConflictError):
    default_message = "Insufficient stock"


class InvalidStatusTransition(ConflictError):
    default_message = "Status change not allowed"


def error_response(exc):
    """Render an engine error in the billing UI envelope."""
    return Response({"success": False, "message": exc.message}, status=exc.status_code)


def api_exception_handler(exc, context):
    """
    DRF exception handler that keeps every failure in the same envelope.

    Engine errors keep their own status, database failures collapse to a
    generic 500, everything else falls back to DRF's default handling.
    """
    if isinstance(exc, PointOfSaleError):
        return error_response(exc)

    if isinstance(exc, DatabaseError):
        logger.error("Unhandled storage failure in %s", context.get("view"), exc_info=exc)
        return error_response(StorageError())

    response = exception_handler(exc, context)
    if response is not None and isinstance(response.data, dict) and "detail" in response.data:
        response.data = {"success": False, "message": str(response.data["detail"])}
    return response
