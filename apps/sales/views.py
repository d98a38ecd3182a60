"""
Views for orders and returns.

- Order creation from the billing screen (identifiers, totals and stock
  handled by the order engine)
- Order history and detail
- Return existence check, creation, history and status changes
"""

import logging

from django.db import DatabaseError

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.exceptions import PointOfSaleError, StorageError, error_response

from .serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    ReturnCreateSerializer,
    ReturnSerializer,
    ReturnStatusSerializer,
)
from .services import OrderService, ReturnService

logger = logging.getLogger(__name__)


def _invalid(serializer, message):
    return Response(
        {"success": False, "message": message, "errors": serializer.errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


# Orders


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated])
def order_list(request):
    """
    GET: order history, newest first.
    POST: create an order.

    Request body:
    {
        "customer": {"name": "...", "phone": "...", "email": "..."},
        "items": [
            {
                "sku": "RIN-202410-0001",
                "qty": 1,
                "price": "30900.00" (optional, uses current price if not provided),
                "name": "..." (optional)
            }
        ],
        "paymentMode": "Cash|Card|UPI|Bank Transfer|Wallet",
        "paymentMethods": [{"method": "Cash", "amount": "100.00"}] (optional, split payment),
        "discount": "0.00" (optional),
        "tax": "0.00" (optional),
        "grandTotal": "..." (optional, checked against the server total)
    }
    """
    if request.method == "POST":
        return _create_order(request)

    try:
        orders = list(OrderService().list_orders())
    except DatabaseError:
        logger.error("Order fetch failed", exc_info=True)
        return error_response(StorageError())

    return Response(
        {"success": True, "orders": OrderSerializer(orders, many=True).data},
        status=status.HTTP_200_OK,
    )


def _create_order(request):
    serializer = OrderCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer, "Invalid order")

    try:
        order = OrderService().create_order(**serializer.to_service_kwargs())
    except PointOfSaleError as e:
        return error_response(e)
    except DatabaseError:
        logger.error("Order save failed", exc_info=True)
        return error_response(StorageError())

    return Response(
        {"success": True, "order": OrderSerializer(order).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def order_detail(request, order_id):
    try:
        order = OrderService().get_order(order_id)
    except PointOfSaleError as e:
        return error_response(e)

    return Response({"success": True, "order": OrderSerializer(order).data})


# Returns


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def return_check(request, order_id):
    """
    Tell the returns page whether an order was already returned.

    A failed lookup answers ``exists: false``; creation re-checks anyway.
    """
    try:
        exists = ReturnService().exists(order_id)
    except DatabaseError:
        logger.error(f"Return check failed for {order_id}", exc_info=True)
        return Response({"success": False, "exists": False})

    return Response({"success": True, "exists": exists})


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated])
def return_list(request):
    """
    GET: return history, newest first.
    POST: record a return for an order.
    """
    if request.method == "POST":
        return _create_return(request)

    try:
        returns = list(ReturnService().list_returns())
    except DatabaseError:
        logger.error("Returns fetch failed", exc_info=True)
        return error_response(StorageError())

    return Response({"success": True, "returns": ReturnSerializer(returns, many=True).data})


def _create_return(request):
    serializer = ReturnCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer, "Invalid return")

    service = ReturnService()
    data = serializer.validated_data
    try:
        if serializer.has_snapshot():
            ret = service.create_return(**serializer.to_service_kwargs())
        else:
            ret = service.create_return_for_order(
                data["orderId"], data["returnReason"], data["returnType"]
            )
    except PointOfSaleError as e:
        return error_response(e)
    except DatabaseError:
        logger.error(f"Return save failed for {data['orderId']}", exc_info=True)
        return error_response(StorageError())

    return Response(
        {"success": True, "return": ReturnSerializer(ret).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def return_detail(request, pk):
    try:
        ret = ReturnService().get_return(pk)
    except PointOfSaleError as e:
        return error_response(e)

    return Response({"success": True, "return": ReturnSerializer(ret).data})


@api_view(["PATCH"])
@permission_classes([permissions.IsAuthenticated])
def return_status(request, pk):
    """
    Complete or reject a pending return.

    Request body:
    {
        "status": "Completed|Rejected"
    }
    """
    serializer = ReturnStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return _invalid(serializer, "Invalid status")

    try:
        ret = ReturnService().update_status(pk, serializer.validated_data["status"])
    except PointOfSaleError as e:
        return error_response(e)

    return Response({"success": True, "return": ReturnSerializer(ret).data})
