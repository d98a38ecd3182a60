"""
Pricing API views.

- List current metal rates
- Administrative rate update with product repricing
- Ad-hoc price quote for the billing screen
"""

import logging

from django.db import DatabaseError

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.exceptions import PointOfSaleError, StorageError, error_response

from .serializers import MetalRateSerializer, PriceQuoteSerializer, RateUpdateSerializer
from .services import PricingEngine, RateStore, update_rate

logger = logging.getLogger(__name__)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def rate_list(request):
    """Return every stored rate."""
    try:
        rates = list(RateStore().list_rates())
    except DatabaseError:
        logger.error("Rates fetch failed", exc_info=True)
        return error_response(StorageError("Error fetching rates"))

    return Response(
        {"success": True, "rates": MetalRateSerializer(rates, many=True).data},
        status=status.HTTP_200_OK,
    )


@api_view(["PUT"])
@permission_classes([permissions.IsAdminUser])
def rate_update(request, metal):
    """
    Set the rate for a metal and reprice its products.

    Request body:
    {
        "price": "6000.00",
        "purity": "22K" (required for gold, ignored for silver)
    }

    Response:
    {
        "success": true,
        "rate": {...},
        "updatedProducts": 12 (null when repricing runs in the background)
    }
    """
    serializer = RateUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {"success": False, "message": "Invalid price", "errors": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        rate, updated = update_rate(
            metal,
            serializer.validated_data["price"],
            purity=serializer.validated_data.get("purity"),
        )
    except PointOfSaleError as e:
        return error_response(e)
    except DatabaseError:
        logger.error(f"Rate update failed for {metal}", exc_info=True)
        return error_response(StorageError("Error updating rate"))

    return Response(
        {
            "success": True,
            "rate": MetalRateSerializer(rate).data,
            "updatedProducts": updated,
        },
        status=status.HTTP_200_OK,
    )


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def price_quote(request):
    """Calculate a price breakdown without touching the catalog."""
    serializer = PriceQuoteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {"success": False, "message": "Invalid input", "errors": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    data = serializer.validated_data
    try:
        breakdown = PricingEngine().price_breakdown(
            data["metal"],
            data["weight"],
            wastage_percent=data["wastage"],
            making_charge=data["makingCharges"],
            stone_price=data["stonePrice"],
            purity=data.get("purity"),
        )
    except PointOfSaleError as e:
        return error_response(e)

    return Response(
        {"success": True, "breakdown": {key: str(value) for key, value in breakdown.items()}},
        status=status.HTTP_200_OK,
    )
