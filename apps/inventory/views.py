"""
Product API views.

Implements the catalog lookups the billing screen needs:
- Product list (newest first)
- Lookup by SKU (barcode/QR scan)
- Product creation with generated SKU and derived price
"""

import logging

from django.db import DatabaseError

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.exceptions import PointOfSaleError, StorageError, error_response

from .models import Product
from .serializers import ProductCreateSerializer, ProductSerializer
from .services import CatalogService, StockService

logger = logging.getLogger(__name__)


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated])
def product_list(request):
    """
    GET: list all products, newest first.
    POST: create a product; SKU, QR payload and price are generated.
    """
    if request.method == "POST":
        return _create_product(request)

    try:
        products = list(Product.objects.all())
    except DatabaseError:
        logger.error("Products fetch failed", exc_info=True)
        return error_response(StorageError())

    return Response(
        {"success": True, "products": ProductSerializer(products, many=True).data},
        status=status.HTTP_200_OK,
    )


def _create_product(request):
    serializer = ProductCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(
            {"success": False, "message": "Invalid product", "errors": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        product = CatalogService().create_product(**serializer.to_service_kwargs())
    except PointOfSaleError as e:
        return error_response(e)

    return Response(
        {"success": True, "product": ProductSerializer(product).data},
        status=status.HTTP_201_CREATED,
    )


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def product_by_sku(request, sku):
    """Fetch a single product by SKU."""
    try:
        product = StockService().get_by_sku(sku)
    except PointOfSaleError as e:
        return error_response(e)

    return Response(
        {"success": True, "product": ProductSerializer(product).data},
        status=status.HTTP_200_OK,
    )
