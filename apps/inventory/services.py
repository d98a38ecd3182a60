"""
Catalog and stock services.

- CatalogService creates products with generated SKUs and derived prices
- StockService looks products up by SKU and decrements on-hand stock
"""

import logging
import re
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.core.exceptions import InsufficientStock, InvalidInput, ProductNotFound
from apps.core.money import to_decimal
from apps.core.sequences import SequenceAllocator
from apps.inventory.models import Product
from apps.pricing.services import PricingEngine, validate_metal_purity

logger = logging.getLogger(__name__)


def category_prefix(category: str = "") -> str:
    """
    Three-letter SKU prefix from a category name.

    Non-letters are dropped; short names are padded from "GEN".

    Examples:
        >>> category_prefix("Rings")
        'RIN'
        >>> category_prefix("")
        'GEN'
    """
    letters = re.sub(r"[^A-Za-z]", "", category or "").upper()[:3]
    return (letters + "GEN")[:3]


class StockService:
    """On-hand stock lookups and atomic decrements."""

    def __init__(self, allow_negative: Optional[bool] = None):
        if allow_negative is None:
            allow_negative = getattr(settings, "ALLOW_NEGATIVE_STOCK", True)
        self.allow_negative = allow_negative

    def get_by_sku(self, sku: str) -> Product:
        try:
            return Product.objects.get(sku=sku)
        except Product.DoesNotExist:
            raise ProductNotFound(f"Product {sku} not found")

    def decrement_stock(self, sku: str, qty: int) -> None:
        """
        Subtract ``qty`` from the product's stock in one UPDATE.

        The subtraction happens in the database (``stock = stock - qty``),
        so concurrent sales of the same SKU never lose an update.

        Raises:
            InvalidInput: If qty is not a positive integer
            ProductNotFound: If the SKU is unknown
            InsufficientStock: If negative stock is disallowed and
                fewer than ``qty`` units are on hand
        """
        if isinstance(qty, bool) or not isinstance(qty, int) or qty < 1:
            raise InvalidInput("Quantity must be a positive integer")

        products = Product.objects.filter(sku=sku)
        if not self.allow_negative:
            products = products.filter(stock__gte=qty)

        updated = products.update(stock=F("stock") - qty, updated_at=timezone.now())
        if updated:
            if self.allow_negative:
                remaining = Product.objects.filter(sku=sku).values_list("stock", flat=True).get()
                if remaining < 0:
                    logger.warning(f"Stock for {sku} is now negative ({remaining})")
            return

        if not Product.objects.filter(sku=sku).exists():
            raise ProductNotFound(f"Product {sku} not found")

        available = Product.objects.filter(sku=sku).values_list("stock", flat=True).get()
        raise InsufficientStock(
            f"Insufficient stock for {sku}. Available: {available}, Requested: {qty}"
        )


class CatalogService:
    """
    Product creation and repricing.

    Catalog management screens live outside this service; it only covers
    what the pricing engine needs: SKU assignment and derived prices.
    """

    PRICED_FIELDS = ["weight_grams", "wastage_percent", "making_charge", "stone_price"]

    def __init__(
        self,
        engine: Optional[PricingEngine] = None,
        allocator: Optional[SequenceAllocator] = None,
    ):
        self.engine = engine or PricingEngine()
        # SKU serials are scoped by month in the key itself, never by year.
        self.allocator = allocator or SequenceAllocator(reset_yearly=False)

    def generate_sku(self, category: str = "", when=None) -> str:
        """
        Allocate a SKU of the form <CAT>-<yyyymm>-<serial:04>.

        The serial comes from a counter per prefix and month.
        """
        when = when or timezone.localdate()
        prefix = category_prefix(category)
        yyyymm = f"{when.year}{when.month:02d}"
        serial = self.allocator.next_value(f"SKU_{prefix}_{yyyymm}")
        return f"{prefix}-{yyyymm}-{serial:04d}"

    def _clean(self, attrs):
        name = (attrs.get("name") or "").strip()
        if not name:
            raise InvalidInput("Name is required")

        metal, purity = validate_metal_purity(attrs.get("metal") or "gold", attrs.get("purity"))

        cleaned = {
            "name": name,
            "category": (attrs.get("category") or "").strip(),
            "metal": metal,
            "purity": purity,
            "description": attrs.get("description") or "",
        }
        for field in self.PRICED_FIELDS:
            cleaned[field] = to_decimal(attrs.get(field), field.replace("_", " "))

        stock = attrs.get("stock", 0)
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            raise InvalidInput("Stock must be a non-negative integer")
        cleaned["stock"] = stock
        return cleaned

    @transaction.atomic
    def create_product(self, **attrs) -> Product:
        """
        Create a product with a generated SKU and computed price.

        Raises:
            InvalidInput: Missing name, negative amounts or bad stock
            InvalidPurity: Gold without a valid purity
            RateNotFound: No rate for a weighted item (see MISSING_RATE_AS_ZERO)
        """
        cleaned = self._clean(attrs)
        product = Product(**cleaned)
        product.price = self.engine.price_for_product(product)
        product.sku = self.generate_sku(product.category)
        product.qr_code = f"QR-{product.sku}"
        product.save()

        logger.info(f"Created product {product.sku} priced {product.price}")
        return product

    @transaction.atomic
    def save_product(self, product: Product) -> Product:
        """
        Recompute the derived price and save.

        A product saved without a SKU (e.g. added through the admin) gets
        one generated here.
        """
        product.metal, product.purity = validate_metal_purity(product.metal, product.purity)
        product.price = self.engine.price_for_product(product)
        if not product.sku:
            product.sku = self.generate_sku(product.category)
            product.qr_code = f"QR-{product.sku}"
        product.save()
        return product
