"""
Order and return engines.

OrderService turns a cart into an immutable Order: it validates the cart,
mints the order and invoice numbers, recomputes totals and decrements
stock, all inside one transaction. ReturnService records at most one
refund per order and drives the refund status machine.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Exists, OuterRef, Q
from django.utils import timezone

from django_fsm import can_proceed

from apps.core.exceptions import (
    DuplicateReturn,
    InvalidInput,
    InvalidReturnReason,
    InvalidReturnType,
    InvalidStatusTransition,
    OrderNotFound,
    OrderPersistenceError,
    ReturnNotFound,
)
from apps.core.money import ZERO, round_paise, to_decimal
from apps.core.sequences import SequenceAllocator
from apps.inventory.services import StockService

from .models import Order, OrderItem, Return

logger = logging.getLogger(__name__)

DEFAULT_IDENTIFIER_PREFIXES = {
    "order": ("ORD", "-"),
    "invoice": ("INV", "/"),
}


def identifier_prefixes() -> Dict[str, tuple]:
    """Prefix and separator for order and invoice numbers."""
    prefixes = dict(DEFAULT_IDENTIFIER_PREFIXES)
    prefixes.update(getattr(settings, "IDENTIFIER_PREFIXES", {}) or {})
    return prefixes


class OrderService:
    """
    Order creation and lookup.

    Collaborators are injected so tests can swap the stock policy or the
    sequence scope without touching settings.
    """

    def __init__(
        self,
        allocator: Optional[SequenceAllocator] = None,
        stock: Optional[StockService] = None,
    ):
        self.allocator = allocator or SequenceAllocator()
        self.stock = stock or StockService()

    def _clean_customer(self, customer) -> dict:
        if not isinstance(customer, dict):
            raise InvalidInput("Customer details are required")
        name = (customer.get("name") or "").strip()
        if not name:
            raise InvalidInput("Customer name is required")
        return {
            "name": name,
            "phone": (customer.get("phone") or "").strip(),
            "email": (customer.get("email") or "").strip(),
        }

    def _clean_line_items(self, line_items) -> List[dict]:
        """
        Validate line items and fill in defaults from the catalog.

        A missing unit price or name is taken from the product; an unknown
        SKU only fails here when such a default is needed, otherwise the
        stock decrement reports it inside the transaction.
        """
        if not line_items:
            raise InvalidInput("Order must contain at least one item")

        cleaned = []
        for position, item in enumerate(line_items):
            sku = (item.get("sku") or "").strip()
            if not sku:
                raise InvalidInput(f"Item {position + 1}: SKU is required")

            qty = item.get("qty")
            if isinstance(qty, bool) or not isinstance(qty, int) or qty < 1:
                raise InvalidInput(f"Item {sku}: quantity must be a positive integer")

            unit_price = item.get("unit_price")
            name = (item.get("name") or "").strip()
            if unit_price is None or not name:
                product = self.stock.get_by_sku(sku)
                if unit_price is None:
                    unit_price = product.price
                name = name or product.name

            unit_price = round_paise(to_decimal(unit_price, f"Item {sku}: price"))
            cleaned.append(
                {
                    "position": position,
                    "sku": sku,
                    "name": name,
                    "unit_price": unit_price,
                    "qty": qty,
                    "line_total": round_paise(unit_price * qty),
                }
            )
        return cleaned

    def _clean_payment(self, payment_mode, payment_methods, grand_total):
        valid_methods = [choice[0] for choice in Order.PAYMENT_METHOD_CHOICES]

        if payment_methods:
            methods = []
            paid = ZERO
            for entry in payment_methods:
                method = entry.get("method")
                if method not in valid_methods:
                    raise InvalidInput(f"Invalid payment method '{method}'")
                amount = round_paise(to_decimal(entry.get("amount"), f"{method} amount"))
                methods.append({"method": method, "amount": str(amount)})
                paid += amount
            if paid != grand_total:
                raise InvalidInput(
                    f"Payment total {paid} does not match grand total {grand_total}"
                )
            return payment_mode or "", methods

        if not payment_mode:
            raise InvalidInput("Payment mode is required")
        if payment_mode not in valid_methods:
            raise InvalidInput(f"Invalid payment mode '{payment_mode}'")
        return payment_mode, []

    def create_order(
        self,
        customer: dict,
        line_items: List[dict],
        payment_mode: Optional[str] = None,
        payment_methods: Optional[List[dict]] = None,
        discount=0,
        tax=0,
        client_grand_total=None,
    ) -> Order:
        """
        Create an order and decrement stock for every line.

        Args:
            customer: {name, phone, email}
            line_items: [{sku, qty, unit_price?, name?}]
            payment_mode: Single payment method
            payment_methods: Split payment [{method, amount}], summing to
                the grand total
            discount: Order-level discount amount
            tax: Tax amount
            client_grand_total: Total shown by the client; only compared
                against the server total and logged on mismatch

        Returns:
            Order: The persisted order with its items

        Raises:
            InvalidInput: Bad customer, items, amounts or payment
            ProductNotFound: A line's SKU does not exist
            InsufficientStock: Overselling while negative stock is disallowed
            OrderPersistenceError: Order or invoice number already taken
        """
        customer = self._clean_customer(customer)
        items = self._clean_line_items(line_items)
        discount = round_paise(to_decimal(discount, "discount"))
        tax = round_paise(to_decimal(tax, "tax"))

        subtotal = sum((item["line_total"] for item in items), Decimal("0.00"))
        grand_total = subtotal - discount + tax
        if grand_total < 0:
            raise InvalidInput("Discount cannot exceed subtotal plus tax")

        if client_grand_total is not None:
            claimed = round_paise(to_decimal(client_grand_total, "grand total"))
            if claimed != grand_total:
                logger.warning(
                    f"Client grand total {claimed} differs from computed {grand_total}; "
                    f"using computed value"
                )

        payment_mode, payment_methods = self._clean_payment(
            payment_mode, payment_methods, grand_total
        )

        prefixes = identifier_prefixes()
        order_id = invoice_number = None
        created_at = timezone.now()
        year = timezone.localtime(created_at).year

        try:
            with transaction.atomic():
                order_id = self.allocator.next_identifier(*prefixes["order"], year=year)
                invoice_number = self.allocator.next_identifier(*prefixes["invoice"], year=year)

                order = Order.objects.create(
                    order_id=order_id,
                    invoice_number=invoice_number,
                    customer=customer,
                    payment_mode=payment_mode,
                    payment_methods=payment_methods,
                    subtotal=subtotal,
                    discount=discount,
                    tax=tax,
                    grand_total=grand_total,
                    created_at=created_at,
                )
                OrderItem.objects.bulk_create(OrderItem(order=order, **item) for item in items)

                for item in items:
                    self.stock.decrement_stock(item["sku"], item["qty"])
        except IntegrityError as e:
            if not self._identifier_taken(order_id, invoice_number):
                raise
            logger.error(f"Order identifier collision: {e}", exc_info=True)
            raise OrderPersistenceError("Order could not be saved, please retry")

        logger.info(
            f"Created order {order.order_id} (invoice {order.invoice_number}) "
            f"for {customer['name']}: {len(items)} items, total {grand_total}"
        )
        return order

    def _identifier_taken(self, order_id, invoice_number) -> bool:
        """Whether an IntegrityError came from the order or invoice number."""
        if order_id is None:
            return False
        return Order.objects.filter(
            Q(order_id=order_id) | Q(invoice_number=invoice_number)
        ).exists()

    def list_orders(self):
        """All orders, newest first, each annotated with ``is_returned``."""
        returned = Return.objects.filter(order_id=OuterRef("order_id"))
        return (
            Order.objects.prefetch_related("items")
            .annotate(is_returned=Exists(returned))
            .order_by("-created_at", "-id")
        )

    def get_order(self, order_id: str) -> Order:
        try:
            return self.list_orders().get(order_id=order_id)
        except Order.DoesNotExist:
            raise OrderNotFound(f"Order {order_id} not found")


def order_snapshot(order: Order) -> dict:
    """Customer, items and total of an order as stored on a return."""
    return {
        "invoice_number": order.invoice_number,
        "customer": dict(order.customer),
        "items": [
            {
                "sku": item.sku,
                "name": item.name,
                "price": str(item.unit_price),
                "qty": item.qty,
            }
            for item in order.items.all()
        ],
        "grand_total": order.grand_total,
    }


class ReturnService:
    """
    Return creation, lookup and status changes.

    The unique ``order_id`` column is what guarantees a single return per
    order; ``exists`` is only an early, friendlier answer.
    """

    STATUS_TRANSITIONS = {
        Return.COMPLETED: "complete",
        Return.REJECTED: "reject",
    }

    def exists(self, order_id: str) -> bool:
        return Return.objects.filter(order_id=order_id).exists()

    def create_return(
        self,
        order_id: str,
        invoice_number: str,
        customer: dict,
        items: List[dict],
        grand_total,
        reason: str,
        return_type: str,
        return_date=None,
        return_time=None,
    ) -> Return:
        """
        Record a return for an order.

        Stock and the original order are left untouched.

        Raises:
            InvalidInput: Missing order id, empty items or negative total
            InvalidReturnReason: Reason outside the closed set
            InvalidReturnType: Refund type outside the closed set
            DuplicateReturn: A return for this order already exists
        """
        order_id = (order_id or "").strip()
        if not order_id:
            raise InvalidInput("Order ID is required")
        if reason not in dict(Return.REASON_CHOICES):
            raise InvalidReturnReason(f"Invalid return reason '{reason}'")
        if return_type not in dict(Return.TYPE_CHOICES):
            raise InvalidReturnType(f"Invalid return type '{return_type}'")
        if not items:
            raise InvalidInput("Return must contain at least one item")

        grand_total = round_paise(to_decimal(grand_total, "grand total"))
        if grand_total < 0:
            raise InvalidInput("Grand total cannot be negative")

        if self.exists(order_id):
            raise DuplicateReturn(f"Return already exists for order {order_id}")

        now = timezone.localtime()
        try:
            with transaction.atomic():
                ret = Return.objects.create(
                    order_id=order_id,
                    invoice_number=invoice_number or "",
                    customer=customer or {},
                    items=list(items),
                    grand_total=grand_total,
                    return_reason=reason,
                    return_type=return_type,
                    return_date=return_date or now.date(),
                    return_time=return_time or now.time().replace(microsecond=0),
                )
        except IntegrityError:
            logger.warning(f"Concurrent return for order {order_id} rejected")
            raise DuplicateReturn(f"Return already exists for order {order_id}")

        logger.info(
            f"Created return for order {order_id}: {reason}, "
            f"{grand_total} refunded by {return_type}"
        )
        return ret

    def create_return_for_order(self, order_id: str, reason: str, return_type: str) -> Return:
        """Record a return using the stored order as the snapshot source."""
        order = OrderService().get_order(order_id)
        return self.create_return(
            order.order_id, reason=reason, return_type=return_type, **order_snapshot(order)
        )

    def list_returns(self):
        """All returns, newest first."""
        return Return.objects.order_by("-created_at", "-id")

    def get_return(self, pk) -> Return:
        try:
            return Return.objects.get(pk=pk)
        except Return.DoesNotExist:
            raise ReturnNotFound(f"Return {pk} not found")

    @transaction.atomic
    def update_status(self, pk, status: str) -> Return:
        """
        Move a pending return to Completed or Rejected.

        Raises:
            ReturnNotFound: Unknown return
            InvalidInput: Unknown target status
            InvalidStatusTransition: Return is no longer pending
        """
        target = (status or "").strip().capitalize()
        action = self.STATUS_TRANSITIONS.get(target)
        if action is None:
            raise InvalidInput(f"Invalid status '{status}'")

        try:
            ret = Return.objects.select_for_update().get(pk=pk)
        except Return.DoesNotExist:
            raise ReturnNotFound(f"Return {pk} not found")

        transition = getattr(ret, action)
        if not can_proceed(transition):
            raise InvalidStatusTransition(
                f"Cannot change return {ret.order_id} from {ret.status} to {target}"
            )

        transition()
        ret.save()

        logger.info(f"Return for order {ret.order_id} marked {ret.status}")
        return ret
