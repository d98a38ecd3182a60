"""
Sales models for jewellery shop billing.

- Order: immutable bill with sequential order id and invoice number,
  a denormalized customer snapshot and server-computed totals
- OrderItem: ordered line items of an order
- Return: refund record, at most one per order id

Corrections to an order never edit it; they go through a Return.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.db.models.functions import Round
from django.utils import timezone

from django_fsm import FSMField, transition


class Order(models.Model):
    """
    Completed sale.

    ``order_id`` (ORD-<year>-<serial>) and ``invoice_number``
    (INV/<year>/<serial>) are minted by the sequence allocator and unique
    at the storage layer. ``grand_total = subtotal - discount + tax`` is
    enforced by a check constraint. Orders are immutable once saved.
    """

    # Payment method choices
    CASH = "Cash"
    CARD = "Card"
    UPI = "UPI"
    BANK_TRANSFER = "Bank Transfer"
    WALLET = "Wallet"

    PAYMENT_METHOD_CHOICES = [
        (CASH, "Cash"),
        (CARD, "Card"),
        (UPI, "UPI"),
        (BANK_TRANSFER, "Bank Transfer"),
        (WALLET, "Wallet"),
    ]

    order_id = models.CharField(
        max_length=30,
        unique=True,
        help_text="Human-readable order number (e.g., 'ORD-2024-0007')",
    )

    invoice_number = models.CharField(
        max_length=30,
        unique=True,
        help_text="Invoice number (e.g., 'INV/2024/0007')",
    )

    customer = models.JSONField(
        default=dict,
        help_text="Customer snapshot at time of sale: {name, phone, email}",
    )

    # Payment details
    payment_mode = models.CharField(
        max_length=50,
        blank=True,
        help_text="Single payment mode, when not split",
    )

    payment_methods = models.JSONField(
        default=list,
        blank=True,
        help_text="Split payment breakdown: [{method, amount}]",
    )

    # Financial details
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Sum of unit price x quantity over line items",
    )

    discount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Discount amount",
    )

    tax = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Tax amount",
    )

    grand_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="subtotal - discount + tax",
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the order was created",
    )

    class Meta:
        db_table = "sales_orders"
        ordering = ["-created_at", "-id"]
        verbose_name = "Order"
        verbose_name_plural = "Orders"
        constraints = [
            models.CheckConstraint(
                condition=Q(grand_total=Round(F("subtotal") - F("discount") + F("tax"), 2)),
                name="order_grand_total_identity",
            ),
            models.CheckConstraint(
                condition=Q(discount__gte=0) & Q(tax__gte=0),
                name="order_adjustments_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.order_id} - {self.grand_total}"

    def save(self, *args, **kwargs):
        """Orders can only be inserted, never updated."""
        if not self._state.adding:
            raise ValueError("Orders are immutable; record a return instead")
        super().save(*args, **kwargs)


class OrderItem(models.Model):
    """
    Line item snapshot: what was sold, at what price, how many.

    SKU and name are copied so the order survives catalog edits.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Order that this item belongs to",
    )

    position = models.PositiveIntegerField(
        help_text="Zero-based position in the bill",
    )

    sku = models.CharField(
        max_length=50,
        help_text="Product SKU at time of sale",
    )

    name = models.CharField(
        max_length=255,
        help_text="Product name at time of sale",
    )

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price at time of sale",
    )

    qty = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity sold",
    )

    line_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="unit_price x qty",
    )

    class Meta:
        db_table = "sales_order_items"
        ordering = ["order", "position"]
        verbose_name = "Order Item"
        verbose_name_plural = "Order Items"
        constraints = [
            models.UniqueConstraint(fields=["order", "position"], name="order_item_position"),
            models.CheckConstraint(condition=Q(qty__gte=1), name="order_item_qty_positive"),
        ]
        indexes = [
            models.Index(fields=["sku"], name="orderitem_sku_idx"),
        ]

    def __str__(self):
        return f"{self.name} x {self.qty}"


class Return(models.Model):
    """
    Refund record for an order.

    ``order_id`` is a logical reference to Order.order_id (no foreign key)
    and is unique: an order can be returned at most once. Customer, items
    and total are snapshots copied from the order at return time.

    Status transitions:
    pending → completed
    pending → rejected
    """

    # Return reasons
    DAMAGED = "Damaged"
    WRONG_ITEM = "Wrong Item"
    CHANGED_MIND = "Customer Changed Mind"

    REASON_CHOICES = [
        (DAMAGED, "Damaged"),
        (WRONG_ITEM, "Wrong Item"),
        (CHANGED_MIND, "Customer Changed Mind"),
    ]

    # Refund types
    CASH = "Cash"
    CARD = "Card"
    UPI = "UPI"
    WALLET = "Wallet"

    TYPE_CHOICES = [
        (CASH, "Cash"),
        (CARD, "Card"),
        (UPI, "UPI"),
        (WALLET, "Wallet"),
    ]

    # Status choices for FSM
    PENDING = "Pending"
    COMPLETED = "Completed"
    REJECTED = "Rejected"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (COMPLETED, "Completed"),
        (REJECTED, "Rejected"),
    ]

    order_id = models.CharField(
        max_length=30,
        unique=True,
        help_text="Order number this return refunds",
    )

    invoice_number = models.CharField(
        max_length=30,
        blank=True,
        help_text="Invoice number copied from the order",
    )

    customer = models.JSONField(
        default=dict,
        help_text="Customer snapshot copied from the order",
    )

    items = models.JSONField(
        default=list,
        help_text="Line items snapshot copied from the order",
    )

    grand_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Refund amount (order grand total snapshot)",
    )

    return_reason = models.CharField(
        max_length=50,
        choices=REASON_CHOICES,
        help_text="Why the order was returned",
    )

    return_type = models.CharField(
        max_length=20,
        choices=TYPE_CHOICES,
        help_text="How the refund is paid out",
    )

    return_date = models.DateField(
        default=timezone.localdate,
        help_text="Date of the return",
    )

    return_time = models.TimeField(
        null=True,
        blank=True,
        help_text="Time of the return",
    )

    # FSM status field
    status = FSMField(
        default=PENDING,
        choices=STATUS_CHOICES,
        protected=True,
        help_text="Refund processing status",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="When the return was recorded",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the return was last updated",
    )

    class Meta:
        db_table = "sales_returns"
        ordering = ["-created_at", "-id"]
        verbose_name = "Return"
        verbose_name_plural = "Returns"
        indexes = [
            models.Index(fields=["status"], name="return_status_idx"),
        ]

    def __str__(self):
        return f"Return {self.order_id} ({self.status})"

    @transition(field=status, source=PENDING, target=COMPLETED)
    def complete(self):
        """Mark the refund as paid out."""

    @transition(field=status, source=PENDING, target=REJECTED)
    def reject(self):
        """Mark the refund as refused."""
