"""
Serializers for sales app.

Field names follow the billing UI contract (camelCase).
"""

from django.utils import timezone

from rest_framework import serializers

from .models import Order, OrderItem, Return


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item as shown on the invoice."""

    price = serializers.DecimalField(source="unit_price", max_digits=12, decimal_places=2)
    lineTotal = serializers.DecimalField(source="line_total", max_digits=12, decimal_places=2)

    class Meta:
        model = OrderItem
        fields = ["sku", "name", "price", "qty", "lineTotal"]


class OrderSerializer(serializers.ModelSerializer):
    """Serializer for order detail and history views."""

    orderId = serializers.CharField(source="order_id")
    invoiceNumber = serializers.CharField(source="invoice_number")
    items = OrderItemSerializer(many=True, read_only=True)
    paymentMode = serializers.CharField(source="payment_mode")
    paymentMethods = serializers.JSONField(source="payment_methods")
    grandTotal = serializers.DecimalField(source="grand_total", max_digits=12, decimal_places=2)
    date = serializers.SerializerMethodField()
    time = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at")
    isReturned = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "orderId",
            "invoiceNumber",
            "customer",
            "items",
            "paymentMode",
            "paymentMethods",
            "subtotal",
            "discount",
            "tax",
            "grandTotal",
            "date",
            "time",
            "createdAt",
            "isReturned",
        ]
        read_only_fields = fields

    def get_date(self, obj):
        return timezone.localtime(obj.created_at).date().isoformat()

    def get_time(self, obj):
        return timezone.localtime(obj.created_at).strftime("%H:%M:%S")

    def get_isReturned(self, obj):
        # Annotated by OrderService.list_orders; freshly created orders have none.
        return getattr(obj, "is_returned", False)


class CustomerSnapshotSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)


class OrderLineSerializer(serializers.Serializer):
    """Cart line posted by the billing screen."""

    sku = serializers.CharField(max_length=50)
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    qty = serializers.IntegerField(min_value=1)


class PaymentSplitSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class OrderCreateSerializer(serializers.Serializer):
    """
    Body of POST orders.

    Client-side subtotal is ignored; grandTotal is only compared against
    the server total.
    """

    customer = CustomerSnapshotSerializer()
    items = OrderLineSerializer(many=True, allow_empty=False)
    paymentMode = serializers.ChoiceField(
        choices=Order.PAYMENT_METHOD_CHOICES, required=False, allow_blank=True
    )
    paymentMethods = PaymentSplitSerializer(many=True, required=False)
    discount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
    tax = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
    grandTotal = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )

    def validate(self, attrs):
        if not attrs.get("paymentMode") and not attrs.get("paymentMethods"):
            raise serializers.ValidationError("Payment mode is required")
        return attrs

    def to_service_kwargs(self):
        data = self.validated_data
        return {
            "customer": dict(data["customer"]),
            "line_items": [
                {
                    "sku": line["sku"],
                    "name": line.get("name", ""),
                    "unit_price": line.get("price"),
                    "qty": line["qty"],
                }
                for line in data["items"]
            ],
            "payment_mode": data.get("paymentMode") or None,
            "payment_methods": [dict(split) for split in data.get("paymentMethods", [])],
            "discount": data["discount"],
            "tax": data["tax"],
            "client_grand_total": data.get("grandTotal"),
        }


class ReturnSerializer(serializers.ModelSerializer):
    """Return record as listed on the returns page."""

    orderId = serializers.CharField(source="order_id")
    invoiceNumber = serializers.CharField(source="invoice_number")
    grandTotal = serializers.DecimalField(source="grand_total", max_digits=12, decimal_places=2)
    returnReason = serializers.CharField(source="return_reason")
    returnType = serializers.CharField(source="return_type")
    returnDate = serializers.DateField(source="return_date")
    returnTime = serializers.TimeField(source="return_time", format="%H:%M:%S")
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = Return
        fields = [
            "id",
            "orderId",
            "invoiceNumber",
            "customer",
            "items",
            "grandTotal",
            "returnReason",
            "returnType",
            "returnDate",
            "returnTime",
            "status",
            "createdAt",
        ]
        read_only_fields = fields


class ReturnCreateSerializer(serializers.Serializer):
    """
    Body of POST returns.

    Reason and type are validated by the return engine so that unknown
    values surface with their specific error message. When only the order
    id is posted, the snapshot is taken from the stored order.
    """

    orderId = serializers.CharField(max_length=30)
    invoiceNumber = serializers.CharField(max_length=30, required=False, allow_blank=True)
    customer = serializers.JSONField(required=False)
    items = serializers.ListField(child=serializers.DictField(), required=False)
    grandTotal = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    returnReason = serializers.CharField(max_length=50)
    returnType = serializers.CharField(max_length=20)
    returnDate = serializers.DateField(required=False, allow_null=True)
    returnTime = serializers.TimeField(required=False, allow_null=True)

    def has_snapshot(self):
        return "items" in self.validated_data

    def to_service_kwargs(self):
        data = self.validated_data
        return {
            "order_id": data["orderId"],
            "invoice_number": data.get("invoiceNumber", ""),
            "customer": data.get("customer") or {},
            "items": data.get("items", []),
            "grand_total": data.get("grandTotal"),
            "reason": data["returnReason"],
            "return_type": data["returnType"],
            "return_date": data.get("returnDate"),
            "return_time": data.get("returnTime"),
        }


class ReturnStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=20)
