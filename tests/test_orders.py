"""
Tests for the order engine.

- Sequential order and invoice numbers
- Server-side totals and the grand total identity
- Stock decrement and all-or-nothing rollback
- Payment validation
- Orders API endpoints
"""

import re
from decimal import Decimal

from django.db import IntegrityError
from django.utils import timezone

import pytest

from apps.core.exceptions import (
    InsufficientStock,
    InvalidInput,
    OrderNotFound,
    OrderPersistenceError,
    ProductNotFound,
)
from apps.core.models import IdentifierSequence
from apps.inventory.models import Product
from apps.inventory.services import StockService
from apps.sales.models import Order, OrderItem
from apps.sales.services import OrderService, ReturnService


def place_order(customer, items, **kwargs):
    kwargs.setdefault("payment_mode", "Cash")
    return OrderService().create_order(customer, items, **kwargs)


@pytest.mark.django_db
class TestCreateOrder:
    """Test order creation."""

    def test_ring_order_end_to_end(self, ring, customer):
        """RING-001 priced at 30900; selling two takes stock from 5 to 3."""
        assert ring.price == 30900

        order = place_order(customer, [{"sku": "RING-001", "qty": 2}])

        year = timezone.localdate().year
        assert re.fullmatch(rf"ORD-{year}-\d{{4}}", order.order_id)
        assert order.invoice_number == f"INV/{year}/0001"
        assert order.subtotal == Decimal("61800")
        assert order.grand_total == Decimal("61800")
        assert Product.objects.get(sku="RING-001").stock == 3

        item = order.items.get()
        assert item.name == "Gold Ring"
        assert item.unit_price == Decimal("30900")
        assert item.qty == 2
        assert item.line_total == Decimal("61800")

    def test_identifiers_are_consecutive(self, ring, customer):
        first = place_order(customer, [{"sku": "RING-001", "qty": 1}])
        second = place_order(customer, [{"sku": "RING-001", "qty": 1}])

        assert first.order_id.endswith("-0001")
        assert second.order_id.endswith("-0002")
        assert second.invoice_number.endswith("/0002")

    def test_grand_total_identity(self, ring, anklet, customer):
        place_order(
            customer,
            [{"sku": "RING-001", "qty": 2}, {"sku": "ANK-001", "qty": 1}],
            discount="800",
            tax="1500.50",
        )
        place_order(customer, [{"sku": "ANK-001", "qty": 3}], tax=0, discount="100")

        for order in Order.objects.prefetch_related("items"):
            assert order.grand_total == order.subtotal - order.discount + order.tax
            assert order.subtotal == sum(i.unit_price * i.qty for i in order.items.all())

        first = Order.objects.order_by("id").first()
        # 61800 + 1700 - 800 + 1500.50
        assert first.grand_total == Decimal("64200.50")

    def test_paise_amounts_satisfy_total_identity(self, ring, customer):
        order = place_order(
            customer,
            [{"sku": "RING-001", "qty": 1, "unit_price": "0.30", "name": "Gift wrap"}],
            discount="0.10",
        )

        saved = Order.objects.get(pk=order.pk)
        assert saved.grand_total == Decimal("0.20")
        assert saved.subtotal - saved.discount == Decimal("0.20")

    def test_client_totals_ignored(self, ring, customer, caplog):
        order = place_order(
            customer, [{"sku": "RING-001", "qty": 1}], client_grand_total="100"
        )

        assert order.grand_total == Decimal("30900")
        assert "differs from computed" in caplog.text

    def test_explicit_price_and_name(self, ring, customer):
        order = place_order(
            customer, [{"sku": "RING-001", "qty": 1, "unit_price": "30000", "name": "Promo Ring"}]
        )

        item = order.items.get()
        assert item.unit_price == Decimal("30000")
        assert item.name == "Promo Ring"
        assert order.subtotal == Decimal("30000")

    def test_items_keep_cart_order(self, ring, anklet, customer):
        order = place_order(
            customer, [{"sku": "ANK-001", "qty": 1}, {"sku": "RING-001", "qty": 1}]
        )

        assert [item.sku for item in order.items.all()] == ["ANK-001", "RING-001"]

    def test_unknown_sku_rolls_back_everything(self, ring, customer):
        with pytest.raises(ProductNotFound):
            place_order(
                customer,
                [
                    {"sku": "RING-001", "qty": 1},
                    {"sku": "GHOST-1", "qty": 1, "unit_price": "100", "name": "Ghost"},
                ],
            )

        assert not Order.objects.exists()
        assert Product.objects.get(sku="RING-001").stock == 5
        assert not IdentifierSequence.objects.filter(key="ORD").exists()

    def test_unknown_sku_without_price(self, ring, customer):
        with pytest.raises(ProductNotFound):
            place_order(customer, [{"sku": "GHOST-1", "qty": 1}])

        assert not Order.objects.exists()

    def test_negative_stock_allowed_by_default(self, ring, customer):
        place_order(customer, [{"sku": "RING-001", "qty": 7}])

        assert Product.objects.get(sku="RING-001").stock == -2

    def test_oversell_rejected_when_disallowed(self, ring, anklet, customer):
        service = OrderService(stock=StockService(allow_negative=False))

        with pytest.raises(InsufficientStock):
            service.create_order(
                customer,
                [{"sku": "ANK-001", "qty": 1}, {"sku": "RING-001", "qty": 6}],
                payment_mode="Card",
            )

        assert not Order.objects.exists()
        assert Product.objects.get(sku="ANK-001").stock == 10
        assert Product.objects.get(sku="RING-001").stock == 5

    def test_identifier_collision(self, ring, customer):
        year = timezone.localdate().year
        Order.objects.create(
            order_id=f"ORD-{year}-0001",
            invoice_number="LEGACY-1",
            subtotal=0,
            grand_total=0,
        )

        with pytest.raises(OrderPersistenceError):
            place_order(customer, [{"sku": "RING-001", "qty": 1}])

        assert Product.objects.get(sku="RING-001").stock == 5
        assert Order.objects.count() == 1

    def test_other_integrity_errors_are_not_collisions(self, ring, customer, monkeypatch):
        def fail(*args, **kwargs):
            raise IntegrityError("order_item_position")

        monkeypatch.setattr(OrderItem.objects, "bulk_create", fail)

        with pytest.raises(IntegrityError):
            place_order(customer, [{"sku": "RING-001", "qty": 1}])

        assert not Order.objects.exists()

    def test_yearly_sequence(self, settings, ring, customer):
        settings.ORDER_SEQUENCE_RESET_YEARLY = True
        year = timezone.localdate().year

        order = place_order(customer, [{"sku": "RING-001", "qty": 1}])

        assert order.order_id == f"ORD-{year}-0001"
        assert IdentifierSequence.objects.filter(key=f"ORD-{year}").exists()

    def test_custom_prefixes(self, settings, ring, customer):
        settings.IDENTIFIER_PREFIXES = {"order": ("SO", "-"), "invoice": ("BILL", "/")}

        order = place_order(customer, [{"sku": "RING-001", "qty": 1}])

        assert order.order_id.startswith("SO-")
        assert order.invoice_number.startswith("BILL/")

    def test_split_payment(self, ring, customer):
        order = place_order(
            customer,
            [{"sku": "RING-001", "qty": 2}],
            payment_mode=None,
            payment_methods=[
                {"method": "Cash", "amount": "30000"},
                {"method": "UPI", "amount": "31800"},
            ],
        )

        assert order.payment_methods == [
            {"method": "Cash", "amount": "30000.00"},
            {"method": "UPI", "amount": "31800.00"},
        ]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"payment_mode": None},
            {"payment_mode": "Cheque"},
            {"payment_mode": None, "payment_methods": [{"method": "Cash", "amount": "100"}]},
            {"payment_mode": None, "payment_methods": [{"method": "Gold", "amount": "30900"}]},
        ],
    )
    def test_invalid_payment(self, ring, customer, kwargs):
        with pytest.raises(InvalidInput):
            place_order(customer, [{"sku": "RING-001", "qty": 1}], **kwargs)

        assert Product.objects.get(sku="RING-001").stock == 5

    @pytest.mark.parametrize(
        "items,kwargs",
        [
            ([], {}),
            ([{"sku": "RING-001", "qty": 0}], {}),
            ([{"sku": "RING-001", "qty": "1"}], {}),
            ([{"sku": "", "qty": 1}], {}),
            ([{"sku": "RING-001", "qty": 1, "unit_price": "-1"}], {}),
            ([{"sku": "RING-001", "qty": 1}], {"discount": "-5"}),
            ([{"sku": "RING-001", "qty": 1}], {"tax": "-5"}),
            ([{"sku": "RING-001", "qty": 1}], {"discount": "40000"}),
        ],
    )
    def test_invalid_cart(self, ring, customer, items, kwargs):
        with pytest.raises(InvalidInput):
            place_order(customer, items, **kwargs)

        assert not Order.objects.exists()
        assert not IdentifierSequence.objects.exists()

    @pytest.mark.parametrize("bad_customer", [None, {}, {"name": "  "}, "Asha"])
    def test_customer_name_required(self, ring, bad_customer):
        with pytest.raises(InvalidInput):
            place_order(bad_customer, [{"sku": "RING-001", "qty": 1}])

    def test_orders_are_immutable(self, ring, customer):
        order = place_order(customer, [{"sku": "RING-001", "qty": 1}])
        order.discount = Decimal("100")

        with pytest.raises(ValueError):
            order.save()


@pytest.mark.django_db
class TestOrderQueries:
    """Test order history and lookup."""

    def test_list_orders_newest_first(self, ring, customer):
        first = place_order(customer, [{"sku": "RING-001", "qty": 1}])
        second = place_order(customer, [{"sku": "RING-001", "qty": 1}])

        orders = list(OrderService().list_orders())

        assert [o.order_id for o in orders] == [second.order_id, first.order_id]

    def test_list_orders_marks_returned(self, ring, customer):
        first = place_order(customer, [{"sku": "RING-001", "qty": 1}])
        second = place_order(customer, [{"sku": "RING-001", "qty": 1}])
        ReturnService().create_return_for_order(first.order_id, "Damaged", "Cash")

        returned = {o.order_id: o.is_returned for o in OrderService().list_orders()}

        assert returned == {first.order_id: True, second.order_id: False}

    def test_get_order(self, ring, customer):
        order = place_order(customer, [{"sku": "RING-001", "qty": 1}])

        assert OrderService().get_order(order.order_id).pk == order.pk

    def test_get_order_missing(self, db):
        with pytest.raises(OrderNotFound):
            OrderService().get_order("ORD-1999-0001")


@pytest.mark.django_db
class TestOrderAPI:
    """Test orders endpoints."""

    def test_create_order(self, authenticated_client, ring, customer):
        client, user = authenticated_client

        response = client.post(
            "/api/orders/",
            {
                "customer": customer,
                "items": [{"sku": "RING-001", "qty": 2}],
                "paymentMode": "UPI",
                "discount": "0",
                "tax": "0",
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.data["success"] is True
        order = response.data["order"]
        assert order["orderId"].startswith(f"ORD-{timezone.localdate().year}-")
        assert order["customer"] == customer
        assert order["subtotal"] == "61800.00"
        assert order["grandTotal"] == "61800.00"
        assert order["items"] == [
            {
                "sku": "RING-001",
                "name": "Gold Ring",
                "price": "30900.00",
                "qty": 2,
                "lineTotal": "61800.00",
            }
        ]
        assert order["isReturned"] is False
        assert Product.objects.get(sku="RING-001").stock == 3

    def test_create_order_unknown_sku(self, authenticated_client, customer):
        client, user = authenticated_client

        response = client.post(
            "/api/orders/",
            {"customer": customer, "items": [{"sku": "NOPE", "qty": 1}], "paymentMode": "Cash"},
            format="json",
        )

        assert response.status_code == 404
        assert response.data == {"success": False, "message": "Product NOPE not found"}

    def test_create_order_payment_mismatch(self, authenticated_client, ring, customer):
        client, user = authenticated_client

        response = client.post(
            "/api/orders/",
            {
                "customer": customer,
                "items": [{"sku": "RING-001", "qty": 1}],
                "paymentMethods": [{"method": "Cash", "amount": "1000"}],
            },
            format="json",
        )

        assert response.status_code == 400
        assert response.data["success"] is False
        assert "does not match" in response.data["message"]

    def test_create_order_invalid_body(self, authenticated_client, customer):
        client, user = authenticated_client

        response = client.post(
            "/api/orders/", {"customer": customer, "items": []}, format="json"
        )

        assert response.status_code == 400
        assert response.data["success"] is False
        assert "items" in response.data["errors"]

    def test_list_orders(self, authenticated_client, ring, customer):
        client, user = authenticated_client
        order = place_order(customer, [{"sku": "RING-001", "qty": 1}])

        response = client.get("/api/orders/")

        assert response.status_code == 200
        assert [o["orderId"] for o in response.data["orders"]] == [order.order_id]

    def test_order_detail(self, authenticated_client, ring, customer):
        client, user = authenticated_client
        order = place_order(customer, [{"sku": "RING-001", "qty": 1}])

        response = client.get(f"/api/orders/{order.order_id}/")

        assert response.status_code == 200
        assert response.data["order"]["invoiceNumber"] == order.invoice_number

    def test_order_detail_missing(self, authenticated_client):
        client, user = authenticated_client

        response = client.get("/api/orders/ORD-1999-0001/")

        assert response.status_code == 404
        assert response.data["success"] is False

    def test_orders_require_login(self, api_client):
        response = api_client.get("/api/orders/")

        assert response.status_code in (401, 403)
