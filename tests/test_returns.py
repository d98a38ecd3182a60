"""
Tests for the return engine.

- One return per order, including the race past the existence check
- Closed sets of reasons and refund types
- Refund status transitions
- Returns API endpoints
"""

from datetime import date, time
from decimal import Decimal

import pytest

from apps.core.exceptions import (
    DuplicateReturn,
    InvalidInput,
    InvalidReturnReason,
    InvalidReturnType,
    InvalidStatusTransition,
    OrderNotFound,
    ReturnNotFound,
)
from apps.inventory.models import Product
from apps.sales.models import Order, Return
from apps.sales.services import OrderService, ReturnService


@pytest.fixture
def order(ring, customer):
    return OrderService().create_order(
        customer, [{"sku": "RING-001", "qty": 1}], payment_mode="Cash"
    )


@pytest.fixture
def return_payload(order):
    return {
        "order_id": order.order_id,
        "invoice_number": order.invoice_number,
        "customer": order.customer,
        "items": [{"sku": "RING-001", "name": "Gold Ring", "price": 30900, "qty": 1}],
        "grand_total": order.grand_total,
        "reason": Return.DAMAGED,
        "return_type": Return.CASH,
    }


@pytest.mark.django_db
class TestCreateReturn:
    """Test return creation."""

    def test_create_return(self, return_payload, order):
        ret = ReturnService().create_return(**return_payload)

        assert ret.order_id == order.order_id
        assert ret.invoice_number == order.invoice_number
        assert ret.grand_total == Decimal("30900")
        assert ret.return_reason == "Damaged"
        assert ret.return_type == "Cash"
        assert ret.status == Return.PENDING
        assert ret.return_date is not None
        assert ret.return_time is not None

    def test_explicit_date_and_time(self, return_payload):
        ret = ReturnService().create_return(
            **return_payload, return_date=date(2024, 3, 1), return_time=time(14, 30)
        )

        saved = Return.objects.get(pk=ret.pk)
        assert saved.return_date == date(2024, 3, 1)
        assert saved.return_time == time(14, 30)

    def test_exists(self, return_payload, order):
        service = ReturnService()
        assert service.exists(order.order_id) is False

        service.create_return(**return_payload)

        assert service.exists(order.order_id) is True

    def test_second_return_rejected(self, return_payload):
        service = ReturnService()
        service.create_return(**return_payload)

        with pytest.raises(DuplicateReturn):
            service.create_return(**return_payload)

        assert Return.objects.count() == 1

    def test_race_past_existence_check(self, return_payload, monkeypatch):
        """A stale "does not exist" answer still cannot create a second return."""
        service = ReturnService()
        service.create_return(**return_payload)
        monkeypatch.setattr(ReturnService, "exists", lambda self, order_id: False)

        with pytest.raises(DuplicateReturn):
            service.create_return(**return_payload)

        assert Return.objects.count() == 1

    def test_does_not_touch_stock_or_order(self, return_payload, order):
        ReturnService().create_return(**return_payload)

        assert Product.objects.get(sku="RING-001").stock == 4
        assert Order.objects.get(pk=order.pk).grand_total == order.grand_total

    @pytest.mark.parametrize("reason", ["Broken", "damaged", ""])
    def test_invalid_reason(self, return_payload, reason):
        return_payload["reason"] = reason

        with pytest.raises(InvalidReturnReason):
            ReturnService().create_return(**return_payload)

    @pytest.mark.parametrize("return_type", ["Cheque", "Bank Transfer", None])
    def test_invalid_type(self, return_payload, return_type):
        return_payload["return_type"] = return_type

        with pytest.raises(InvalidReturnType):
            ReturnService().create_return(**return_payload)

    @pytest.mark.parametrize(
        "field,value",
        [("items", []), ("grand_total", "-5"), ("order_id", " ")],
    )
    def test_invalid_snapshot(self, return_payload, field, value):
        return_payload[field] = value

        with pytest.raises(InvalidInput):
            ReturnService().create_return(**return_payload)

        assert not Return.objects.exists()

    def test_create_from_stored_order(self, order):
        ret = ReturnService().create_return_for_order(
            order.order_id, Return.WRONG_ITEM, Return.UPI
        )

        assert ret.invoice_number == order.invoice_number
        assert ret.customer == order.customer
        assert ret.items == [
            {"sku": "RING-001", "name": "Gold Ring", "price": "30900.00", "qty": 1}
        ]
        assert ret.grand_total == order.grand_total

    def test_return_fully_discounted_order(self, ring, customer):
        order = OrderService().create_order(
            customer,
            [{"sku": "RING-001", "qty": 1, "unit_price": "100", "name": "Sample"}],
            payment_mode="Cash",
            discount="100",
        )

        ret = ReturnService().create_return_for_order(order.order_id, "Damaged", "Cash")

        assert ret.grand_total == Decimal("0")
        assert ReturnService().exists(order.order_id) is True

    def test_create_from_unknown_order(self, db):
        with pytest.raises(OrderNotFound):
            ReturnService().create_return_for_order("ORD-1999-0001", "Damaged", "Cash")


@pytest.mark.django_db
class TestReturnStatus:
    """Test refund status transitions."""

    def test_complete(self, return_payload):
        ret = ReturnService().create_return(**return_payload)

        ReturnService().update_status(ret.pk, "Completed")

        assert Return.objects.get(pk=ret.pk).status == Return.COMPLETED

    def test_reject_case_insensitive(self, return_payload):
        ret = ReturnService().create_return(**return_payload)

        updated = ReturnService().update_status(ret.pk, "rejected")

        assert updated.status == Return.REJECTED

    def test_terminal_states(self, return_payload):
        service = ReturnService()
        ret = service.create_return(**return_payload)
        service.update_status(ret.pk, "Completed")

        with pytest.raises(InvalidStatusTransition):
            service.update_status(ret.pk, "Rejected")

        assert Return.objects.get(pk=ret.pk).status == Return.COMPLETED

    def test_unknown_status(self, return_payload):
        ret = ReturnService().create_return(**return_payload)

        with pytest.raises(InvalidInput):
            ReturnService().update_status(ret.pk, "Pending")

    def test_unknown_return(self, db):
        with pytest.raises(ReturnNotFound):
            ReturnService().update_status(999, "Completed")

    def test_status_cannot_be_assigned_directly(self, return_payload):
        ret = ReturnService().create_return(**return_payload)

        with pytest.raises(AttributeError):
            ret.status = Return.COMPLETED


@pytest.mark.django_db
class TestReturnQueries:
    def test_list_returns_newest_first(self, ring, customer):
        orders = [
            OrderService().create_order(
                customer, [{"sku": "RING-001", "qty": 1}], payment_mode="Cash"
            )
            for _ in range(2)
        ]
        for order in orders:
            ReturnService().create_return_for_order(order.order_id, "Damaged", "Cash")

        listed = [r.order_id for r in ReturnService().list_returns()]

        assert listed == [orders[1].order_id, orders[0].order_id]

    def test_get_return_missing(self, db):
        with pytest.raises(ReturnNotFound):
            ReturnService().get_return(999)


@pytest.mark.django_db
class TestReturnAPI:
    """Test returns endpoints."""

    def payload(self, order):
        return {
            "orderId": order.order_id,
            "invoiceNumber": order.invoice_number,
            "customer": order.customer,
            "items": [{"sku": "RING-001", "name": "Gold Ring", "price": 30900, "qty": 1}],
            "grandTotal": "30900.00",
            "returnReason": "Customer Changed Mind",
            "returnType": "Wallet",
            "returnDate": "2024-03-01",
            "returnTime": "14:30:00",
        }

    def test_check_return(self, authenticated_client, order):
        client, user = authenticated_client

        response = client.get(f"/api/returns/check/{order.order_id}/")

        assert response.status_code == 200
        assert response.data == {"success": True, "exists": False}

    def test_create_return(self, authenticated_client, order):
        client, user = authenticated_client

        response = client.post("/api/returns/", self.payload(order), format="json")

        assert response.status_code == 201
        ret = response.data["return"]
        assert ret["orderId"] == order.order_id
        assert ret["returnReason"] == "Customer Changed Mind"
        assert ret["returnDate"] == "2024-03-01"
        assert ret["returnTime"] == "14:30:00"
        assert ret["status"] == "Pending"

        check = client.get(f"/api/returns/check/{order.order_id}/")
        assert check.data["exists"] is True

    def test_create_return_from_order_id_only(self, authenticated_client, order):
        client, user = authenticated_client

        response = client.post(
            "/api/returns/",
            {"orderId": order.order_id, "returnReason": "Damaged", "returnType": "Card"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["return"]["grandTotal"] == "30900.00"

    def test_duplicate_return(self, authenticated_client, order):
        client, user = authenticated_client
        client.post("/api/returns/", self.payload(order), format="json")

        response = client.post("/api/returns/", self.payload(order), format="json")

        assert response.status_code == 409
        assert response.data == {
            "success": False,
            "message": f"Return already exists for order {order.order_id}",
        }

    def test_invalid_reason(self, authenticated_client, order):
        client, user = authenticated_client
        payload = self.payload(order)
        payload["returnReason"] = "Too shiny"

        response = client.post("/api/returns/", payload, format="json")

        assert response.status_code == 400
        assert response.data == {"success": False, "message": "Invalid return reason 'Too shiny'"}

    def test_list_and_detail(self, authenticated_client, order):
        client, user = authenticated_client
        created = client.post("/api/returns/", self.payload(order), format="json").data["return"]

        listed = client.get("/api/returns/")
        detail = client.get(f"/api/returns/{created['id']}/")

        assert [r["orderId"] for r in listed.data["returns"]] == [order.order_id]
        assert detail.status_code == 200
        assert detail.data["return"]["invoiceNumber"] == order.invoice_number

    def test_detail_missing(self, authenticated_client):
        client, user = authenticated_client

        response = client.get("/api/returns/999/")

        assert response.status_code == 404
        assert response.data["success"] is False

    def test_update_status(self, authenticated_client, order):
        client, user = authenticated_client
        created = client.post("/api/returns/", self.payload(order), format="json").data["return"]
        url = f"/api/returns/{created['id']}/status/"

        response = client.patch(url, {"status": "Completed"}, format="json")
        again = client.patch(url, {"status": "Rejected"}, format="json")

        assert response.status_code == 200
        assert response.data["return"]["status"] == "Completed"
        assert again.status_code == 409
        assert again.data["success"] is False

    def test_wrong_method_uses_envelope(self, authenticated_client):
        client, user = authenticated_client

        response = client.delete("/api/returns/")

        assert response.status_code == 405
        assert response.data["success"] is False
        assert "DELETE" in response.data["message"]
