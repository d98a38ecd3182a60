"""
Pytest configuration and fixtures for the jewellery POS back end.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def authenticated_client(api_client, django_user_model):
    """
    Fixture for authenticated API client.
    """
    user = django_user_model.objects.create_user(
        username="cashier", email="cashier@example.com", password="testpass123"
    )
    api_client.force_authenticate(user=user)
    return api_client, user


@pytest.fixture
def staff_client(api_client, django_user_model):
    """
    Fixture for API client authenticated as a staff user (rate updates).
    """
    user = django_user_model.objects.create_user(
        username="manager", email="manager@example.com", password="testpass123", is_staff=True
    )
    api_client.force_authenticate(user=user)
    return api_client, user


@pytest.fixture
def gold_rate(db):
    """Gold 22K at 6000 per gram."""
    from apps.pricing.models import MetalRate

    return MetalRate.objects.create(
        metal=MetalRate.GOLD, purity=MetalRate.PURITY_22K, price_per_gram=Decimal("6000.00")
    )


@pytest.fixture
def silver_rate(db):
    """Silver at 75 per gram."""
    from apps.pricing.models import MetalRate

    return MetalRate.objects.create(
        metal=MetalRate.SILVER, purity="", price_per_gram=Decimal("75.00")
    )


@pytest.fixture
def ring(gold_rate):
    """
    RING-001: 5 g of 22K gold, 2% wastage, 300 making charge, 5 in stock.

    Priced through the catalog service: 30000 + 600 + 300 = 30900.
    """
    from apps.inventory.models import Product
    from apps.inventory.services import CatalogService

    product = Product(
        sku="RING-001",
        name="Gold Ring",
        category="Rings",
        metal="gold",
        purity="22K",
        weight_grams=Decimal("5.000"),
        wastage_percent=Decimal("2.00"),
        making_charge=Decimal("300.00"),
        stone_price=Decimal("0.00"),
        stock=5,
    )
    return CatalogService().save_product(product)


@pytest.fixture
def anklet(silver_rate):
    """Silver anklet, 20 g with 200 making charge: 1500 + 200 = 1700."""
    from apps.inventory.models import Product
    from apps.inventory.services import CatalogService

    product = Product(
        sku="ANK-001",
        name="Silver Anklet",
        category="Anklets",
        metal="silver",
        weight_grams=Decimal("20.000"),
        making_charge=Decimal("200.00"),
        stock=10,
    )
    return CatalogService().save_product(product)


@pytest.fixture
def customer():
    return {"name": "Asha Rao", "phone": "9876543210", "email": "asha@example.com"}
