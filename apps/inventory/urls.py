"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path("products/", views.product_list, name="product_list"),
    path("products/sku/<str:sku>/", views.product_by_sku, name="product_by_sku"),
]
