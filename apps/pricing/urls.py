"""
URL patterns for pricing app.
"""

from django.urls import path

from apps.pricing import views

app_name = "pricing"

urlpatterns = [
    path("rates/", views.rate_list, name="rate_list"),
    path("rates/<str:metal>/", views.rate_update, name="rate_update"),
    path("pricing/quote/", views.price_quote, name="price_quote"),
]
