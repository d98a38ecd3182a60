"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    # Orders
    path("orders/", views.order_list, name="order_list"),
    path("orders/<str:order_id>/", views.order_detail, name="order_detail"),
    # Returns
    path("returns/", views.return_list, name="return_list"),
    path("returns/check/<str:order_id>/", views.return_check, name="return_check"),
    path("returns/<int:pk>/", views.return_detail, name="return_detail"),
    path("returns/<int:pk>/status/", views.return_status, name="return_status"),
]
