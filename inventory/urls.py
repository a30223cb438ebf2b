from django.urls import path
from . import views

app_name = "inventory"

urlpatterns = [
    path("", views.gateway, name="gateway"),
    path("stock/", views.inventory_list, name="inventory_list"),
    path("stock/movements/", views.stock_movements, name="stock_movements"),
    path("products/", views.products_list, name="products_list"),
    path("products/new/", views.product_create, name="product_create"),
    path("products/<int:pk>/edit/", views.product_edit, name="product_edit"),
    path("products/<int:pk>/delete/", views.product_delete, name="product_delete"),
    path("products/<int:pk>/stock/", views.stock_edit, name="stock_edit"),
    path("products/<int:pk>/transfer/", views.stock_transfer, name="stock_transfer"),
    # Daily godown -> counter transfer
    path("daily-transfer/", views.daily_transfer, name="daily_transfer"),
    path("daily-transfer/history/", views.transfer_history, name="transfer_history"),
    path("daily-transfer/<int:pk>/export/", views.transfer_export, name="transfer_export"),
]
