from django.urls import path

from . import views

app_name = "billing"

urlpatterns = [
    path("sales/", views.sales_list, name="sales_list"),
    path("sales/new/", views.sale_create, name="sale_create"),
    path("sales/<int:pk>/", views.sale_detail, name="sale_detail"),
    path("pending/", views.pending_bills, name="pending_bills"),
    path("pending/<int:pending_id>/edit/", views.sale_create, name="pending_bill_edit"),
    path("pending/<int:pk>/settle/", views.pending_bill_settle, name="pending_bill_settle"),
    path("pending/<int:pk>/delete/", views.pending_bill_delete, name="pending_bill_delete"),
    path("tables/", views.tables, name="tables"),
    path("tables/new/", views.table_form, name="table_create"),
    path("tables/<int:pk>/edit/", views.table_form, name="table_edit"),
    path("tables/<int:pk>/delete/", views.table_delete, name="table_delete"),
]
