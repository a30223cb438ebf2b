from django.urls import path

from . import views

app_name = "reports"

urlpatterns = [
    path("daily/", views.daily_report, name="daily_report"),
    path("daily/export/", views.daily_report_export, name="daily_report_export"),
    path("spendings/", views.spendings, name="spendings"),
    path("spendings/<int:pk>/delete/", views.spending_delete, name="spending_delete"),
    path("counter-balance/", views.counter_balance, name="counter_balance"),
]
