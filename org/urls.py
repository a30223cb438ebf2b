from django.urls import path
from .views import bar_profile

app_name = "org"

urlpatterns = [
    path("settings/", bar_profile, name="bar_profile"),
]
