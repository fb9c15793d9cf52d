"""
Gold Ledger Root URL Configuration
Thin adapter routes only.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("gold.urls")),
]
