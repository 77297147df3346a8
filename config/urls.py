"""
Root URL configuration.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/portfolio-positions/", include("apps.analytics.urls")),
    path("api/portfolio-positions/", include("apps.positions.urls")),
]
