"""
URL configuration for the zipper project.

    /            batch download as a ZIP (?ref=<token>&downloadas=<name>)
    /healthz/    liveness
    /admin/      batch download rows
"""
# zipper/urls.py
from django.contrib import admin
from django.urls import path, include
from .healthcheck import healthcheck

urlpatterns = [
    path('admin/', admin.site.urls),

    # Healthcheck endpoint
    path('healthz/', healthcheck, name='healthcheck'),

    # Batch download endpoint
    path('', include('downloads.urls')),
]
