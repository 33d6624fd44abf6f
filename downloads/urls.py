# downloads/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path("", views.download_zip, name="download-zip"),
]
