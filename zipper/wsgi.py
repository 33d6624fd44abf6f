"""
WSGI config for the zipper project.

It exposes the WSGI callable as a module-level variable named ``application``.
The blob store client and manifest backend are built here, once, before
the first request is served.
"""

import logging
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "zipper.settings")

application = get_wsgi_application()

from django.conf import settings  # noqa: E402
from downloads.services import get_zip_service  # noqa: E402

get_zip_service()

logging.getLogger("zipper").info(
    "Serving environment=%s manifest_backend=%s",
    settings.APP_ENV,
    settings.ZIPPER_MANIFEST_BACKEND,
)
