from django.conf import settings
from django.http import JsonResponse


def healthcheck(request):
    return JsonResponse({
        "status": "ok",
        "service": "s3zipper",
        "environment": settings.APP_ENV,
        "manifest_backend": settings.ZIPPER_MANIFEST_BACKEND,
    }, status=200)
