# zipper/settings.py
import os
from pathlib import Path

import dj_database_url

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-key-do-not-use")
DEBUG = os.environ.get("DJANGO_DEBUG", "False") == "True"

ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "*").split(",")

APP_ENV = os.environ.get("APP_ENV", "development")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    "rest_framework",
    "corsheaders",

    "downloads",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "whitenoise.middleware.WhiteNoiseMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "zipper.urls"
WSGI_APPLICATION = "zipper.wsgi.application"

# DB: batch_downloads lives in Postgres when DATABASE_URL is set
DATABASES = {
    "default": dj_database_url.config(
        default=f"sqlite:///{BASE_DIR/'db.sqlite3'}",
        conn_max_age=600,
        ssl_require=False
    )
}

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"
STORAGES = {
    "default": {
        "BACKEND": "django.core.files.storage.FileSystemStorage",
    },
    "staticfiles": {
        "BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage",
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

CORS_ALLOW_ALL_ORIGINS = True
CORS_EXPOSE_HEADERS = ["Content-Disposition"]

# =====================================================
# Blob storage (S3, or S3 compatible with AWS_ENDPOINT_URL)
# =====================================================

AWS_ACCESS_KEY_ID = os.environ.get("AWS_ACCESS_KEY_ID", "")
AWS_SECRET_ACCESS_KEY = os.environ.get("AWS_SECRET_ACCESS_KEY", "")
AWS_REGION = os.environ.get("AWS_REGION", "us-east-1")
AWS_BUCKET = os.environ.get("AWS_BUCKET", "")
AWS_ENDPOINT_URL = os.environ.get("AWS_ENDPOINT_URL", "")

# Seconds; unset keeps botocore defaults
ZIPPER_FETCH_TIMEOUT = float(os.environ["ZIPPER_FETCH_TIMEOUT"]) if os.environ.get("ZIPPER_FETCH_TIMEOUT") else None

# =====================================================
# Manifest backend: "database" or "cache"
# =====================================================

ZIPPER_MANIFEST_BACKEND = os.environ.get("ZIPPER_MANIFEST_BACKEND", "database")
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
ZIPPER_CACHE_KEY_PREFIX = os.environ.get("ZIPPER_CACHE_KEY_PREFIX", "zip:")

# =====================================================
# Logging
# =====================================================

ZIPPER_LOG_LEVEL = os.environ.get("ZIPPER_LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": "WARNING",
    },
    "loggers": {
        "downloads": {
            "handlers": ["console"],
            "level": ZIPPER_LOG_LEVEL,
            "propagate": False,
        },
        "zipper": {
            "handlers": ["console"],
            "level": ZIPPER_LOG_LEVEL,
            "propagate": False,
        },
    },
}
