# downloads/services/manifest_resolver.py

"""
Reference token -> manifest.

Two deployments exist and exactly one is active per process, picked by
ZIPPER_MANIFEST_BACKEND:

  database  row in batch_downloads, keyed by token
  cache     Redis string at "<prefix><token>"

Both store the same JSON payload (see serializers.ManifestEntrySerializer).
"""

import logging

import redis
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError

from ..exceptions import ManifestError, ManifestNotFound
from ..manifest import decode_manifest
from ..models import BatchDownload

logger = logging.getLogger(__name__)

BACKEND_DATABASE = "database"
BACKEND_CACHE = "cache"


class ManifestResolver:
    """Abstract resolver API."""

    name = ""

    def resolve(self, token: str) -> tuple:
        """Return the manifest, or raise ManifestNotFound / ManifestError."""
        raise NotImplementedError

    def store(self, token: str, payload: str, ttl=None):
        raise NotImplementedError


class DatabaseManifestResolver(ManifestResolver):

    name = BACKEND_DATABASE

    def resolve(self, token: str) -> tuple:
        try:
            payload = (
                BatchDownload.objects
                .values_list("files_hash", flat=True)
                .get(key=token)
            )
        except BatchDownload.DoesNotExist:
            raise ManifestNotFound()
        except DatabaseError as e:
            logger.error("Manifest lookup failed for %r: %s", token, e)
            raise ManifestError() from e

        if not payload:
            raise ManifestNotFound()

        return decode_manifest(payload)

    def store(self, token: str, payload: str, ttl=None):
        BatchDownload.objects.update_or_create(
            key=token,
            defaults={"files_hash": payload},
        )


class CacheManifestResolver(ManifestResolver):

    name = BACKEND_CACHE

    def __init__(self, client, key_prefix: str = "zip:"):
        self.client = client
        self.key_prefix = key_prefix

    @classmethod
    def from_settings(cls):
        client = redis.Redis.from_url(
            settings.REDIS_URL,
            socket_timeout=5.0,
            socket_connect_timeout=5.0,
        )
        return cls(client, settings.ZIPPER_CACHE_KEY_PREFIX)

    def _key(self, token: str) -> str:
        return f"{self.key_prefix}{token}"

    def resolve(self, token: str) -> tuple:
        try:
            payload = self.client.get(self._key(token))
        except redis.RedisError as e:
            logger.error("Manifest lookup failed for %r: %s", token, e)
            raise ManifestError() from e

        if not payload:
            raise ManifestNotFound()

        return decode_manifest(payload)

    def store(self, token: str, payload: str, ttl=None):
        self.client.set(self._key(token), payload.encode("utf-8"), ex=ttl)


def get_manifest_resolver() -> ManifestResolver:
    backend = settings.ZIPPER_MANIFEST_BACKEND

    if backend == BACKEND_DATABASE:
        return DatabaseManifestResolver()
    if backend == BACKEND_CACHE:
        return CacheManifestResolver.from_settings()

    raise ImproperlyConfigured(
        f"ZIPPER_MANIFEST_BACKEND must be '{BACKEND_DATABASE}' or '{BACKEND_CACHE}', got {backend!r}"
    )
