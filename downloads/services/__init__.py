# downloads/services/__init__.py

from functools import lru_cache

from ..blob_storage import BlobStorage
from .manifest_resolver import get_manifest_resolver
from .zip_service import ZipStreamService


@lru_cache(maxsize=None)
def get_zip_service() -> ZipStreamService:
    """Process-wide service, built on first use."""
    return ZipStreamService(
        resolver=get_manifest_resolver(),
        storage=BlobStorage.from_settings(),
    )
