# downloads/manifest.py

import json
import logging
from dataclasses import dataclass

from .exceptions import ManifestError
from .serializers import ManifestEntrySerializer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManifestEntry:
    file_name: str = ""
    folder: str = ""
    remote_path: str = ""
    file_id: int = 0
    project_id: int = 0
    project_name: str = ""
    modified: str = ""

    @classmethod
    def from_wire(cls, data: dict) -> "ManifestEntry":
        return cls(
            file_name=data.get("FileName") or "",
            folder=data.get("Folder") or "",
            remote_path=data.get("S3Path") or "",
            file_id=data.get("FileId") or 0,
            project_id=data.get("ProjectId") or 0,
            project_name=data.get("ProjectName") or "",
            modified=data.get("Modified") or "",
        )


def decode_manifest(payload) -> tuple:
    """
    Decode the stored JSON array into an ordered tuple of ManifestEntry.

    Raises ManifestError when the payload is not a JSON array of entry
    objects. An empty array is a valid (empty) manifest.
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestError("Error decoding batch download.") from e

    try:
        data = json.loads(payload)
    except ValueError as e:
        logger.warning("Manifest is not valid JSON: %s", e)
        raise ManifestError("Error decoding batch download.") from e

    serializer = ManifestEntrySerializer(data=data, many=True)
    if not serializer.is_valid():
        logger.warning("Manifest rejected: %s", serializer.errors)
        raise ManifestError("Error decoding batch download.")

    return tuple(ManifestEntry.from_wire(item) for item in serializer.validated_data)
