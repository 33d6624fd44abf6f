# downloads/archive.py

"""
Streaming ZIP output.

zipfile already knows how to write to a sink it cannot seek: every entry
gets a data descriptor after its body instead of sizes in the local
header. ChunkSink is that sink, it only collects bytes until the caller
drains them into the HTTP response.
"""

import logging
import re
import zipfile
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)

UTF8_NAME_FLAG = 0x800
COPY_BUFFER_SIZE = 64 * 1024

MODIFIED_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
MODIFIED_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}Z")

# DOS timestamps cover 1980..2107
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
ZIP_LAST = (2107, 12, 31, 23, 59, 58)


def parse_modified(raw: str) -> Optional[datetime]:
    """
    Parse YYYY-MM-DDTHH:MM:SSZ. No fractions, no offsets.
    Returns None (and logs) when the value does not match.
    """
    if not raw:
        return None

    if MODIFIED_PATTERN.fullmatch(raw):
        try:
            return datetime.strptime(raw, MODIFIED_FORMAT)
        except ValueError:
            pass

    logger.warning("Ignoring modification time %r: expected %s", raw, MODIFIED_FORMAT)
    return None


def zip_date_time(modified: Optional[datetime]) -> tuple:
    if modified is None:
        return ZIP_EPOCH
    stamp = modified.timetuple()[:6]
    if stamp < ZIP_EPOCH:
        return ZIP_EPOCH
    if stamp > ZIP_LAST:
        return ZIP_LAST
    return stamp


class Utf8ZipInfo(zipfile.ZipInfo):
    """
    ZipInfo that always carries the UTF-8 name flag.

    zipfile only sets it for non-ASCII names and clears flag_bits when an
    entry is opened for writing, so it is applied where names are encoded.
    """

    # Private hook, present with this signature in CPython 3.8 through 3.13.
    # ZipStreamWriterTests checks the flag in the raw local headers.
    def _encodeFilenameFlags(self):
        return self.filename.encode("utf-8"), self.flag_bits | UTF8_NAME_FLAG


class ChunkSink:
    """Write-only, non-seekable buffer between zipfile and the response."""

    def __init__(self):
        self._chunks = []
        self.closed = False

    def write(self, data) -> int:
        if self.closed:
            raise ValueError("write to closed sink")
        if data:
            self._chunks.append(bytes(data))
        return len(data)

    def flush(self):
        pass

    def drain(self) -> bytes:
        data = b"".join(self._chunks)
        self._chunks.clear()
        return data

    def close(self):
        self.closed = True
        self._chunks.clear()


class ZipStreamWriter:
    """
    Append-only ZIP writer bound to one sink for one request.

        writer = ZipStreamWriter(sink)
        with writer.open_entry("a/b.txt") as dest:
            dest.write(data)
        writer.close()

    close() must be called once all entries are written, also when there
    were none: it writes the central directory, and an archive with no
    entries is still a valid archive.
    """

    def __init__(self, sink):
        self._sink = sink
        self._zip = zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_DEFLATED)
        self._entry = None
        self.entries = 0
        self.closed = False

    def open_entry(self, path: str, modified: Optional[datetime] = None, size_hint: Optional[int] = None):
        """
        Start a deflated entry and return its writable stream. Closing the
        stream finishes the entry (CRC and sizes go into the data
        descriptor).

        size_hint is the uncompressed size when known; without it the
        entry is written with ZIP64 sizes so it may grow past 4 GiB.
        """
        if self.closed:
            raise ValueError("archive already finalized")

        # Readers fall back to CP437 for names without the UTF-8 flag
        info = Utf8ZipInfo(path, date_time=zip_date_time(modified))
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = 0o644 << 16
        if size_hint is not None:
            info.file_size = size_hint

        self._entry = self._zip.open(info, mode="w", force_zip64=size_hint is None)
        self.entries += 1
        return self._entry

    def close(self):
        if self.closed:
            return
        self.closed = True
        self._zip.close()
        self._sink.flush()

    def abort(self):
        """Release the archive without delivering anything still buffered."""
        if self.closed:
            return
        self.closed = True
        try:
            if self._entry is not None and not self._entry.closed:
                self._entry.close()
            self._zip.close()
        finally:
            self._sink.close()
