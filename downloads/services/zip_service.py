# downloads/services/zip_service.py

import logging

from botocore.exceptions import BotoCoreError

from ..archive import COPY_BUFFER_SIZE, ChunkSink, ZipStreamWriter, parse_modified
from ..exceptions import BlobFetchError, BlobNotFound
from ..paths import build_archive_path

logger = logging.getLogger(__name__)


class ZipStreamService:
    """
    Turns a manifest into a ZIP stream.

    resolver and storage are the process-wide collaborators (manifest
    backend, blob bucket). The service holds no per-request state.
    """

    def __init__(self, resolver, storage):
        self.resolver = resolver
        self.storage = storage

    # ========================================================
    # RESOLVE
    # ========================================================

    def resolve(self, token: str) -> tuple:
        return self.resolver.resolve(token)

    # ========================================================
    # STREAM
    # ========================================================

    def stream(self, manifest):
        """
        Generator of archive bytes, entries in manifest order.

        Entry failures are logged and skipped, the archive is always
        finalized. If the consumer stops early (client went away, the
        server closes the generator) the in-flight object stream and the
        writer are released and nothing more is produced.
        """
        sink = ChunkSink()
        writer = ZipStreamWriter(sink)
        finished = False

        try:
            for entry in manifest:
                yield from self._write_entry(writer, sink, entry)

            writer.close()
            finished = True

            tail = sink.drain()
            if tail:
                yield tail
        finally:
            if not finished:
                writer.abort()

    def _write_entry(self, writer, sink, entry):
        if not entry.remote_path:
            logger.warning("Missing path for file: %r", entry)
            return

        try:
            body, length = self.storage.open_stream(entry.remote_path)
        except BlobNotFound as e:
            logger.warning("%s", e)
            return
        except BlobFetchError as e:
            logger.error("%s", e)
            return

        path = build_archive_path(entry)

        try:
            with writer.open_entry(path, parse_modified(entry.modified), size_hint=length) as dest:
                while True:
                    try:
                        chunk = body.read(COPY_BUFFER_SIZE)
                    except (BotoCoreError, OSError) as e:
                        # already partly sent, keep what we have
                        logger.error(
                            "Error downloading \"%s\" - %s (archived truncated as %s)",
                            entry.remote_path, e, path,
                        )
                        break

                    if not chunk:
                        break

                    dest.write(chunk)

                    data = sink.drain()
                    if data:
                        yield data
        finally:
            body.close()

        data = sink.drain()
        if data:
            yield data
