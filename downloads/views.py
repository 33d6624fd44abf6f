# downloads/views.py

import logging
import time

from django.http import HttpResponse, StreamingHttpResponse
from django.utils.http import content_disposition_header
from django.views.decorators.http import require_GET

from .exceptions import ManifestResolutionError
from .paths import DEFAULT_DOWNLOAD_NAME, sanitize
from .services import get_zip_service

logger = logging.getLogger(__name__)

USAGE = "S3 File Zipper. Pass ?ref= to use."


# ============================================================
# HELPERS
# ============================================================

def log_request(request, outcome, failed=False):
    level = logging.WARNING if failed else logging.INFO
    logger.log(level, "%s\t%s\t%s", request.method, request.get_full_path(), outcome)


def _elapsed(started: float) -> str:
    return f"{time.monotonic() - started:.3f}s"


class LoggedStream:
    """
    Pass archive chunks through and write the request summary line once.

    The line goes out when the chunks run out or fail, or when the server
    closes the response. A client that leaves before the first chunk is
    only seen at close(), the wrapped generator never started.
    """

    def __init__(self, chunks, request, started):
        self._chunks = chunks
        self._request = request
        self._started = started
        self._logged = False

    def __iter__(self):
        return self

    def __next__(self):
        try:
            return next(self._chunks)
        except StopIteration:
            self._log(_elapsed(self._started))
            raise
        except Exception as e:
            self._log(f"stream failed: {e} after {_elapsed(self._started)}", failed=True)
            raise

    def close(self):
        try:
            self._chunks.close()
        finally:
            self._log(f"client disconnected after {_elapsed(self._started)}", failed=True)

    def _log(self, outcome, failed=False):
        if self._logged:
            return
        self._logged = True
        log_request(self._request, outcome, failed=failed)


# ============================================================
# DOWNLOAD ZIP
# ============================================================

@require_GET
def download_zip(request):
    started = time.monotonic()

    ref = request.GET.get("ref")
    if not ref:
        log_request(request, "missing ref", failed=True)
        return HttpResponse(USAGE, status=500, content_type="text/plain; charset=utf-8")

    download_as = sanitize(request.GET.get("downloadas", ""), DEFAULT_DOWNLOAD_NAME)

    service = get_zip_service()

    try:
        manifest = service.resolve(ref)
    except ManifestResolutionError as e:
        log_request(request, e, failed=True)
        return HttpResponse(str(e), status=403, content_type="text/plain; charset=utf-8")

    # From here on the status is 200 whatever happens to the entries
    response = StreamingHttpResponse(
        LoggedStream(service.stream(manifest), request, started),
        content_type="application/zip",
    )
    response["Content-Disposition"] = content_disposition_header(True, download_as)
    return response
