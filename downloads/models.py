# downloads/models.py

from django.db import models


class BatchDownload(models.Model):
    """
    A prepared batch download.

    Rows are written by the application that lets users pick files; this
    service only reads them. files_hash holds the JSON manifest verbatim.
    """

    key = models.CharField(max_length=255, unique=True)
    files_hash = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "batch_downloads"

    def __str__(self):
        return self.key
