# downloads/admin.py
from django.contrib import admin
from .models import BatchDownload

@admin.register(BatchDownload)
class BatchDownloadAdmin(admin.ModelAdmin):
    list_display = ('key', 'created_at')
    search_fields = ('key',)
    readonly_fields = ('created_at',)
