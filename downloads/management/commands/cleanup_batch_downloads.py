from datetime import timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone
from downloads.models import BatchDownload

class Command(BaseCommand):
    help = "Delete batch downloads older than --days"

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, default=30)

    def handle(self, *args, **options):
        cutoff = timezone.now() - timedelta(days=options["days"])

        expired = BatchDownload.objects.filter(created_at__lt=cutoff)

        count, _ = expired.delete()

        self.stdout.write(
            self.style.SUCCESS(f"Deleted {count} batch downloads")
        )
