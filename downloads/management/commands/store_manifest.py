from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from downloads.exceptions import ManifestError
from downloads.manifest import decode_manifest
from downloads.services.manifest_resolver import get_manifest_resolver


class Command(BaseCommand):
    help = "Store a manifest JSON file under a reference token in the configured backend"

    def add_arguments(self, parser):
        parser.add_argument("key", help="reference token")
        parser.add_argument("path", help="JSON manifest file")
        parser.add_argument(
            "--ttl",
            type=int,
            default=None,
            help="expiry in seconds (cache backend only)",
        )

    def handle(self, *args, **options):
        path = Path(options["path"])
        try:
            payload = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CommandError(f"Cannot read {path}: {e}")

        try:
            manifest = decode_manifest(payload)
        except ManifestError as e:
            raise CommandError(f"{path}: {e}")

        resolver = get_manifest_resolver()
        resolver.store(options["key"], payload, ttl=options["ttl"])

        skipped = sum(1 for entry in manifest if not entry.remote_path)
        self.stdout.write(
            self.style.SUCCESS(
                f"Stored {len(manifest)} entries ({skipped} without S3Path) "
                f"under {options['key']!r} in {resolver.name}"
            )
        )
