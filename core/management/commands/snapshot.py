from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from core.utils.config import get_setting
from core.utils.snapshot import export_snapshot, import_snapshot


class Command(BaseCommand):
    help = "Export or import the goal data as a JSON snapshot"

    def add_arguments(self, parser):
        group = parser.add_mutually_exclusive_group(required=True)
        group.add_argument("--export", action="store_true", help="Write a snapshot")
        group.add_argument("--import", action="store_true", dest="import_", help="Load a snapshot")
        parser.add_argument(
            "--path",
            type=Path,
            help="Snapshot file (defaults to EZPMS_SNAPSHOT_PATH)",
        )

    def handle(self, *args, **options):
        path = options.get("path") or get_setting().EZPMS_SNAPSHOT_PATH
        try:
            if options["export"]:
                counts = export_snapshot(path)
                verb = "Exported"
            else:
                counts = import_snapshot(path)
                verb = "Imported"
        except OSError as exc:
            raise CommandError(f"Snapshot file error: {exc}") from exc

        self.stdout.write(self.style.SUCCESS(f"{verb} snapshot {path}"))
        for key, count in counts.items():
            self.stdout.write(f"- {key}: {count}")
