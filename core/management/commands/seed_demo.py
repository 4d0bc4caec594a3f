from django.core.management.base import BaseCommand

from core.utils.seed import load_seed_data


class Command(BaseCommand):
    help = "Load the demo roster, goal bank templates and an open goal space"

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            help="Password for newly created demo users (defaults to EZPMS_DEMO_PASSWORD)",
        )

    def handle(self, *args, **options):
        counts = load_seed_data(password=options.get("password"))
        self.stdout.write(
            self.style.SUCCESS(
                f"Seeded {counts['users']} users, {counts['templates']} templates "
                f"and {counts['spaces']} goal space."
            )
        )
