"""
Django Management Command: Run Feed Automation

Runs one feed automation job immediately, outside Celery beat.

Usage:
    python manage.py run_feed_automation --job daily
    python manage.py run_feed_automation --job monthly
    python manage.py run_feed_automation --job weekly
"""

from django.core.management.base import BaseCommand, CommandError

from feed_inventory.services import FeedAutomationScheduler, UnknownJobError


class Command(BaseCommand):
    help = 'Run a feed automation job (daily, monthly or weekly) now'

    def add_arguments(self, parser):
        parser.add_argument(
            '--job',
            default='daily',
            help='Job to run: daily, monthly or weekly (default: daily)',
        )

    def handle(self, *args, **options):
        scheduler = FeedAutomationScheduler()

        try:
            result = scheduler.run_job(options['job'])
        except UnknownJobError as exc:
            raise CommandError(str(exc))

        self.stdout.write(f"Feed automation '{result['job']}' ({result['started_at']} - {result['finished_at']})")
        for pass_name, outcome in result['passes'].items():
            if outcome['status'] == 'success':
                self.stdout.write(self.style.SUCCESS(f'  ✓ {pass_name}'))
            else:
                self.stdout.write(self.style.ERROR(f"  ✗ {pass_name}: {outcome['error']}"))

        if result['status'] == 'success':
            self.stdout.write(self.style.SUCCESS('Feed automation completed'))
        else:
            self.stdout.write(self.style.WARNING('Feed automation completed with failed passes'))
