"""
Django Management Command: Wait for Database

Blocks until the default database accepts connections, retrying with a
fixed delay. Used as the first step of container start-up so migrations
and gunicorn never race a database that is still booting.

Usage:
    python manage.py wait_for_db
    python manage.py wait_for_db --delay 2 --max-attempts 30
"""
import logging
import time

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import connections
from django.db.utils import OperationalError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Wait until the database is reachable, retrying with a fixed delay'

    def add_arguments(self, parser):
        parser.add_argument(
            '--delay',
            type=float,
            default=settings.DB_CONNECT_RETRY_DELAY,
            help='Seconds between attempts (default: DB_CONNECT_RETRY_DELAY)',
        )
        parser.add_argument(
            '--max-attempts',
            type=int,
            default=0,
            help='Give up after this many attempts (0 retries forever)',
        )
        parser.add_argument(
            '--database',
            default='default',
            help='Database alias to check',
        )

    def handle(self, *args, **options):
        delay = options['delay']
        max_attempts = options['max_attempts']
        connection = connections[options['database']]

        attempt = 0
        while True:
            attempt += 1
            try:
                connection.ensure_connection()
                break
            except OperationalError as exc:
                logger.warning(f"Database unavailable (attempt {attempt}): {exc}")
                if max_attempts and attempt >= max_attempts:
                    raise CommandError(f'Database unavailable after {attempt} attempts')
                self.stdout.write(f'Database unavailable, retrying in {delay}s...')
                time.sleep(delay)

        self.stdout.write(self.style.SUCCESS(f'Database available after {attempt} attempt(s)'))
