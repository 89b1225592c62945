"""
Core Celery tasks and system health checks.
"""
from celery import shared_task
from django.core.cache import cache
from django.db import DatabaseError, connection
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


def check_database():
    """Return the database connection state ('connected' or 'disconnected')."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return 'connected'
    except DatabaseError as exc:
        logger.error(f"Database health check failed: {exc}")
        return 'disconnected'


def check_cache():
    """Round-trip a key through the default cache."""
    try:
        cache.set('health_check', 'ok', 10)
        if cache.get('health_check') == 'ok':
            return 'healthy'
        return 'unhealthy: cache not responding'
    except Exception as exc:
        # Redis client errors do not share a base class with Django's
        logger.error(f"Cache health check failed: {exc}")
        return f'unhealthy: {exc}'


@shared_task
def generate_system_health_report():
    """
    Generate a system health report for monitoring.

    Can be called manually or scheduled.
    """
    report = {
        'timestamp': timezone.now().isoformat(),
        'database': check_database(),
        'cache': check_cache(),
    }

    logger.info(f"System health report: {report}")
    return report
