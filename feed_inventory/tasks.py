"""
Feed automation Celery tasks.

Scheduled by Celery beat (see core/celery.py and feed_inventory/schedules.py);
each task runs one named job of the FeedAutomationScheduler.
"""
from celery import shared_task
import logging

from .services import FeedAutomationScheduler

logger = logging.getLogger(__name__)


def _run(job_name):
    result = FeedAutomationScheduler().run_job(job_name)
    logger.info(f"Feed automation '{job_name}' finished with status {result['status']}")
    return result


@shared_task
def run_daily_feed_automation():
    """
    Daily at 06:00: consumption averages, low stock and expiry alerts,
    status transitions, stockout prediction.
    """
    return _run('daily')


@shared_task
def run_monthly_feed_automation():
    """
    1st of the month at 07:00: baseline review, archive count, last
    month's report, inventory level suggestions.
    """
    return _run('monthly')


@shared_task
def generate_weekly_feed_report():
    """Sundays at 08:00: last seven days of usage per feed type."""
    return _run('weekly')
