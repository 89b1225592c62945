"""
Celery configuration for the Farm Management backend.

This module configures Celery for background task processing.

Tasks to run in background:
- Contact form emails (owner notification, auto-reply)
- Feed automation jobs (daily maintenance, monthly review, weekly report)
- Hourly system health report
"""
import os
from celery import Celery
from celery.schedules import crontab

from feed_inventory.schedules import FEED_AUTOMATION_SCHEDULES

# Set the default Django settings module
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings')

# Create Celery app
app = Celery('core')

# Load config from Django settings with CELERY_ prefix
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()


# =============================================================================
# CELERY BEAT SCHEDULE - Periodic Tasks
# =============================================================================
app.conf.beat_schedule = {
    # Daily 06:00, monthly on the 1st at 07:00, weekly Sunday 08:00
    f'feed-automation-{name}': {
        'task': job['task'],
        'schedule': job['schedule'],
    }
    for name, job in FEED_AUTOMATION_SCHEDULES.items()
}
app.conf.beat_schedule['system-health-report'] = {
    'task': 'core.tasks.generate_system_health_report',
    'schedule': crontab(minute=0),
}

# Celery configuration
app.conf.update(
    # Task result expiry
    result_expires=3600,  # 1 hour

    # Task time limits
    task_time_limit=300,  # 5 minutes hard limit
    task_soft_time_limit=240,  # 4 minutes soft limit

    # Retry policy
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Prefetch multiplier (1 = fair distribution)
    worker_prefetch_multiplier=1,

    # Serialization
    task_serializer='json',
    result_serializer='json',
    accept_content=['json'],

    # Timezone
    timezone=os.getenv('TIME_ZONE', 'Africa/Accra'),
    enable_utc=True,
)
