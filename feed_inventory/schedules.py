"""
Feed automation job schedules.

Kept free of model imports so the Celery app can build its beat schedule
before Django's app registry is ready.
"""
from celery.schedules import crontab


FEED_AUTOMATION_SCHEDULES = {
    'daily': {
        'task': 'feed_inventory.tasks.run_daily_feed_automation',
        'cron': '0 6 * * *',
        'schedule': crontab(hour=6, minute=0),
        'description': 'Recompute consumption averages, raise stock and expiry alerts, update stock status',
    },
    'monthly': {
        'task': 'feed_inventory.tasks.run_monthly_feed_automation',
        'cron': '0 7 1 * *',
        'schedule': crontab(hour=7, minute=0, day_of_month=1),
        'description': 'Monthly baseline review, archive count, monthly report, threshold suggestions',
    },
    'weekly': {
        'task': 'feed_inventory.tasks.generate_weekly_feed_report',
        'cron': '0 8 * * 0',
        'schedule': crontab(hour=8, minute=0, day_of_week=0),
        'description': 'Weekly feed usage report',
    },
}
