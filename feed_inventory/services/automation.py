"""
Feed Automation Scheduler

Owns the named recurring feed maintenance jobs. Each job is an ordered
list of passes; every pass is idempotent, can be run on its own, and a
failing pass is logged and reported without stopping the others.

Jobs (schedules in feed_inventory/schedules.py):
- daily:   consumption averages, low stock / expiry alerts, status
           transitions, stockout prediction
- monthly: baseline review, archive count, last month's report,
           threshold / baseline suggestions
- weekly:  last seven days' usage report

Alerts are log records on the ``feed_inventory.automation`` logger.
"""

from collections import Counter
from datetime import timedelta
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.db.models import Avg, Count, Sum
from django.utils import timezone

from feed_inventory import calculations
from feed_inventory.models import FeedStock, FeedUsage
from feed_inventory.schedules import FEED_AUTOMATION_SCHEDULES
from .ledger import FeedLedgerService

logger = logging.getLogger('feed_inventory.automation')


class UnknownJobError(ValueError):
    """Raised when a job name is not registered."""


class FeedAutomationScheduler:
    """Registry and runner for the feed automation jobs"""

    LAST_RUN_CACHE_KEY = 'feed_automation:last_run:{job}'

    def __init__(self, ledger=None):
        self.ledger = ledger or FeedLedgerService()
        self.jobs = {
            'daily': [
                self.update_consumption_averages,
                self.check_low_stock_alerts,
                self.check_expiry_alerts,
                self.update_stock_status,
                self.predict_stockouts,
            ],
            'monthly': [
                self.reset_monthly_baselines,
                self.archive_old_records,
                self.generate_monthly_report,
                self.optimize_inventory_levels,
            ],
            'weekly': [
                self.generate_weekly_report,
            ],
        }

    @property
    def job_names(self):
        return list(self.jobs)

    def run_job(self, name):
        """
        Run every pass of a named job.

        Returns:
            dict: {'job', 'status', 'started_at', 'finished_at', 'passes': {pass_name: result}}
        """
        if not isinstance(name, str) or name not in self.jobs:
            raise UnknownJobError(f"Unknown automation job '{name}'. Choose one of: {', '.join(self.jobs)}")

        started_at = timezone.now()
        logger.info(f"Running {name} feed automation...")

        passes = {}
        for feed_pass in self.jobs[name]:
            pass_name = feed_pass.__name__
            try:
                passes[pass_name] = {'status': 'success', **feed_pass()}
            except Exception as exc:
                # Passes are independent; record the failure and keep going
                logger.exception(f"Feed automation pass {name}.{pass_name} failed: {exc}")
                passes[pass_name] = {'status': 'error', 'error': str(exc)}

        finished_at = timezone.now()
        cache.set(self.LAST_RUN_CACHE_KEY.format(job=name), finished_at.isoformat(), None)

        failed = [pass_name for pass_name, result in passes.items() if result['status'] == 'error']
        if failed:
            logger.warning(f"{name} feed automation finished with failed passes: {', '.join(failed)}")
        else:
            logger.info(f"{name} feed automation completed")

        return {
            'job': name,
            'status': 'partial' if failed else 'success',
            'started_at': started_at.isoformat(),
            'finished_at': finished_at.isoformat(),
            'passes': passes,
        }

    def get_status(self):
        """Describe the registered jobs with their schedule, next and last run."""
        now = timezone.now()
        scheduled_jobs = []
        for name in self.jobs:
            job = FEED_AUTOMATION_SCHEDULES[name]
            next_run = now + job['schedule'].remaining_estimate(now)
            scheduled_jobs.append({
                'name': name,
                'schedule': job['cron'],
                'description': job['description'],
                'task': job['task'],
                'next_run': next_run.isoformat(),
                'last_run': cache.get(self.LAST_RUN_CACHE_KEY.format(job=name)),
            })

        return {
            'status': 'running',
            'timezone': settings.TIME_ZONE,
            'scheduled_jobs': scheduled_jobs,
        }

    # =========================================================================
    # DAILY PASSES
    # =========================================================================

    def update_consumption_averages(self):
        """Recompute average daily consumption for this month's Active buckets."""
        month = calculations.month_key(timezone.localdate())
        updated = 0

        for stock_id in FeedStock.objects.active().filter(month=month).values_list('id', flat=True):
            with transaction.atomic():
                stock = FeedStock.objects.select_for_update().get(pk=stock_id)
                self.ledger.refresh_consumption_average(stock)
                stock.save()
            updated += 1
            logger.info(
                f"Average consumption for {stock.feed_type} {month}: "
                f"{stock.average_daily_consumption} {stock.unit}/day"
            )

        return {'month': month, 'updated': updated}

    def check_low_stock_alerts(self):
        """Alert on Active buckets at or below threshold (critical at half)."""
        low_stock = list(FeedStock.objects.active().filter(is_low_stock=True))
        critical = [stock for stock in low_stock if stock.is_critical]

        for stock in low_stock:
            logger.warning(
                f"LOW STOCK ALERT: {stock.feed_type} ({stock.month or 'inventory'}) has "
                f"{stock.current_quantity} {stock.unit} left (threshold {stock.minimum_threshold})"
            )
        for stock in critical:
            logger.warning(
                f"CRITICAL STOCK ALERT: {stock.feed_type} ({stock.month or 'inventory'}) is at "
                f"{stock.current_quantity} {stock.unit}, below half of {stock.minimum_threshold}"
            )

        return {
            'low_stock': len(low_stock),
            'critical': len(critical),
            'items': [
                {
                    'id': str(stock.id),
                    'feed_type': stock.feed_type,
                    'month': stock.month,
                    'current_quantity': float(stock.current_quantity),
                    'minimum_threshold': float(stock.minimum_threshold),
                    'critical': stock.is_critical,
                }
                for stock in low_stock
            ],
        }

    def check_expiry_alerts(self):
        """Alert on Active buckets expiring within the warning window (urgent window inside it)."""
        today = timezone.localdate()
        warning_cutoff = today + timedelta(days=settings.FEED_EXPIRY_WARNING_DAYS)

        expiring = list(
            FeedStock.objects.active()
            .filter(expiry_date__gte=today, expiry_date__lte=warning_cutoff)
            .order_by('expiry_date')
        )
        urgent = [
            stock for stock in expiring
            if calculations.days_until(stock.expiry_date, today) <= settings.FEED_EXPIRY_URGENT_DAYS
        ]

        for stock in expiring:
            days = calculations.days_until(stock.expiry_date, today)
            level = 'URGENT EXPIRY ALERT' if stock in urgent else 'EXPIRY WARNING'
            logger.warning(
                f"{level}: {stock.feed_type} ({stock.month or 'inventory'}) expires in {days} day(s) "
                f"on {stock.expiry_date.isoformat()}"
            )

        return {
            'expiring': len(expiring),
            'urgent': len(urgent),
            'items': [
                {
                    'id': str(stock.id),
                    'feed_type': stock.feed_type,
                    'month': stock.month,
                    'expiry_date': stock.expiry_date.isoformat(),
                    'days_until_expiry': calculations.days_until(stock.expiry_date, today),
                }
                for stock in expiring
            ],
        }

    def update_stock_status(self):
        """
        Re-derive status (and the other derived fields) for every bucket.

        Empty buckets become Depleted, expired ones Expired, and Depleted or
        Expired buckets that have stock and are in date return to Active.
        """
        transitions = Counter()
        checked = 0

        with transaction.atomic():
            for stock in FeedStock.objects.select_for_update():
                previous = stock.status
                stock.save()
                checked += 1
                if stock.status != previous:
                    transitions[stock.status] += 1
                    logger.info(
                        f"Stock status change: {stock.feed_type} ({stock.month or 'inventory'}) "
                        f"{previous} -> {stock.status}"
                    )

        return {
            'checked': checked,
            'depleted': transitions['Depleted'],
            'expired': transitions['Expired'],
            'reactivated': transitions['Active'],
        }

    def predict_stockouts(self):
        """Alert when an Active bucket will run out within the alert window."""
        today = timezone.localdate()
        alerts = []

        for stock in FeedStock.objects.active().filter(average_daily_consumption__gt=0):
            days, finish_date = calculations.project_stockout(
                stock.current_quantity, stock.average_daily_consumption, today
            )
            if days is not None and days <= settings.FEED_STOCKOUT_ALERT_DAYS:
                logger.warning(
                    f"STOCKOUT PREDICTION: {stock.feed_type} ({stock.month}) runs out in {days} day(s), "
                    f"around {finish_date.isoformat()}"
                )
                alerts.append({
                    'id': str(stock.id),
                    'feed_type': stock.feed_type,
                    'month': stock.month,
                    'days_remaining': days,
                    'projected_finish_date': finish_date.isoformat(),
                })

        return {'alerts': len(alerts), 'items': alerts}

    # =========================================================================
    # MONTHLY PASSES
    # =========================================================================

    def reset_monthly_baselines(self):
        """Log the new month's bucket state; baselines are set through the upsert endpoint."""
        month = calculations.month_key(timezone.localdate())
        existing = list(FeedStock.objects.filter(month=month).values_list('feed_type', flat=True))
        logger.info(
            f"Monthly baseline review for {month}: "
            f"{len(existing)} bucket(s) present ({', '.join(existing) or 'none'})"
        )
        return {'month': month, 'existing_buckets': existing}

    def archive_old_records(self):
        """Count usage records older than one year."""
        cutoff = timezone.localdate() - timedelta(days=365)
        count = FeedUsage.objects.filter(date__lt=cutoff).count()
        logger.info(f"{count} feed usage record(s) older than {cutoff.isoformat()} are eligible for archiving")
        return {'cutoff': cutoff.isoformat(), 'archivable_records': count}

    def generate_monthly_report(self):
        """Summarize last month's usage per feed type."""
        first_of_month = timezone.localdate().replace(day=1)
        month = calculations.month_key(first_of_month - timedelta(days=1))
        report = self._usage_report(FeedUsage.objects.in_month(month))

        logger.info(f"Monthly feed report for {month}: {report}")
        return {'month': month, 'report': report}

    def optimize_inventory_levels(self):
        """Suggest thresholds (14 days of use) and baselines (45 days) from current averages."""
        month = calculations.month_key(timezone.localdate())
        suggestions = []

        for stock in FeedStock.objects.active().filter(month=month, average_daily_consumption__gt=0):
            threshold, baseline = calculations.suggested_stock_levels(stock.average_daily_consumption)
            suggestions.append({
                'feed_type': stock.feed_type,
                'average_daily_consumption': float(stock.average_daily_consumption),
                'current_threshold': float(stock.minimum_threshold),
                'suggested_threshold': threshold,
                'suggested_baseline': baseline,
            })
            logger.info(
                f"Inventory suggestion for {stock.feed_type}: threshold {threshold}, baseline {baseline} "
                f"(avg {stock.average_daily_consumption}/day)"
            )

        return {'month': month, 'suggestions': suggestions}

    # =========================================================================
    # WEEKLY PASSES
    # =========================================================================

    def generate_weekly_report(self):
        """Summarize the last seven days of usage per feed type."""
        today = timezone.localdate()
        since = today - timedelta(days=7)
        report = self._usage_report(FeedUsage.objects.filter(date__gte=since, date__lte=today))

        logger.info(f"Weekly feed report {since.isoformat()} to {today.isoformat()}: {report}")
        return {'start_date': since.isoformat(), 'end_date': today.isoformat(), 'report': report}

    def _usage_report(self, queryset):
        rows = (
            queryset.values('feed_type')
            .annotate(
                total_usage=Sum('quantity_used'),
                average_usage=Avg('quantity_used'),
                total_cost=Sum('daily_cost'),
                record_count=Count('id'),
            )
            .order_by('feed_type')
        )
        return [
            {
                'feed_type': row['feed_type'],
                'total_usage': float(row['total_usage'] or 0),
                'average_usage': round(float(row['average_usage'] or 0), 2),
                'total_cost': float(row['total_cost'] or 0),
                'record_count': row['record_count'],
            }
            for row in rows
        ]
