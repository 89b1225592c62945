"""
Feed Stock Ledger Service

Keeps feed usage and stock quantities consistent:
- Monthly stock upsert (baseline replaces the current quantity)
- Usage recording with stock deduction
- Usage edits and deletes with stock reconciliation
- Manual stock deductions

Every operation runs in one database transaction and locks the affected
stock row with SELECT ... FOR UPDATE, so concurrent writers on the same
(feed type, month) bucket serialize and a failure rolls back both the
usage write and the stock change.
"""

from django.db import IntegrityError, transaction
from django.utils import timezone
import logging

from feed_inventory import calculations
from feed_inventory.exceptions import (
    DuplicateStockError,
    DuplicateUsageError,
    InsufficientStockError,
    NoActiveStockError,
    StockNotFoundError,
    UsageNotFoundError,
)
from feed_inventory.models import FeedStock, FeedUsage

logger = logging.getLogger(__name__)


class FeedLedgerService:
    """Service for feed stock and usage accounting"""

    # Bucket keys and the baseline are handled explicitly by upsert_stock
    UPSERT_KEY_FIELDS = ('feed_type', 'month', 'baseline_quantity')

    # Optional upsert fields; omitted ones fall back to the model default
    UPSERT_OPTIONAL_FIELDS = (
        'unit', 'supplier_contact', 'delivery_date', 'cost_per_unit',
        'minimum_threshold', 'location', 'batch_number', 'quality_grade', 'notes',
    )

    # ==========================================================================
    # STOCK
    # ==========================================================================

    @transaction.atomic
    def upsert_stock(self, data):
        """
        Create or overwrite the stock bucket for (feed_type, month).

        The baseline quantity replaces the current quantity; it is never
        added to it. Returns ``(stock, created)``.
        """
        feed_type = data['feed_type']
        month = data['month']
        baseline = calculations.to_decimal(data['baseline_quantity'])

        stock = (
            FeedStock.objects.select_for_update()
            .bucket(feed_type, month)
            .first()
        )
        created = stock is None
        if created:
            stock = FeedStock(feed_type=feed_type, month=month)
        else:
            for field in self.UPSERT_OPTIONAL_FIELDS:
                if field not in data:
                    setattr(stock, field, FeedStock._meta.get_field(field).get_default())

        for field, value in data.items():
            if field not in self.UPSERT_KEY_FIELDS:
                setattr(stock, field, value)

        stock.baseline_quantity = baseline
        stock.current_quantity = baseline
        stock.status = 'Active'
        stock.last_restocked = timezone.localdate()

        try:
            with transaction.atomic():
                stock.save()
        except IntegrityError:
            # Another request inserted the bucket between our lookup and insert
            raise DuplicateStockError('Feed stock for this type and month already exists')

        logger.info(
            f"Feed stock {'created' if created else 'updated'}: "
            f"{feed_type} {month} baseline={baseline}"
        )
        return stock, created

    @transaction.atomic
    def update_stock(self, stock_id, data):
        """Apply a partial update to a stock bucket under the row lock."""
        stock = self._lock_stock(stock_id)
        for field, value in data.items():
            setattr(stock, field, value)
        stock.save()
        return stock

    @transaction.atomic
    def deduct_stock(self, stock_id, quantity, reason=''):
        """
        Manually remove feed from a bucket (spillage, transfer, correction).

        Raises:
            StockNotFoundError: unknown stock id
            InsufficientStockError: quantity exceeds the bucket
        """
        stock = self._lock_stock(stock_id)
        stock.deduct(quantity)
        stock.save()

        logger.info(
            f"Manual deduction of {quantity} {stock.unit} from {stock.feed_type} {stock.month}"
            f"{f' ({reason})' if reason else ''}; remaining {stock.current_quantity}"
        )
        return stock

    def refresh_consumption_average(self, stock):
        """
        Set the bucket's average daily consumption from its month's usage.

        average = month usage total / month usage record count
        """
        if not stock.month:
            return stock
        totals = FeedUsage.objects.month_totals(stock.feed_type, stock.month)
        stock.average_daily_consumption = calculations.rolling_daily_average(
            totals['total'], totals['count']
        )
        return stock

    # ==========================================================================
    # USAGE
    # ==========================================================================

    @transaction.atomic
    def record_usage(self, data):
        """
        Record a usage event and deduct it from the Active stock bucket.

        Checks, in order: no usage yet for (feed_type, date); an Active
        bucket exists for the usage month; enough quantity in that bucket.
        Returns ``(usage, stock)``.
        """
        feed_type = data['feed_type']
        usage_date = data['date']
        quantity = calculations.to_decimal(data['quantity_used'])
        month = calculations.month_key(usage_date)

        if FeedUsage.objects.filter(feed_type=feed_type, date=usage_date).exists():
            raise DuplicateUsageError('Feed usage record already exists for this feed type and date')

        stock = (
            FeedStock.objects.select_for_update()
            .active()
            .bucket(feed_type, month)
            .first()
        )
        if stock is None:
            raise NoActiveStockError(
                f'No active stock found for {feed_type} in {month}. Please add stock first.'
            )

        if quantity > stock.current_quantity:
            raise InsufficientStockError(
                f'Cannot use {quantity} {stock.unit}. '
                f'Only {stock.current_quantity} {stock.unit} available in stock.'
            )

        usage = FeedUsage(**data)
        # Snapshot: later cost changes on the stock do not touch this record
        usage.cost_per_kg = stock.cost_per_unit

        try:
            with transaction.atomic():
                usage.save()
        except IntegrityError:
            raise DuplicateUsageError('Feed usage record already exists for this feed type and date')

        stock.deduct(quantity)
        self.refresh_consumption_average(stock)
        stock.save()

        logger.info(
            f"Feed usage recorded: {quantity} {stock.unit} of {feed_type} on {usage_date}; "
            f"remaining {stock.current_quantity}"
        )
        return usage, stock

    @transaction.atomic
    def update_usage(self, usage_id, data):
        """
        Apply a partial update to a usage record.

        A change in quantity_used is applied inversely to the bucket for
        the usage's feed type and month: more usage takes the delta from
        stock (checked against availability), less usage returns it.
        Returns ``(usage, stock)``; stock is None when nothing moved.
        """
        usage = self._lock_usage(usage_id)

        new_quantity = calculations.to_decimal(data.get('quantity_used', usage.quantity_used))
        delta = new_quantity - usage.quantity_used

        stock = None
        if delta:
            stock = self._lock_bucket(usage.feed_type, usage.month)
            if stock is None:
                logger.warning(
                    f"No stock bucket for {usage.feed_type} {usage.month}; "
                    f"usage {usage.id} changed by {delta} without reconciliation"
                )
            elif delta > 0:
                if delta > stock.current_quantity:
                    raise InsufficientStockError(
                        f'Cannot increase quantity by {delta} {stock.unit}. '
                        f'Only {stock.current_quantity} {stock.unit} available in stock.'
                    )
                stock.deduct(delta)
            else:
                stock.restore(-delta)

        for field, value in data.items():
            setattr(usage, field, value)
        usage.save()

        if stock is not None:
            self.refresh_consumption_average(stock)
            stock.save()

        return usage, stock

    @transaction.atomic
    def delete_usage(self, usage_id):
        """Delete a usage record and return its full quantity to stock."""
        usage = self._lock_usage(usage_id)
        stock = self._lock_bucket(usage.feed_type, usage.month)

        quantity = usage.quantity_used
        usage.delete()

        if stock is None:
            logger.warning(
                f"No stock bucket for {usage.feed_type} {usage.month}; "
                f"{quantity} not restored after deleting usage"
            )
            return None

        stock.restore(quantity)
        self.refresh_consumption_average(stock)
        stock.save()

        logger.info(f"Feed usage deleted; restored {quantity} {stock.unit} to {stock.feed_type} {stock.month}")
        return stock

    @transaction.atomic
    def verify_usage(self, usage_id, verifier_name):
        usage = self._lock_usage(usage_id)
        usage.verify(verifier_name)
        usage.save()
        return usage

    # ==========================================================================
    # ROW LOCKS
    # ==========================================================================

    def _lock_stock(self, stock_id):
        stock = FeedStock.objects.select_for_update().filter(pk=stock_id).first()
        if stock is None:
            raise StockNotFoundError('Feed stock not found')
        return stock

    def _lock_bucket(self, feed_type, month):
        return (
            FeedStock.objects.select_for_update()
            .bucket(feed_type, month)
            .first()
        )

    def _lock_usage(self, usage_id):
        usage = FeedUsage.objects.select_for_update().filter(pk=usage_id).first()
        if usage is None:
            raise UsageNotFoundError('Feed usage record not found')
        return usage
