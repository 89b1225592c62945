"""
Feed Inventory Management Models

Tracks monthly feed stock buckets and the daily usage drawn from them.

Models:
    - FeedStock: One month's inventory bucket per feed type
    - FeedInventory: Legacy un-bucketed inventory view over the same table
    - FeedUsage: One dated consumption event per feed type
"""

import uuid
from decimal import Decimal
from django.db import models
from django.db.models import Count, Sum
from django.db.models.functions import Coalesce
from django.core.validators import MinValueValidator, MaxValueValidator, RegexValidator
from django.core.exceptions import ValidationError
from django.utils import timezone

from . import calculations
from .exceptions import InsufficientStockError


class FeedKind(models.TextChoices):
    LAYER = 'Layer Feed', 'Layer Feed'
    CHICK_STARTER = 'Chick Starter', 'Chick Starter'
    GROWER = 'Grower Feed', 'Grower Feed'
    MEDICATED = 'Medicated Feed', 'Medicated Feed'
    ORGANIC = 'Organic Feed', 'Organic Feed'
    FINISHER = 'Finisher Feed', 'Finisher Feed'


class FeedUnit(models.TextChoices):
    KG = 'KG', 'Kilograms'
    LBS = 'LBS', 'Pounds'
    TONS = 'TONS', 'Tons'


month_validator = RegexValidator(
    regex=r'^\d{4}-(0[1-9]|1[0-2])$',
    message='Month must be in YYYY-MM format',
)


class FeedStockQuerySet(models.QuerySet):

    def active(self):
        return self.filter(status='Active')

    def bucket(self, feed_type, month):
        """Stock rows for one (feed type, month) bucket, any status."""
        return self.filter(feed_type=feed_type, month=month)


class FeedStock(models.Model):
    """
    A monthly bucket of a feed type's inventory.

    At most one row per (feed type, month). Quantity only moves through
    the ledger service (upsert, usage deduction and reconciliation, manual
    deduction), each under a row lock.
    """

    STATUS_CHOICES = [
        ('Active', 'Active'),
        ('Depleted', 'Depleted'),
        ('Expired', 'Expired'),
        ('Reserved', 'Reserved'),
    ]

    QUALITY_GRADE_CHOICES = [
        ('A', 'Grade A'),
        ('B', 'Grade B'),
        ('C', 'Grade C'),
    ]

    # Recomputed by recalculate() on every save
    DERIVED_FIELDS = (
        'total_cost', 'is_low_stock', 'days_until_expiry',
        'days_remaining', 'projected_finish_date', 'status',
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Bucket
    feed_type = models.CharField(max_length=30, choices=FeedKind.choices, help_text="Type of feed in stock")
    month = models.CharField(
        max_length=7,
        null=True,
        blank=True,
        validators=[month_validator],
        help_text="Month bucket (YYYY-MM); empty for legacy inventory items"
    )
    year = models.PositiveSmallIntegerField(null=True, blank=True)

    # Stock Levels
    baseline_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        default=Decimal('0.00'),
        help_text="Quantity set by the latest upsert for this bucket"
    )
    current_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        default=Decimal('0.00'),
        help_text="Quantity currently in stock"
    )
    unit = models.CharField(max_length=4, choices=FeedUnit.choices, default=FeedUnit.KG)
    minimum_threshold = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        default=Decimal('100.00'),
        help_text="Reorder point; at or below this the stock is low"
    )
    is_low_stock = models.BooleanField(default=False)

    # Supplier
    supplier = models.CharField(max_length=200)
    supplier_contact = models.CharField(max_length=100, blank=True)
    last_restocked = models.DateField(default=timezone.localdate)
    delivery_date = models.DateField(null=True, blank=True)
    batch_number = models.CharField(max_length=100, blank=True)
    quality_grade = models.CharField(max_length=1, choices=QUALITY_GRADE_CHOICES, default='A')

    # Cost
    cost_per_unit = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        default=Decimal('0.00'),
    )
    total_cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="current_quantity × cost_per_unit"
    )

    # Expiry
    expiry_date = models.DateField()
    days_until_expiry = models.IntegerField(null=True, blank=True)

    # Consumption projection
    average_daily_consumption = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        default=Decimal('0.00'),
        help_text="Month usage total / usage record count"
    )
    days_remaining = models.IntegerField(null=True, blank=True)
    projected_finish_date = models.DateField(null=True, blank=True)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='Active', db_index=True)
    location = models.CharField(max_length=100, default='Main Storage')
    notes = models.TextField(blank=True)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    last_updated = models.DateTimeField(auto_now=True)

    objects = FeedStockQuerySet.as_manager()

    class Meta:
        db_table = 'feedinventories'
        ordering = ['feed_type', '-month']
        verbose_name = 'Feed Stock'
        verbose_name_plural = 'Feed Stock'
        constraints = [
            models.UniqueConstraint(fields=['feed_type', 'month'], name='unique_feed_stock_per_month'),
        ]
        indexes = [
            models.Index(fields=['status', 'month']),
            models.Index(fields=['expiry_date']),
        ]

    def __str__(self):
        return f"{self.feed_type} {self.month or 'inventory'} ({self.current_quantity} {self.unit})"

    def recalculate(self, today=None):
        """Recompute every derived field from the stored values."""
        today = today or timezone.localdate()
        self.total_cost = calculations.stock_total_cost(self.current_quantity, self.cost_per_unit)
        self.is_low_stock = calculations.is_low_stock(self.current_quantity, self.minimum_threshold)
        self.days_until_expiry = calculations.days_until(self.expiry_date, today)
        self.days_remaining, self.projected_finish_date = calculations.project_stockout(
            self.current_quantity, self.average_daily_consumption, today
        )
        self.status = calculations.stock_status(
            self.current_quantity, self.expiry_date, today, current=self.status
        )

    def save(self, *args, **kwargs):
        """Recalculate derived fields before saving."""
        self.recalculate()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | set(self.DERIVED_FIELDS) | {'last_updated'}
        super().save(*args, **kwargs)

    def clean(self):
        """Validate stock data."""
        errors = {}

        if self.month and self.year and not self.month.startswith(f'{self.year:04d}-'):
            errors['year'] = f"Year {self.year} does not match month {self.month}"

        if self.delivery_date and self.expiry_date and self.expiry_date < self.delivery_date:
            errors['expiry_date'] = "Expiry date cannot be before the delivery date"

        if errors:
            raise ValidationError(errors)

    @property
    def is_critical(self):
        return calculations.is_critical_stock(self.current_quantity, self.minimum_threshold)

    def deduct(self, amount):
        """
        Remove ``amount`` from stock (caller holds the row lock and saves).

        Raises:
            InsufficientStockError: if more than the current quantity is requested
        """
        amount = calculations.to_decimal(amount)
        if amount > self.current_quantity:
            raise InsufficientStockError(
                f"Cannot deduct {amount} {self.unit}. Only {self.current_quantity} {self.unit} available."
            )
        self.current_quantity -= amount

    def restore(self, amount):
        """Return ``amount`` to stock (caller holds the row lock and saves)."""
        self.current_quantity += calculations.to_decimal(amount)


class LegacyInventoryManager(models.Manager):

    def get_queryset(self):
        return FeedStockQuerySet(self.model, using=self._db).filter(month__isnull=True)


class FeedInventory(FeedStock):
    """
    Legacy inventory view.

    Shares the ``feedinventories`` table with FeedStock; rows created here
    carry no month bucket, and only those rows are visible through it.
    """

    objects = LegacyInventoryManager()

    class Meta:
        proxy = True
        verbose_name = 'Feed Inventory Item'
        verbose_name_plural = 'Feed Inventory'


class FeedUsageQuerySet(models.QuerySet):

    def in_month(self, month):
        """Usage dated inside a 'YYYY-MM' bucket."""
        year, month_number = (int(part) for part in month.split('-'))
        return self.filter(date__year=year, date__month=month_number)

    def month_totals(self, feed_type, month):
        """Total quantity and record count for one feed type in one month."""
        return self.filter(feed_type=feed_type).in_month(month).aggregate(
            total=Coalesce(Sum('quantity_used'), Decimal('0')),
            count=Count('id'),
        )


class FeedUsage(models.Model):
    """
    One usage event for a feed type on a date.

    Cost per kg is copied from the stock bucket when the record is created
    and is not re-derived afterwards.
    """

    FEEDING_TIME_CHOICES = [
        ('Morning', 'Morning'),
        ('Afternoon', 'Afternoon'),
        ('Evening', 'Evening'),
        ('Full Day', 'Full Day'),
    ]

    WEATHER_CHOICES = [
        ('Sunny', 'Sunny'),
        ('Rainy', 'Rainy'),
        ('Cloudy', 'Cloudy'),
        ('Hot', 'Hot'),
        ('Cold', 'Cold'),
    ]

    RATING_CHOICES = [
        ('Excellent', 'Excellent'),
        ('Good', 'Good'),
        ('Fair', 'Fair'),
        ('Poor', 'Poor'),
    ]

    WATER_CONSUMPTION_CHOICES = [
        ('Normal', 'Normal'),
        ('High', 'High'),
        ('Low', 'Low'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    feed_type = models.CharField(max_length=30, choices=FeedKind.choices)
    date = models.DateField(help_text="Day the feed was used")
    quantity_used = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    unit = models.CharField(max_length=4, choices=FeedUnit.choices, default=FeedUnit.KG)
    batches_used = models.JSONField(
        default=list,
        blank=True,
        help_text="List of {batch_number, birds, quantity}"
    )

    # Flock
    total_birds = models.PositiveIntegerField(default=200, validators=[MinValueValidator(1)])
    feed_per_bird = models.DecimalField(max_digits=10, decimal_places=3, default=Decimal('0.000'))

    # Conditions
    feeding_time = models.CharField(max_length=10, choices=FEEDING_TIME_CHOICES, default='Full Day')
    weather = models.CharField(max_length=10, choices=WEATHER_CHOICES, blank=True)
    temperature = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    humidity = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
    )
    waste_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))],
    )
    actual_consumption = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    feed_efficiency = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal('0.00'))
    location = models.CharField(max_length=100, default='Main Coop')
    recorded_by = models.CharField(max_length=100)

    # Quality observations
    bird_appearance = models.CharField(max_length=10, choices=RATING_CHOICES, default='Good')
    feed_acceptance = models.CharField(max_length=10, choices=RATING_CHOICES, default='Good')
    water_consumption = models.CharField(max_length=10, choices=WATER_CONSUMPTION_CHOICES, default='Normal')

    # Health indicators
    mortality = models.PositiveIntegerField(default=0)
    egg_production = models.PositiveIntegerField(default=0)
    average_weight = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)

    # Cost analysis
    cost_per_kg = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    daily_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    cost_per_bird = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    notes = models.TextField(blank=True)

    # Verification
    verified = models.BooleanField(default=False)
    verified_by = models.CharField(max_length=100, blank=True)
    verified_at = models.DateTimeField(null=True, blank=True)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = FeedUsageQuerySet.as_manager()

    class Meta:
        ordering = ['-date', 'feed_type']
        verbose_name = 'Feed Usage'
        verbose_name_plural = 'Feed Usage Records'
        constraints = [
            models.UniqueConstraint(fields=['feed_type', 'date'], name='unique_feed_usage_per_day'),
        ]
        indexes = [
            models.Index(fields=['-date']),
            models.Index(fields=['recorded_by']),
        ]

    def __str__(self):
        return f"{self.feed_type} {self.date} ({self.quantity_used} {self.unit})"

    @property
    def month(self):
        return calculations.month_key(self.date)

    def recalculate(self):
        """Recompute per-bird, consumption and cost fields."""
        self.feed_per_bird = calculations.feed_per_bird(self.quantity_used, self.total_birds)
        self.actual_consumption = calculations.actual_consumption(self.quantity_used, self.waste_percentage)
        self.daily_cost = calculations.daily_cost(self.quantity_used, self.cost_per_kg)
        self.cost_per_bird = calculations.cost_per_bird(self.daily_cost, self.total_birds)

    def save(self, *args, **kwargs):
        """Recalculate derived fields before saving."""
        self.recalculate()
        super().save(*args, **kwargs)

    def verify(self, verifier_name):
        self.verified = True
        self.verified_by = verifier_name
        self.verified_at = timezone.now()
