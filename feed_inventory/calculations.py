"""
Derived-field calculations for feed stock and usage records.

Pure functions over Decimals and dates. Models call these from their
``recalculate()`` methods before every save; the automation passes reuse
them so all write paths agree on the same arithmetic.
"""
import math
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
MILLI = Decimal('0.001')
ZERO = Decimal('0')

CRITICAL_STOCK_RATIO = Decimal('0.5')


def to_decimal(value, default=ZERO):
    """Coerce ints, floats and strings to Decimal; None becomes ``default``."""
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value, exp=CENT):
    return to_decimal(value).quantize(exp, rounding=ROUND_HALF_UP)


def month_key(day):
    """Month bucket ('YYYY-MM') a date belongs to."""
    return day.strftime('%Y-%m')


def recent_months(today, count):
    """The last ``count`` month keys, oldest first, ending with today's month."""
    year, month = today.year, today.month
    keys = []
    for _ in range(count):
        keys.append(f'{year:04d}-{month:02d}')
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(keys))


# =============================================================================
# FEED STOCK
# =============================================================================

def stock_total_cost(quantity, cost_per_unit):
    return quantize(to_decimal(quantity) * to_decimal(cost_per_unit))


def is_low_stock(quantity, threshold):
    return to_decimal(quantity) <= to_decimal(threshold)


def is_critical_stock(quantity, threshold):
    return to_decimal(quantity) <= to_decimal(threshold) * CRITICAL_STOCK_RATIO


def days_until(target, today):
    """Whole days from ``today`` until ``target`` (negative once passed)."""
    if target is None:
        return None
    return (target - today).days


def project_stockout(quantity, average_daily_consumption, today):
    """
    Days of stock left at the current consumption rate and the date it runs out.

    Returns ``(None, None)`` when there is no consumption history.
    """
    average = to_decimal(average_daily_consumption)
    if average <= 0:
        return None, None
    days = max(math.floor(to_decimal(quantity) / average), 0)
    return days, today + timedelta(days=days)


def stock_status(quantity, expiry_date, today, current=None):
    """
    Status for a stock bucket.

    Depleted wins over Expired: an empty bucket is Depleted even when its
    expiry date has passed. A manual Reserved hold survives only while the
    bucket is neither empty nor expired.
    """
    if to_decimal(quantity) <= 0:
        return 'Depleted'
    if expiry_date is not None and expiry_date < today:
        return 'Expired'
    if current == 'Reserved':
        return 'Reserved'
    return 'Active'


def rolling_daily_average(total_usage, record_count):
    if not record_count:
        return ZERO.quantize(CENT)
    return quantize(to_decimal(total_usage) / record_count)


def suggested_stock_levels(average_daily_consumption, threshold_days=14, baseline_days=45):
    """Suggested (minimum threshold, monthly baseline) for an average daily usage."""
    average = to_decimal(average_daily_consumption)
    return (
        math.ceil(average * threshold_days),
        math.ceil(average * baseline_days),
    )


# =============================================================================
# FEED USAGE
# =============================================================================

def feed_per_bird(quantity_used, total_birds):
    if not total_birds:
        return ZERO.quantize(MILLI)
    return quantize(to_decimal(quantity_used) / total_birds, MILLI)


def actual_consumption(quantity_used, waste_percentage):
    waste = to_decimal(waste_percentage)
    return quantize(to_decimal(quantity_used) * (1 - waste / 100))


def daily_cost(quantity_used, cost_per_kg):
    return quantize(to_decimal(quantity_used) * to_decimal(cost_per_kg))


def cost_per_bird(total_daily_cost, total_birds):
    if not total_birds:
        return ZERO.quantize(CENT)
    return quantize(to_decimal(total_daily_cost) / total_birds)
