"""
Feed Stock & Usage Ledger Test

Walks one month of Layer Feed through the API and checks that stock
quantities, averages and statuses stay consistent with the usage records.

SCENARIO:
=========
- January 2025 bucket: 1000 kg Layer Feed at GHS 2.00/kg, reorder point 500 kg
- Daily usage of 100, 300 and 200 kg is recorded
- A duplicate day and an oversized usage are rejected
- One usage is corrected upwards, another is deleted
- The bucket is re-upserted with a new baseline
- The remainder is written off by manual deduction

VERIFIED AT EACH STEP:
======================
1. Remaining stock equals baseline minus recorded usage (and manual deductions)
2. Average daily consumption equals month usage total / record count
3. Low stock and Depleted flags follow the quantity
4. Rejected requests leave stock and usage untouched
5. A failed stock write rolls back the usage change made with it
"""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from rest_framework import status

from feed_inventory.models import FeedStock, FeedUsage
from feed_inventory.services import FeedLedgerService

pytestmark = pytest.mark.django_db


# =============================================================================
# HELPERS
# =============================================================================

def upsert_stock(api_client, baseline):
    return api_client.post('/api/feed-stock', {
        'feed_type': 'Layer Feed',
        'month': '2025-01',
        'year': 2025,
        'baseline_quantity': baseline,
        'supplier': 'Agro Feeds Ltd',
        'cost_per_unit': '2.00',
        'minimum_threshold': 500,
        'expiry_date': '2099-12-31',
    }, format='json')


def record_usage(api_client, day, quantity):
    return api_client.post('/api/feed-usage', {
        'feed_type': 'Layer Feed',
        'date': f'2025-01-{day:02d}',
        'quantity_used': quantity,
        'recorded_by': 'Kofi',
        'total_birds': 200,
    }, format='json')


def bucket():
    return FeedStock.objects.get(feed_type='Layer Feed', month='2025-01')


def assert_ledger_balanced():
    """Remaining stock = baseline - recorded usage, and the average matches the records."""
    stock = bucket()
    usages = FeedUsage.objects.filter(feed_type='Layer Feed').in_month('2025-01')
    total = sum((usage.quantity_used for usage in usages), Decimal('0'))
    count = usages.count()

    assert stock.current_quantity == stock.baseline_quantity - total
    expected_average = (total / count).quantize(Decimal('0.01')) if count else Decimal('0.00')
    assert stock.average_daily_consumption == expected_average
    return stock


# =============================================================================
# SCENARIO
# =============================================================================

def test_feed_month_ledger(api_client):
    # Stock the month
    response = upsert_stock(api_client, 1000)
    assert response.status_code == status.HTTP_201_CREATED
    stock_id = response.data['data']['id']

    # Day 5: 100 kg
    response = record_usage(api_client, 5, 100)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.data['data']['remaining_stock'] == 900.0
    first_usage_id = response.data['data']['usage']['id']
    stock = assert_ledger_balanced()
    assert stock.average_daily_consumption == Decimal('100.00')
    assert stock.days_remaining == 9

    # Day 6: 300 kg
    response = record_usage(api_client, 6, 300)
    assert response.data['data']['remaining_stock'] == 600.0
    second_usage_id = response.data['data']['usage']['id']
    assert assert_ledger_balanced().average_daily_consumption == Decimal('200.00')

    # Day 6 again is a duplicate
    response = record_usage(api_client, 6, 50)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data['message'] == 'Feed usage record already exists for this feed type and date'
    assert bucket().current_quantity == Decimal('600.00')

    # Day 7: 200 kg takes the bucket to the reorder point
    response = record_usage(api_client, 7, 200)
    assert response.data['data']['remaining_stock'] == 400.0
    assert response.data['data']['is_low_stock'] is True
    assert_ledger_balanced()

    # Day 8: more than what is left
    response = record_usage(api_client, 8, 500)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data['message'] == 'Cannot use 500.00 KG. Only 400.00 KG available in stock.'
    assert FeedUsage.objects.count() == 3
    assert_ledger_balanced()

    # Correct day 5 from 100 to 150 kg
    response = api_client.put(f'/api/feed-usage/{first_usage_id}', {'quantity_used': 150}, format='json')
    assert response.status_code == status.HTTP_200_OK
    assert response.data['data']['remaining_stock'] == 350.0
    assert response.data['data']['usage']['cost_analysis']['daily_cost'] == Decimal('300.00')
    assert assert_ledger_balanced().average_daily_consumption == Decimal('216.67')

    # A correction larger than the stock is refused
    response = api_client.put(f'/api/feed-usage/{first_usage_id}', {'quantity_used': 600}, format='json')
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert FeedUsage.objects.get(pk=first_usage_id).quantity_used == Decimal('150.00')
    assert_ledger_balanced()

    # Delete day 6 and get its 300 kg back
    response = api_client.delete(f'/api/feed-usage/{second_usage_id}')
    assert response.status_code == status.HTTP_200_OK
    assert response.data['data']['remaining_stock'] == 650.0
    stock = assert_ledger_balanced()
    assert stock.average_daily_consumption == Decimal('175.00')
    assert stock.is_low_stock is False

    # Re-upsert replaces the quantity rather than adding to it
    response = upsert_stock(api_client, 800)
    assert response.status_code == status.HTTP_200_OK
    assert response.data['data']['id'] == stock_id
    assert bucket().current_quantity == Decimal('800.00')
    assert FeedStock.objects.count() == 1

    # Write off the remainder
    response = api_client.post(f'/api/feed-stock/{stock_id}/deduct', {'quantity_used': 800}, format='json')
    assert response.data['data']['status'] == 'Depleted'

    # Depleted buckets take no more usage
    response = record_usage(api_client, 9, 10)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data['message'] == 'No active stock found for Layer Feed in 2025-01. Please add stock first.'


def test_usage_in_other_month_needs_its_own_bucket(api_client):
    upsert_stock(api_client, 1000)

    response = api_client.post('/api/feed-usage', {
        'feed_type': 'Layer Feed',
        'date': '2025-02-01',
        'quantity_used': 10,
        'recorded_by': 'Kofi',
    }, format='json')

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert bucket().current_quantity == Decimal('1000.00')


def test_usage_of_other_feed_type_leaves_bucket_alone(api_client):
    upsert_stock(api_client, 1000)

    response = api_client.post('/api/feed-usage', {
        'feed_type': 'Grower Feed',
        'date': '2025-01-05',
        'quantity_used': 10,
        'recorded_by': 'Kofi',
    }, format='json')

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert bucket().current_quantity == Decimal('1000.00')


# =============================================================================
# ROLLBACK
# =============================================================================

class TestStockWriteFailureRollsBack:
    """A failed stock save undoes the usage write made in the same transaction."""

    @pytest.fixture
    def ledger(self):
        return FeedLedgerService()

    @pytest.fixture
    def usage_id(self, api_client):
        upsert_stock(api_client, 1000)
        response = record_usage(api_client, 5, 100)
        return response.data['data']['usage']['id']

    def test_record_usage(self, ledger, usage_id):
        data = {
            'feed_type': 'Layer Feed',
            'date': date(2025, 1, 6),
            'quantity_used': Decimal('300'),
            'recorded_by': 'Kofi',
        }

        with patch.object(FeedStock, 'save', side_effect=DatabaseError('disk full')):
            with pytest.raises(DatabaseError):
                ledger.record_usage(data)

        assert FeedUsage.objects.count() == 1
        assert bucket().current_quantity == Decimal('900.00')
        assert_ledger_balanced()

    def test_update_usage(self, ledger, usage_id):
        with patch.object(FeedStock, 'save', side_effect=DatabaseError('disk full')):
            with pytest.raises(DatabaseError):
                ledger.update_usage(usage_id, {'quantity_used': Decimal('250')})

        assert FeedUsage.objects.get(pk=usage_id).quantity_used == Decimal('100.00')
        assert bucket().current_quantity == Decimal('900.00')
        assert_ledger_balanced()

    def test_delete_usage(self, ledger, usage_id):
        with patch.object(FeedStock, 'save', side_effect=DatabaseError('disk full')):
            with pytest.raises(DatabaseError):
                ledger.delete_usage(usage_id)

        assert FeedUsage.objects.filter(pk=usage_id).exists()
        assert bucket().current_quantity == Decimal('900.00')
        assert_ledger_balanced()
