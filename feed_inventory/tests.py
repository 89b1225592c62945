"""
Tests for feed stock, feed usage, legacy inventory and feed automation
"""
import json
from datetime import date, timedelta
from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone
from rest_framework import status

from feed_inventory import calculations
from feed_inventory.exceptions import InsufficientStockError
from feed_inventory.models import FeedInventory, FeedStock, FeedUsage
from feed_inventory.services import FeedAutomationScheduler, FeedLedgerService, UnknownJobError

pytestmark = pytest.mark.django_db


def current_month():
    return calculations.month_key(timezone.localdate())


def make_stock(feed_type='Layer Feed', month=None, baseline=1000, **extra):
    month = month or current_month()
    fields = {
        'feed_type': feed_type,
        'month': month,
        'year': int(month[:4]),
        'baseline_quantity': Decimal(baseline),
        'current_quantity': Decimal(baseline),
        'supplier': 'Agro Feeds Ltd',
        'cost_per_unit': Decimal('2.00'),
        'minimum_threshold': Decimal('500.00'),
        'expiry_date': timezone.localdate() + timedelta(days=365),
    }
    fields.update(extra)
    return FeedStock.objects.create(**fields)


def make_legacy_item(feed_type='Grower Feed', quantity=900, **extra):
    fields = {
        'feed_type': feed_type,
        'baseline_quantity': Decimal(quantity),
        'current_quantity': Decimal(quantity),
        'supplier': 'Old Supplier',
        'last_restocked': date(2024, 6, 1),
        'expiry_date': timezone.localdate() + timedelta(days=200),
    }
    fields.update(extra)
    return FeedInventory.objects.create(**fields)


def stock_payload(**overrides):
    payload = {
        'feed_type': 'Layer Feed',
        'month': '2025-01',
        'year': 2025,
        'baseline_quantity': 1000,
        'supplier': 'Agro Feeds Ltd',
        'cost_per_unit': '2.00',
        'minimum_threshold': 500,
        'expiry_date': '2099-12-31',
    }
    payload.update(overrides)
    return payload


def usage_payload(**overrides):
    payload = {
        'feed_type': 'Layer Feed',
        'date': '2025-01-05',
        'quantity_used': 100,
        'recorded_by': 'Kofi',
        'total_birds': 200,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# CALCULATIONS
# =============================================================================

class TestCalculations:

    def test_depleted_wins_over_expired(self):
        today = date(2025, 5, 1)
        assert calculations.stock_status(0, date(2025, 4, 1), today) == 'Depleted'
        assert calculations.stock_status(10, date(2025, 4, 1), today) == 'Expired'
        assert calculations.stock_status(10, date(2025, 6, 1), today) == 'Active'

    def test_reserved_survives_only_while_usable(self):
        today = date(2025, 5, 1)
        assert calculations.stock_status(10, date(2025, 6, 1), today, current='Reserved') == 'Reserved'
        assert calculations.stock_status(0, date(2025, 6, 1), today, current='Reserved') == 'Depleted'
        assert calculations.stock_status(10, date(2025, 4, 1), today, current='Reserved') == 'Expired'

    def test_low_and_critical_thresholds(self):
        assert calculations.is_low_stock(500, 500)
        assert not calculations.is_low_stock(501, 500)
        assert calculations.is_critical_stock(250, 500)
        assert not calculations.is_critical_stock(251, 500)

    def test_project_stockout(self):
        today = date(2025, 1, 10)
        assert calculations.project_stockout(650, 0, today) == (None, None)
        assert calculations.project_stockout(650, Decimal('175'), today) == (3, date(2025, 1, 13))

    def test_rolling_daily_average(self):
        assert calculations.rolling_daily_average(Decimal('650'), 3) == Decimal('216.67')
        assert calculations.rolling_daily_average(0, 0) == Decimal('0.00')

    def test_recent_months_cross_year(self):
        assert calculations.recent_months(date(2025, 2, 10), 3) == ['2024-12', '2025-01', '2025-02']

    def test_suggested_stock_levels(self):
        assert calculations.suggested_stock_levels(Decimal('10.5')) == (147, 473)

    def test_usage_costs(self):
        assert calculations.daily_cost(100, Decimal('2.00')) == Decimal('200.00')
        assert calculations.cost_per_bird(Decimal('200.00'), 200) == Decimal('1.00')
        assert calculations.feed_per_bird(100, 200) == Decimal('0.500')
        assert calculations.actual_consumption(100, 5) == Decimal('95.00')


# =============================================================================
# MODELS
# =============================================================================

class TestFeedStockModel:

    def test_derived_fields_on_save(self):
        stock = make_stock(baseline=400, average_daily_consumption=Decimal('50'))

        assert stock.total_cost == Decimal('800.00')
        assert stock.is_low_stock is True
        assert stock.is_critical is False
        assert stock.days_remaining == 8
        assert stock.status == 'Active'

    def test_deduct_more_than_available(self):
        stock = make_stock(baseline=100)
        with pytest.raises(InsufficientStockError):
            stock.deduct(Decimal('100.01'))

    def test_legacy_manager_hides_buckets(self):
        make_stock()
        legacy = make_legacy_item()

        assert list(FeedInventory.objects.all()) == [legacy]
        assert FeedStock.objects.count() == 2


# =============================================================================
# FEED STOCK API
# =============================================================================

class TestFeedStockAPI:

    def test_create_stock(self, api_client):
        response = api_client.post('/api/feed-stock', stock_payload(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Feed stock created successfully'
        data = response.data['data']
        assert data['current_quantity'] == Decimal('1000.00')
        assert data['baseline_quantity'] == Decimal('1000.00')
        assert data['total_cost'] == Decimal('2000.00')
        assert data['status'] == 'Active'

    def test_create_stock_with_trailing_slash(self, api_client):
        response = api_client.post('/api/feed-stock/', stock_payload(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert FeedStock.objects.count() == 1

    def test_upsert_replaces_quantity(self, api_client):
        api_client.post('/api/feed-stock', stock_payload(), format='json')

        response = api_client.post(
            '/api/feed-stock', stock_payload(baseline_quantity=800, supplier='New Supplier'), format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Feed stock updated successfully'
        assert response.data['data']['current_quantity'] == Decimal('800.00')
        assert response.data['data']['supplier'] == 'New Supplier'
        assert FeedStock.objects.count() == 1

    def test_upsert_resets_omitted_fields(self, api_client):
        api_client.post(
            '/api/feed-stock', stock_payload(notes='first', location='Shed 2'), format='json'
        )
        payload = stock_payload(baseline_quantity=800)
        del payload['minimum_threshold']

        response = api_client.post('/api/feed-stock', payload, format='json')

        assert response.status_code == status.HTTP_200_OK
        data = response.data['data']
        assert data['minimum_threshold'] == Decimal('100.00')
        assert data['notes'] == ''
        assert data['location'] == 'Main Storage'
        assert data['cost_per_unit'] == Decimal('2.00')

    def test_missing_fields(self, api_client):
        response = api_client.post('/api/feed-stock', {'feed_type': 'Layer Feed'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'month' in response.data['errors']
        assert 'expiry_date' in response.data['errors']

    def test_year_must_match_month(self, api_client):
        response = api_client.post('/api/feed-stock', stock_payload(year=2024), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'year' in response.data['errors']

    def test_bad_month_format(self, api_client):
        response = api_client.post('/api/feed-stock', stock_payload(month='2025-13'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'month' in response.data['errors']

    def test_negative_baseline_rejected(self, api_client):
        response = api_client.post('/api/feed-stock', stock_payload(baseline_quantity=-5), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'baseline_quantity' in response.data['errors']

    def test_list_defaults_to_active(self, api_client):
        make_stock(feed_type='Layer Feed')
        make_stock(feed_type='Grower Feed', baseline=0)

        active = api_client.get('/api/feed-stock')
        everything = api_client.get('/api/feed-stock?status=all')
        depleted = api_client.get('/api/feed-stock?status=Depleted')

        assert active.data['total'] == 1
        assert active.data['data'][0]['feed_type'] == 'Layer Feed'
        assert 'usage_stats' in active.data['data'][0]
        assert everything.data['total'] == 2
        assert depleted.data['data'][0]['feed_type'] == 'Grower Feed'

    def test_legacy_items_not_listed_as_stock(self, api_client):
        make_stock()
        legacy = make_legacy_item()

        stock_list = api_client.get('/api/feed-stock?status=all')
        stock_detail = api_client.get(f'/api/feed-stock/{legacy.id}')
        inventory_list = api_client.get('/api/feed-inventory')

        assert stock_list.data['total'] == 1
        assert stock_detail.status_code == status.HTTP_404_NOT_FOUND
        assert stock_detail.data['message'] == 'Feed stock not found'
        assert inventory_list.data['total'] == 1
        assert inventory_list.data['data'][0]['id'] == str(legacy.id)

    def test_detail_includes_usage_history(self, api_client):
        stock = make_stock(month='2025-01')
        FeedLedgerService().record_usage({
            'feed_type': 'Layer Feed', 'date': date(2025, 1, 3), 'quantity_used': Decimal('50'), 'recorded_by': 'Ama',
        })

        response = api_client.get(f'/api/feed-stock/{stock.id}')

        assert response.data['data']['stock']['current_quantity'] == Decimal('950.00')
        assert len(response.data['data']['usage_history']) == 1

    def test_reserved_status_is_sticky(self, api_client):
        stock = make_stock()

        response = api_client.put(f'/api/feed-stock/{stock.id}', {'status': 'Reserved'}, format='json')
        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['status'] == 'Reserved'

        api_client.put(f'/api/feed-stock/{stock.id}', {'notes': 'Held for new flock'}, format='json')
        stock.refresh_from_db()
        assert stock.status == 'Reserved'

    def test_derived_status_cannot_be_set(self, api_client):
        stock = make_stock()

        response = api_client.put(f'/api/feed-stock/{stock.id}', {'status': 'Depleted'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'status' in response.data['errors']

    def test_delete(self, api_client):
        stock = make_stock()

        response = api_client.delete(f'/api/feed-stock/{stock.id}')

        assert response.data['message'] == 'Feed stock deleted successfully'
        assert not FeedStock.objects.exists()


class TestFeedStockDeduction:

    def test_deduct(self, api_client):
        stock = make_stock(baseline=1000)

        response = api_client.post(
            f'/api/feed-stock/{stock.id}/deduct', {'quantity_used': 250, 'reason': 'Spillage'}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Stock deducted successfully'
        assert response.data['data']['current_quantity'] == Decimal('750.00')

    def test_deduct_everything_depletes(self, api_client):
        stock = make_stock(baseline=100)

        response = api_client.post(f'/api/feed-stock/{stock.id}/deduct', {'quantity_used': 100}, format='json')

        assert response.data['data']['status'] == 'Depleted'

    def test_deduct_too_much(self, api_client):
        stock = make_stock(baseline=100)

        response = api_client.post(f'/api/feed-stock/{stock.id}/deduct', {'quantity_used': 101}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'Cannot deduct 101.00 KG. Only 100.00 KG available.'
        stock.refresh_from_db()
        assert stock.current_quantity == Decimal('100.00')

    @pytest.mark.parametrize('quantity', [0, -5, 'lots'])
    def test_deduct_requires_positive_quantity(self, api_client, quantity):
        stock = make_stock()

        response = api_client.post(f'/api/feed-stock/{stock.id}/deduct', {'quantity_used': quantity}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'Quantity used must be a positive number'

    def test_deduct_unknown_stock(self, api_client):
        response = api_client.post(
            '/api/feed-stock/00000000-0000-0000-0000-000000000000/deduct', {'quantity_used': 5}, format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['message'] == 'Feed stock not found'


class TestFeedStockDashboard:

    def test_dashboard(self, api_client):
        make_stock(feed_type='Layer Feed', baseline=1000)
        make_stock(feed_type='Grower Feed', baseline=200)
        today = timezone.localdate()
        FeedLedgerService().record_usage({
            'feed_type': 'Layer Feed', 'date': today, 'quantity_used': Decimal('100'), 'recorded_by': 'Kofi',
        })

        response = api_client.get('/api/feed-stock/dashboard')

        data = response.data['data']
        assert data['month'] == current_month()
        assert data['summary']['total_stock'] == 1100.0
        assert data['summary']['active_stock_types'] == 2
        assert data['summary']['low_stock_items'] == 1
        assert data['summary']['critical_items'] == 1
        assert data['summary']['total_daily_consumption'] == 100.0
        assert data['summary']['overall_days_remaining'] == 11
        assert data['top_consumers'] == [{'feed_type': 'Layer Feed', 'total_usage': 100.0}]
        assert [alert['feed_type'] for alert in data['alerts']['low_stock']] == ['Grower Feed']
        assert len(data['monthly_trends']) == 6
        assert data['monthly_trends'][-1]['month'] == current_month()
        assert data['monthly_trends'][-1]['total_usage'] == 100.0


# =============================================================================
# FEED USAGE API
# =============================================================================

class TestFeedUsageAPI:

    def test_record_usage(self, api_client):
        make_stock(month='2025-01')

        response = api_client.post('/api/feed-usage', usage_payload(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Feed usage recorded successfully'
        data = response.data['data']
        assert data['remaining_stock'] == 900.0
        assert data['stock_status'] == 'Active'
        assert data['is_low_stock'] is False
        assert data['usage']['month'] == '2025-01'
        assert data['usage']['cost_analysis'] == {
            'cost_per_kg': Decimal('2.00'),
            'daily_cost': Decimal('200.00'),
            'cost_per_bird': Decimal('1.00'),
        }

    def test_nested_groups_stored_flat(self, api_client):
        make_stock(month='2025-01')

        response = api_client.post('/api/feed-usage', usage_payload(
            quality_observations={'bird_appearance': 'Excellent', 'feed_acceptance': 'Fair'},
            health_indicators={'mortality': 2, 'egg_production': 170},
            batches_used=[{'batch_number': 'B-1', 'birds': 200, 'quantity': '100'}],
        ), format='json')

        usage = FeedUsage.objects.get(pk=response.data['data']['usage']['id'])
        assert usage.bird_appearance == 'Excellent'
        assert usage.feed_acceptance == 'Fair'
        assert usage.mortality == 2
        assert usage.egg_production == 170
        assert usage.batches_used == [{'batch_number': 'B-1', 'birds': 200, 'quantity': 100.0}]

    def test_unknown_choices_fall_back(self, api_client):
        make_stock(month='2025-01')

        response = api_client.post('/api/feed-usage', usage_payload(
            feeding_time='Midnight',
            weather='Foggy',
            quality_observations={'bird_appearance': 'Amazing', 'water_consumption': 'Lots'},
        ), format='json')

        usage = response.data['data']['usage']
        assert usage['feeding_time'] == 'Full Day'
        assert usage['weather'] == ''
        assert usage['quality_observations'] == {
            'bird_appearance': 'Good',
            'feed_acceptance': 'Good',
            'water_consumption': 'Normal',
        }

    def test_non_string_choice_rejected(self, api_client):
        make_stock(month='2025-01')

        response = api_client.post('/api/feed-usage', usage_payload(weather=['Sunny']), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'weather' in response.data['errors']
        assert not FeedUsage.objects.exists()

    def test_cost_snapshot_not_rederived(self, api_client):
        stock = make_stock(month='2025-01')
        created = api_client.post('/api/feed-usage', usage_payload(), format='json')
        usage_id = created.data['data']['usage']['id']

        api_client.put(f'/api/feed-stock/{stock.id}', {'cost_per_unit': '5.00'}, format='json')
        api_client.put(f'/api/feed-usage/{usage_id}', {'notes': 'checked'}, format='json')

        usage = FeedUsage.objects.get(pk=usage_id)
        assert usage.cost_per_kg == Decimal('2.00')
        assert usage.daily_cost == Decimal('200.00')

    def test_no_active_stock(self, api_client):
        response = api_client.post('/api/feed-usage', usage_payload(), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == (
            'No active stock found for Layer Feed in 2025-01. Please add stock first.'
        )
        assert not FeedUsage.objects.exists()

    def test_reserved_stock_cannot_be_used(self, api_client):
        make_stock(month='2025-01', status='Reserved')

        response = api_client.post('/api/feed-usage', usage_payload(), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_missing_fields(self, api_client):
        response = api_client.post('/api/feed-usage', {'feed_type': 'Layer Feed'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert set(response.data['errors']) == {'date', 'quantity_used', 'recorded_by'}

    def test_feed_type_and_date_fixed_after_recording(self, api_client):
        make_stock(month='2025-01')
        created = api_client.post('/api/feed-usage', usage_payload(), format='json')
        usage_id = created.data['data']['usage']['id']

        api_client.put(
            f'/api/feed-usage/{usage_id}',
            {'feed_type': 'Grower Feed', 'date': '2025-01-20'},
            format='json'
        )

        usage = FeedUsage.objects.get(pk=usage_id)
        assert usage.feed_type == 'Layer Feed'
        assert usage.date == date(2025, 1, 5)

    def test_verify(self, api_client):
        make_stock(month='2025-01')
        created = api_client.post('/api/feed-usage', usage_payload(), format='json')
        usage_id = created.data['data']['usage']['id']

        missing = api_client.put(f'/api/feed-usage/{usage_id}/verify', {}, format='json')
        verified = api_client.put(
            f'/api/feed-usage/{usage_id}/verify', {'verifier_name': 'Supervisor Ama'}, format='json'
        )

        assert missing.status_code == status.HTTP_400_BAD_REQUEST
        assert missing.data['message'] == 'Verifier name is required'
        assert verified.data['message'] == 'Feed usage record verified successfully'
        assert verified.data['data']['verified'] is True
        assert verified.data['data']['verified_by'] == 'Supervisor Ama'
        assert verified.data['data']['verified_at'] is not None

    def test_verify_unknown_usage(self, api_client):
        response = api_client.put(
            '/api/feed-usage/00000000-0000-0000-0000-000000000000/verify',
            {'verifier_name': 'Ama'},
            format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['message'] == 'Feed usage record not found'

    def test_list_filters(self, api_client):
        make_stock(month='2025-01')
        api_client.post('/api/feed-usage', usage_payload(), format='json')
        api_client.post('/api/feed-usage', usage_payload(date='2025-01-06', recorded_by='Ama'), format='json')

        by_recorder = api_client.get('/api/feed-usage?recorded_by=ama')
        by_range = api_client.get('/api/feed-usage?start_date=2025-01-06')

        assert by_recorder.data['total'] == 1
        assert by_range.data['data'][0]['date'] == '2025-01-06'


class TestFeedUsageAnalytics:

    @pytest.fixture
    def usage_history(self, api_client):
        make_stock(month='2025-01')
        api_client.post('/api/feed-usage', usage_payload(weather='Hot'), format='json')
        api_client.post('/api/feed-usage', usage_payload(
            date='2025-01-06', quantity_used=300, weather='Hot',
            quality_observations={'bird_appearance': 'Excellent'},
        ), format='json')

    def test_summary(self, api_client, usage_history):
        response = api_client.get('/api/feed-usage/analytics?start_date=2025-01-01&end_date=2025-01-10')

        data = response.data['data']
        assert data['summary']['total_records'] == 2
        assert data['summary']['total_usage'] == 400.0
        assert data['summary']['total_cost'] == 800.0
        assert data['summary']['average_daily_usage'] == 40.0
        assert data['summary']['period'] == {'start_date': '2025-01-01', 'end_date': '2025-01-10', 'type': 'daily'}
        assert len(data['consumption_trends']) == 2
        assert data['weather_impact'] == [
            {'weather': 'Hot', 'average_usage': 200.0, 'average_feed_per_bird': 1.0, 'record_count': 2}
        ]
        assert data['quality_summary']['bird_appearance_score'] == 3.5

    def test_monthly_period(self, api_client, usage_history):
        response = api_client.get(
            '/api/feed-usage/analytics?start_date=2025-01-01&end_date=2025-01-31&period=monthly'
        )

        trends = response.data['data']['consumption_trends']
        assert len(trends) == 1
        assert trends[0]['total_usage'] == 400.0

    def test_invalid_feed_type(self, api_client):
        response = api_client.get('/api/feed-usage/analytics?feed_type=Cake')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'feed_type' in response.data['errors']


# =============================================================================
# LEGACY INVENTORY API
# =============================================================================

class TestFeedInventoryAPI:

    def test_create_item(self, api_client):
        response = api_client.post('/api/feed-inventory', {
            'feed_type': 'Chick Starter',
            'current_quantity': 600,
            'supplier': 'Agro Feeds Ltd',
            'last_restocked': '2025-01-02',
            'expiry_date': '2099-06-30',
            'cost_per_unit': '3.00',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Feed inventory item created successfully'
        assert response.data['data']['total_cost'] == Decimal('1800.00')

        item = FeedInventory.objects.get()
        assert item.month is None
        assert item.baseline_quantity == Decimal('600.00')

    def test_missing_fields(self, api_client):
        response = api_client.post('/api/feed-inventory', {'feed_type': 'Chick Starter'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'last_restocked' in response.data['errors']

    def test_not_found(self, api_client):
        stock = make_stock()

        response = api_client.get(f'/api/feed-inventory/{stock.id}')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['message'] == 'Feed inventory item not found'

    def test_summary(self, api_client):
        make_legacy_item(feed_type='Grower Feed', quantity=900)
        make_legacy_item(feed_type='Layer Feed', quantity=80, minimum_threshold=Decimal('100'))
        make_stock()

        response = api_client.get('/api/feed-inventory/summary')

        data = response.data['data']
        assert data['total_items'] == 2
        assert data['total_quantity'] == 980.0
        assert data['low_stock_items'] == 1
        assert data['days_will_last'] == 3
        assert [item['feed_type'] for item in data['low_stock_items_list']] == ['Layer Feed']


# =============================================================================
# AUTOMATION
# =============================================================================

class TestFeedAutomation:

    def test_daily_job_refreshes_averages(self):
        stock = make_stock(baseline=1000)
        today = timezone.localdate()
        FeedUsage.objects.create(
            feed_type='Layer Feed', date=today, quantity_used=Decimal('120'), recorded_by='Kofi',
        )

        result = FeedAutomationScheduler().run_job('daily')

        assert result['status'] == 'success'
        assert result['passes']['update_consumption_averages']['updated'] == 1
        stock.refresh_from_db()
        assert stock.average_daily_consumption == Decimal('120.00')
        assert stock.days_remaining == 8

    def test_status_transitions(self):
        expired = make_stock(feed_type='Layer Feed')
        empty = make_stock(feed_type='Grower Feed')
        FeedStock.objects.filter(pk=expired.pk).update(expiry_date=timezone.localdate() - timedelta(days=1))
        FeedStock.objects.filter(pk=empty.pk).update(current_quantity=Decimal('0'))

        result = FeedAutomationScheduler().update_stock_status()

        assert result['expired'] == 1
        assert result['depleted'] == 1
        assert FeedStock.objects.get(pk=expired.pk).status == 'Expired'
        assert FeedStock.objects.get(pk=empty.pk).status == 'Depleted'

    def test_restocked_bucket_reactivates(self):
        stock = make_stock(baseline=0)
        assert stock.status == 'Depleted'
        FeedStock.objects.filter(pk=stock.pk).update(current_quantity=Decimal('50'))

        result = FeedAutomationScheduler().update_stock_status()

        assert result['reactivated'] == 1
        assert FeedStock.objects.get(pk=stock.pk).status == 'Active'

    def test_alerts(self):
        make_stock(feed_type='Layer Feed', baseline=200)
        make_stock(feed_type='Grower Feed', baseline=400)
        make_stock(
            feed_type='Chick Starter', baseline=900,
            expiry_date=timezone.localdate() + timedelta(days=5),
        )
        scheduler = FeedAutomationScheduler()

        low = scheduler.check_low_stock_alerts()
        expiring = scheduler.check_expiry_alerts()

        assert low['low_stock'] == 2
        assert low['critical'] == 1
        assert expiring['expiring'] == 1
        assert expiring['urgent'] == 1

    def test_stockout_prediction(self):
        make_stock(baseline=600, average_daily_consumption=Decimal('100'))

        result = FeedAutomationScheduler().predict_stockouts()

        assert result['alerts'] == 1
        assert result['items'][0]['days_remaining'] == 6

    def test_inventory_suggestions(self):
        make_stock(average_daily_consumption=Decimal('10.5'))

        result = FeedAutomationScheduler().optimize_inventory_levels()

        assert result['suggestions'][0]['suggested_threshold'] == 147
        assert result['suggestions'][0]['suggested_baseline'] == 473

    def test_failing_pass_does_not_stop_job(self):
        scheduler = FeedAutomationScheduler()

        def broken():
            raise RuntimeError('boom')
        broken.__name__ = 'check_low_stock_alerts'
        scheduler.jobs['daily'][1] = broken

        result = scheduler.run_job('daily')

        assert result['status'] == 'partial'
        assert result['passes']['check_low_stock_alerts'] == {'status': 'error', 'error': 'boom'}
        assert result['passes']['predict_stockouts']['status'] == 'success'

    def test_unknown_job(self):
        with pytest.raises(UnknownJobError):
            FeedAutomationScheduler().run_job('hourly')


class TestAutomationAPI:

    def test_status_lists_jobs(self, api_client):
        response = api_client.get('/api/automation/status')

        data = response.data['data']
        assert data['status'] == 'running'
        jobs = {job['name']: job for job in data['scheduled_jobs']}
        assert set(jobs) == {'daily', 'monthly', 'weekly'}
        assert jobs['daily']['schedule'] == '0 6 * * *'
        assert jobs['daily']['last_run'] is None

    def test_trigger_records_last_run(self, api_client):
        response = api_client.post('/api/automation/trigger', {'type': 'weekly'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'weekly automation completed successfully'
        assert response.data['data']['job'] == 'weekly'

        jobs = {job['name']: job for job in api_client.get('/api/automation/status').data['data']['scheduled_jobs']}
        assert jobs['weekly']['last_run'] is not None

    def test_trigger_invalid_type(self, api_client):
        response = api_client.post('/api/automation/trigger', {'type': 'hourly'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'Invalid automation type. Use one of: daily, monthly, weekly'

    @pytest.mark.parametrize('job_type', [['daily'], {'name': 'daily'}, None])
    def test_trigger_non_string_type(self, api_client, job_type):
        response = api_client.post('/api/automation/trigger', {'type': job_type}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False


# =============================================================================
# MANAGEMENT COMMANDS
# =============================================================================

class TestManagementCommands:

    def test_run_feed_automation(self):
        out = StringIO()
        call_command('run_feed_automation', '--job', 'monthly', stdout=out)

        assert 'Feed automation completed' in out.getvalue()

    def test_run_feed_automation_unknown_job(self):
        with pytest.raises(CommandError):
            call_command('run_feed_automation', '--job', 'hourly', stdout=StringIO())

    def test_import_legacy_records(self, tmp_path):
        export = tmp_path / 'feedinventories.json'
        export.write_text(json.dumps([
            {
                'type': 'Layer Feed', 'quantity': 700, 'supplier': 'Agro',
                'expiryDate': {'$date': '2099-01-01T00:00:00Z'}, 'month': '2025-01',
            },
            {
                'feedType': 'Grower Feed', 'currentQuantity': '350.5', 'supplier': 'Agro',
                'expiryDate': '2099-02-01', 'lastRestocked': '2024-12-20',
            },
            {'type': 'Cake', 'quantity': 1, 'supplier': 'X', 'expiryDate': '2099-01-01'},
        ]))

        out = StringIO()
        call_command('import_legacy_feed_records', str(export), stdout=out)

        stock = FeedStock.objects.get(month='2025-01')
        assert stock.feed_type == 'Layer Feed'
        assert stock.current_quantity == Decimal('700.00')
        assert stock.year == 2025
        legacy = FeedInventory.objects.get()
        assert legacy.current_quantity == Decimal('350.50')
        assert 'skipped 1' in out.getvalue()

    def test_import_dry_run(self, tmp_path):
        export = tmp_path / 'feedinventories.jsonl'
        export.write_text(
            '{"type": "Layer Feed", "quantity": 10, "supplier": "Agro", "expiryDate": "2099-01-01"}\n'
        )

        call_command('import_legacy_feed_records', str(export), '--dry-run', stdout=StringIO())

        assert not FeedStock.objects.exists()
