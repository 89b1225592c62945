"""
Tests for egg production records
"""
from decimal import Decimal

import pytest
from rest_framework import status

from egg_production.models import EggProduction

pytestmark = pytest.mark.django_db


@pytest.fixture
def egg_record():
    return EggProduction.objects.create(
        date='2025-03-10',
        batch_number='BATCH-001',
        birds=200,
        eggs_collected=180,
        damaged_eggs=4,
    )


class TestEggProductionModel:

    def test_production_rate_calculated(self, egg_record):
        assert egg_record.egg_production_rate == Decimal('90.00')
        assert egg_record.effective_eggs == 176

    def test_rate_recalculated_on_update(self, egg_record):
        egg_record.eggs_collected = 150
        egg_record.save()
        egg_record.refresh_from_db()

        assert egg_record.egg_production_rate == Decimal('75.00')

    def test_rate_rounded_to_two_places(self):
        record = EggProduction.objects.create(
            date='2025-03-11', batch_number='BATCH-002', birds=3, eggs_collected=2
        )
        assert record.egg_production_rate == Decimal('66.67')


class TestEggProductionAPI:

    def test_create_record(self, api_client):
        response = api_client.post('/api/egg-production', {
            'date': '2025-03-12',
            'batch_number': 'BATCH-003',
            'birds': 250,
            'eggs_collected': 200,
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['success'] is True
        assert response.data['message'] == 'Egg production record created successfully'
        assert response.data['data']['egg_production_rate'] == Decimal('80.00')

    def test_duplicate_batch_day_rejected(self, api_client, egg_record):
        response = api_client.post('/api/egg-production', {
            'date': '2025-03-10',
            'batch_number': 'BATCH-001',
            'birds': 200,
            'eggs_collected': 170,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'A record for this batch already exists on this date'
        assert EggProduction.objects.count() == 1

    def test_damaged_eggs_cannot_exceed_collected(self, api_client):
        response = api_client.post('/api/egg-production', {
            'date': '2025-03-12',
            'batch_number': 'BATCH-004',
            'birds': 100,
            'eggs_collected': 10,
            'damaged_eggs': 11,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'damaged_eggs' in response.data['errors']

    def test_zero_birds_rejected(self, api_client):
        response = api_client.post('/api/egg-production', {
            'date': '2025-03-12',
            'batch_number': 'BATCH-005',
            'birds': 0,
            'eggs_collected': 10,
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'birds' in response.data['errors']

    def test_retrieve(self, api_client, egg_record):
        response = api_client.get(f'/api/egg-production/{egg_record.id}')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['batch_number'] == 'BATCH-001'
        assert response.data['data']['effective_eggs'] == 176

    def test_update_is_partial(self, api_client, egg_record):
        response = api_client.put(
            f'/api/egg-production/{egg_record.id}',
            {'eggs_collected': 100},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Egg production record updated successfully'
        assert response.data['data']['batch_number'] == 'BATCH-001'
        assert response.data['data']['egg_production_rate'] == Decimal('50.00')

    def test_delete(self, api_client, egg_record):
        response = api_client.delete(f'/api/egg-production/{egg_record.id}')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Egg production record deleted successfully'
        assert not EggProduction.objects.exists()

    def test_filter_by_batch_and_dates(self, api_client, egg_record):
        EggProduction.objects.create(date='2025-04-01', batch_number='BATCH-009', birds=50, eggs_collected=40)

        by_batch = api_client.get('/api/egg-production?batch_number=BATCH-009')
        by_date = api_client.get('/api/egg-production?start_date=2025-03-01&end_date=2025-03-31')

        assert by_batch.data['total'] == 1
        assert by_date.data['total'] == 1
        assert by_date.data['data'][0]['batch_number'] == 'BATCH-001'


class TestEggProductionSummary:

    def test_summary(self, api_client, egg_record):
        EggProduction.objects.create(
            date='2025-03-11', batch_number='BATCH-001', birds=200, eggs_collected=160, damaged_eggs=6
        )

        response = api_client.get('/api/egg-production/summary')

        data = response.data['data']
        assert data['total_records'] == 2
        assert data['total_eggs'] == 340
        assert data['total_damaged_eggs'] == 10
        assert data['effective_eggs'] == 330
        assert data['average_production_rate'] == 85.0

    def test_summary_empty(self, api_client):
        response = api_client.get('/api/egg-production/summary')

        assert response.data['data']['total_records'] == 0
        assert response.data['data']['average_production_rate'] == 0.0
