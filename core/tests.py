"""
Tests for the health endpoint, error envelopes and list conventions
"""
from datetime import date, timedelta
from unittest.mock import patch

import pytest
from rest_framework import status

from egg_production.models import EggProduction

pytestmark = pytest.mark.django_db


def make_egg_records(count, start=date(2025, 3, 1)):
    return [
        EggProduction.objects.create(
            date=start + timedelta(days=offset),
            batch_number='BATCH-A',
            birds=100,
            eggs_collected=80 + offset,
        )
        for offset in range(count)
    ]


class TestHealthCheck:

    def test_health_ok(self, api_client):
        response = api_client.get('/api/health')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['status'] == 'OK'
        assert response.data['database']['status'] == 'connected'
        assert 'timestamp' in response.data

    def test_health_degraded_when_database_down(self, api_client):
        with patch('core.views.check_database', return_value='disconnected'):
            response = api_client.get('/api/health')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data['success'] is False
        assert response.data['database']['status'] == 'disconnected'


class TestErrorEnvelope:

    def test_unknown_route(self, api_client):
        response = api_client.get('/api/does-not-exist')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {'success': False, 'message': 'API endpoint not found'}

    def test_missing_record_uses_view_message(self, api_client):
        response = api_client.get('/api/egg-production/00000000-0000-0000-0000-000000000000')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {'success': False, 'message': 'Egg production record not found'}

    def test_missing_required_fields_listed(self, api_client):
        response = api_client.post('/api/egg-production', {'date': '2025-03-01'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert set(response.data['errors']) == {'batch_number', 'birds', 'eggs_collected'}


class TestListConventions:

    def test_pagination_envelope(self, api_client):
        make_egg_records(12)

        response = api_client.get('/api/egg-production')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True
        assert response.data['count'] == 10
        assert response.data['total'] == 12
        assert response.data['page'] == 1
        assert response.data['pages'] == 2

    def test_page_and_limit(self, api_client):
        make_egg_records(12)

        response = api_client.get('/api/egg-production?page=3&limit=5')

        assert response.data['count'] == 2
        assert response.data['page'] == 3
        assert response.data['pages'] == 3

    def test_default_sort_newest_first(self, api_client):
        make_egg_records(3)

        response = api_client.get('/api/egg-production')

        dates = [item['date'] for item in response.data['data']]
        assert dates == ['2025-03-03', '2025-03-02', '2025-03-01']

    def test_sort_by_and_order(self, api_client):
        make_egg_records(3)

        response = api_client.get('/api/egg-production?sort_by=eggs_collected&sort_order=asc')

        eggs = [item['eggs_collected'] for item in response.data['data']]
        assert eggs == [80, 81, 82]

    def test_unknown_sort_field_falls_back_to_default(self, api_client):
        make_egg_records(2)

        response = api_client.get('/api/egg-production?sort_by=notes')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data'][0]['date'] == '2025-03-02'


class TestSystemHealthReport:

    def test_report(self):
        from core.tasks import generate_system_health_report

        report = generate_system_health_report()

        assert report['database'] == 'connected'
        assert report['cache'] == 'healthy'


class TestTrailingSlash:

    @pytest.mark.parametrize('url', ['/api/health', '/api/health/'])
    def test_health(self, api_client, url):
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK

    @pytest.mark.parametrize('url', [
        '/api/egg-production/',
        '/api/sales-orders/',
        '/api/feed-stock/',
        '/api/feed-usage/',
        '/api/feed-inventory/',
        '/api/task-scheduling/',
        '/api/financial-records/',
        '/api/egg-production/summary/',
    ])
    def test_list_routes_accept_slash(self, api_client, url):
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['success'] is True

    def test_detail_route_accepts_slash(self, api_client):
        record = make_egg_records(1)[0]

        response = api_client.get(f'/api/egg-production/{record.id}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['id'] == str(record.id)
