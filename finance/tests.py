"""
Tests for income and expense records
"""
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework import status

from finance.models import FinancialRecord, subcategory_matches

pytestmark = pytest.mark.django_db


def record_payload(**overrides):
    payload = {
        'date': '2025-03-05',
        'description': 'Egg sales to market',
        'category': 'Income',
        'subcategory': 'Egg Sales',
        'amount': '500.00',
        'payment_method': 'Cash',
        'reference': 'RCPT-001',
    }
    payload.update(overrides)
    return payload


def create_record(**overrides):
    fields = {
        'date': timezone.localdate(),
        'description': 'Record',
        'category': 'Income',
        'amount': Decimal('100.00'),
        'payment_method': 'Cash',
    }
    fields.update(overrides)
    return FinancialRecord.objects.create(**fields)


class TestSubcategories:

    def test_subcategory_matches(self):
        assert subcategory_matches('Income', 'Egg Sales')
        assert subcategory_matches('Expense', '')
        assert not subcategory_matches('Income', 'Feed & Nutrition')


class TestFinancialRecordAPI:

    def test_create_computes_net(self, api_client):
        response = api_client.post(
            '/api/financial-records', record_payload(tax_amount='25.00'), format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['data']['net_amount'] == Decimal('475.00')
        assert response.data['data']['status'] == 'Completed'

    def test_duplicate_reference(self, api_client):
        create_record(reference='RCPT-001')

        response = api_client.post('/api/financial-records', record_payload(), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'Reference number already exists'

    def test_subcategory_must_match_category(self, api_client):
        response = api_client.post(
            '/api/financial-records',
            record_payload(category='Expense', subcategory='Egg Sales'),
            format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'subcategory' in response.data['errors']

    def test_tax_cannot_exceed_amount(self, api_client):
        response = api_client.post(
            '/api/financial-records', record_payload(tax_amount='600.00'), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'tax_amount' in response.data['errors']

    def test_filter_by_category(self, api_client):
        create_record(reference='A', category='Income')
        create_record(reference='B', category='Expense', subcategory='Labor Costs')

        response = api_client.get('/api/financial-records?category=Expense')

        assert response.data['total'] == 1
        assert response.data['data'][0]['reference'] == 'B'


class TestFinancialSummary:

    def test_summary_totals(self, api_client):
        create_record(reference='I-1', amount=Decimal('800.00'), subcategory='Egg Sales')
        create_record(reference='I-2', amount=Decimal('200.00'), subcategory='Chick Sales')
        create_record(
            reference='E-1', category='Expense', subcategory='Feed & Nutrition',
            amount=Decimal('300.00'), payment_method='Bank Transfer',
        )

        response = api_client.get('/api/financial-records/summary')

        data = response.data['data']
        assert data['total_income'] == 1000.0
        assert data['total_expenses'] == 300.0
        assert data['net_profit'] == 700.0
        assert data['this_month'] == {'income': 1000.0, 'expenses': 300.0, 'profit': 700.0}
        assert data['income_by_subcategory'][0] == {'subcategory': 'Egg Sales', 'total': 800.0}
        assert data['expenses_by_subcategory'] == [{'subcategory': 'Feed & Nutrition', 'total': 300.0}]
        assert len(data['monthly_trends']) == 1
        assert data['monthly_trends'][0]['profit'] == 700.0
