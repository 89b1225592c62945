"""
Tests for sales orders
"""
from decimal import Decimal

import pytest
from rest_framework import status

from sales_revenue.models import SalesOrder

pytestmark = pytest.mark.django_db


def order_payload(**overrides):
    payload = {
        'order_number': 'ORD-1001',
        'customer_name': 'Kwame Asante',
        'customer_phone': '+233241234567',
        'customer_email': 'Kwame@Example.com',
        'product_type': 'Large Eggs',
        'quantity': 30,
        'unit_price': '2.50',
        'order_date': '2025-03-01',
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def sales_order():
    return SalesOrder.objects.create(
        order_number='ORD-0001',
        customer_name='Ama Mensah',
        customer_phone='+233201111111',
        product_type='Medium Eggs',
        quantity=10,
        unit_price=Decimal('2.00'),
        order_date='2025-02-20',
    )


class TestSalesOrderAPI:

    def test_create_order_computes_total(self, api_client):
        response = api_client.post('/api/sales-orders', order_payload(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['data']['total_amount'] == Decimal('75.00')
        assert response.data['data']['customer_email'] == 'kwame@example.com'
        assert response.data['data']['status'] == 'Pending'
        assert response.data['data']['payment_status'] == 'Pending'

    def test_duplicate_order_number(self, api_client, sales_order):
        response = api_client.post(
            '/api/sales-orders', order_payload(order_number='ORD-0001'), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['message'] == 'Order number already exists'

    def test_missing_fields(self, api_client):
        response = api_client.post('/api/sales-orders', {'customer_name': 'Kofi'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'order_number' in response.data['errors']
        assert 'customer_phone' in response.data['errors']

    def test_delivery_before_order_rejected(self, api_client):
        response = api_client.post(
            '/api/sales-orders', order_payload(delivery_date='2025-02-01'), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'delivery_date' in response.data['errors']

    def test_invalid_product_type(self, api_client):
        response = api_client.post(
            '/api/sales-orders', order_payload(product_type='Duck Eggs'), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'product_type' in response.data['errors']

    def test_update_recalculates_total(self, api_client, sales_order):
        response = api_client.put(
            f'/api/sales-orders/{sales_order.id}',
            {'quantity': 20, 'status': 'Delivered'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['total_amount'] == Decimal('40.00')
        assert response.data['data']['status'] == 'Delivered'

    def test_not_found(self, api_client):
        response = api_client.get('/api/sales-orders/00000000-0000-0000-0000-000000000000')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['message'] == 'Sales order not found'

    def test_filter_by_status(self, api_client, sales_order):
        SalesOrder.objects.create(
            order_number='ORD-0002', customer_name='Yaw', customer_phone='0200000000',
            product_type='Small Eggs', quantity=5, unit_price=Decimal('1.50'), status='Delivered',
        )

        response = api_client.get('/api/sales-orders?status=Delivered')

        assert response.data['total'] == 1
        assert response.data['data'][0]['order_number'] == 'ORD-0002'


class TestSalesSummary:

    def test_summary(self, api_client, sales_order):
        SalesOrder.objects.create(
            order_number='ORD-0002', customer_name='Yaw', customer_phone='0200000000',
            product_type='Large Eggs', quantity=5, unit_price=Decimal('3.00'),
            status='Delivered', order_date='2025-02-21',
        )

        response = api_client.get('/api/sales-orders/summary')

        data = response.data['data']
        assert data['total_orders'] == 2
        assert data['total_revenue'] == 35.0
        assert data['pending_orders'] == 1
        assert data['completed_orders'] == 1
        assert data['top_products'][0]['product_type'] == 'Medium Eggs'

    def test_summary_date_range(self, api_client, sales_order):
        response = api_client.get('/api/sales-orders/summary?start_date=2025-03-01')

        assert response.data['data']['total_orders'] == 0
        assert response.data['data']['total_revenue'] == 0.0
