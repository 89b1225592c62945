"""
Tests for farm task scheduling
"""
import pytest
from django.utils import timezone
from rest_framework import status

from task_scheduling.models import ScheduledTask

pytestmark = pytest.mark.django_db


def task_payload(**overrides):
    payload = {
        'date': '2025-03-15',
        'time': '07:30',
        'task_description': 'Collect eggs from house A',
        'category': 'Egg Collection',
        'assigned_to': 'Kofi',
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def scheduled_task():
    return ScheduledTask.objects.create(
        date='2025-03-15',
        time='06:00',
        task_description='Refill feeders',
        category='Feed Management',
        assigned_to='Ama',
        priority='High',
    )


class TestScheduledTaskAPI:

    def test_create_task_with_defaults(self, api_client):
        response = api_client.post('/api/task-scheduling', task_payload(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['message'] == 'Task created successfully'
        data = response.data['data']
        assert data['status'] == 'Pending'
        assert data['priority'] == 'Medium'
        assert data['location'] == 'Farm'
        assert data['estimated_duration'] == 60
        assert data['equipment'] == []

    def test_equipment_list(self, api_client):
        response = api_client.post(
            '/api/task-scheduling',
            task_payload(equipment=['Egg trays', 'Gloves']),
            format='json'
        )

        assert response.data['data']['equipment'] == ['Egg trays', 'Gloves']

    def test_missing_time(self, api_client):
        payload = task_payload()
        del payload['time']

        response = api_client.post('/api/task-scheduling', payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'time' in response.data['errors']

    def test_recurring_needs_pattern(self, api_client):
        response = api_client.post(
            '/api/task-scheduling', task_payload(is_recurring=True), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'recurring_pattern' in response.data['errors']

    def test_completing_sets_completed_at(self, api_client, scheduled_task):
        response = api_client.put(
            f'/api/task-scheduling/{scheduled_task.id}',
            {'status': 'Completed', 'completed_by': 'Ama'},
            format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['data']['completed_at'] is not None

        reopened = api_client.put(
            f'/api/task-scheduling/{scheduled_task.id}', {'status': 'Pending'}, format='json'
        )
        assert reopened.data['data']['completed_at'] is None

    def test_sorted_by_date_ascending(self, api_client, scheduled_task):
        ScheduledTask.objects.create(
            date='2025-03-10', time='08:00', task_description='Clean coop',
            category='Cleaning & Maintenance', assigned_to='Yaw',
        )

        response = api_client.get('/api/task-scheduling')

        assert [item['date'] for item in response.data['data']] == ['2025-03-10', '2025-03-15']

    def test_filter_by_assignee(self, api_client, scheduled_task):
        response = api_client.get('/api/task-scheduling?assigned_to=am')

        assert response.data['total'] == 1

    def test_not_found(self, api_client):
        response = api_client.delete('/api/task-scheduling/00000000-0000-0000-0000-000000000000')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['message'] == 'Task not found'


class TestTaskSummary:

    def test_summary_counts(self, api_client, scheduled_task):
        ScheduledTask.objects.create(
            date=timezone.localdate(), time='09:00', task_description='Vaccinate chicks',
            category='Bird Care', assigned_to='Ama', status='Completed',
        )

        response = api_client.get('/api/task-scheduling/summary')

        data = response.data['data']
        assert data['total_tasks'] == 2
        assert data['pending_tasks'] == 1
        assert data['completed_tasks'] == 1
        assert data['todays_tasks'] == 1
        assert data['top_assignees'] == [{'assigned_to': 'Ama', 'count': 2}]
