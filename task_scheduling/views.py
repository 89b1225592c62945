"""
Task Scheduling API Views
"""

from django.db.models import Count, Q
from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api import RecordDetailView, RecordListCreateView

from .filters import ScheduledTaskFilter
from .models import ScheduledTask
from .serializers import ScheduledTaskSerializer


class ScheduledTaskListCreateView(RecordListCreateView):
    """
    GET  /api/task-scheduling - List tasks (earliest first)
    POST /api/task-scheduling - Schedule a task
    """

    queryset = ScheduledTask.objects.all()
    serializer_class = ScheduledTaskSerializer
    filterset_class = ScheduledTaskFilter
    sort_fields = ('date', 'time', 'priority', 'status', 'category', 'assigned_to', 'created_at')
    default_sort = 'date'
    default_sort_order = 'asc'
    required_fields = ('date', 'task_description', 'category', 'assigned_to', 'time')
    create_message = 'Task created successfully'


class ScheduledTaskDetailView(RecordDetailView):
    """
    GET    /api/task-scheduling/<id>
    PUT    /api/task-scheduling/<id>
    DELETE /api/task-scheduling/<id>
    """

    queryset = ScheduledTask.objects.all()
    serializer_class = ScheduledTaskSerializer
    not_found_message = 'Task not found'
    update_message = 'Task updated successfully'
    delete_message = 'Task deleted successfully'


class TaskSummaryView(APIView):
    """
    GET /api/task-scheduling/summary - Task counts by status, category, priority and assignee
    """

    TOP_ASSIGNEES = 5

    def get(self, request):
        tasks = ScheduledTask.objects.all()

        counts = tasks.aggregate(
            total_tasks=Count('id'),
            pending_tasks=Count('id', filter=Q(status='Pending')),
            in_progress_tasks=Count('id', filter=Q(status='In Progress')),
            completed_tasks=Count('id', filter=Q(status='Completed')),
            cancelled_tasks=Count('id', filter=Q(status='Cancelled')),
            overdue_tasks=Count('id', filter=Q(status='Overdue')),
            todays_tasks=Count('id', filter=Q(date=timezone.localdate())),
        )

        by_category = [
            {'category': row['category'], 'count': row['count']}
            for row in tasks.values('category').annotate(count=Count('id')).order_by('-count', 'category')
        ]
        by_priority = [
            {'priority': row['priority'], 'count': row['count']}
            for row in tasks.values('priority').annotate(count=Count('id')).order_by('-count', 'priority')
        ]
        top_assignees = [
            {'assigned_to': row['assigned_to'], 'count': row['count']}
            for row in tasks.values('assigned_to')
            .annotate(count=Count('id'))
            .order_by('-count', 'assigned_to')[:self.TOP_ASSIGNEES]
        ]

        return Response({
            'success': True,
            'data': {
                **counts,
                'by_category': by_category,
                'by_priority': by_priority,
                'top_assignees': top_assignees,
            },
        })
