"""
Task Scheduling URL Configuration
"""

from django.urls import path

from core.api import with_trailing_slash

from .views import ScheduledTaskDetailView, ScheduledTaskListCreateView, TaskSummaryView

app_name = 'task_scheduling'

urlpatterns = with_trailing_slash([
    path('task-scheduling', ScheduledTaskListCreateView.as_view(), name='task-list'),
    path('task-scheduling/summary', TaskSummaryView.as_view(), name='task-summary'),
    path('task-scheduling/<uuid:pk>', ScheduledTaskDetailView.as_view(), name='task-detail'),
])
