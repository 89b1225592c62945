from django_filters import rest_framework as filters

from .models import ScheduledTask


class ScheduledTaskFilter(filters.FilterSet):
    status = filters.ChoiceFilter(choices=ScheduledTask.STATUS_CHOICES)
    category = filters.ChoiceFilter(choices=ScheduledTask.CATEGORY_CHOICES)
    priority = filters.ChoiceFilter(choices=ScheduledTask.PRIORITY_CHOICES)
    assigned_to = filters.CharFilter(lookup_expr='icontains')
    date = filters.DateFilter()

    class Meta:
        model = ScheduledTask
        fields = ['status', 'category', 'priority', 'assigned_to', 'date']
