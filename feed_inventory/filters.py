"""
Query filters for the feed stock, feed usage and legacy inventory lists.
"""
from django_filters import rest_framework as filters

from .models import FeedInventory, FeedKind, FeedStock, FeedUsage


class FeedStockFilter(filters.FilterSet):
    """
    ``?status=all`` lists every status; without ``status`` the view
    restricts the list to Active buckets.
    """
    feed_type = filters.ChoiceFilter(choices=FeedKind.choices)
    month = filters.CharFilter()
    year = filters.NumberFilter()
    status = filters.CharFilter(method='filter_status')
    low_stock = filters.BooleanFilter(field_name='is_low_stock')

    class Meta:
        model = FeedStock
        fields = ['feed_type', 'month', 'year', 'status', 'low_stock']

    def filter_status(self, queryset, name, value):
        if value.lower() == 'all':
            return queryset
        return queryset.filter(status=value)


class FeedUsageFilter(filters.FilterSet):
    feed_type = filters.ChoiceFilter(choices=FeedKind.choices)
    date = filters.DateFilter()
    start_date = filters.DateFilter(field_name='date', lookup_expr='gte')
    end_date = filters.DateFilter(field_name='date', lookup_expr='lte')
    recorded_by = filters.CharFilter(lookup_expr='icontains')
    verified = filters.BooleanFilter()

    class Meta:
        model = FeedUsage
        fields = ['feed_type', 'date', 'start_date', 'end_date', 'recorded_by', 'verified']


class FeedInventoryFilter(filters.FilterSet):
    feed_type = filters.ChoiceFilter(choices=FeedKind.choices)
    low_stock = filters.BooleanFilter(field_name='is_low_stock')

    class Meta:
        model = FeedInventory
        fields = ['feed_type', 'low_stock']
