from django_filters import rest_framework as filters

from .models import EggProduction


class EggProductionFilter(filters.FilterSet):
    batch_number = filters.CharFilter()
    start_date = filters.DateFilter(field_name='date', lookup_expr='gte')
    end_date = filters.DateFilter(field_name='date', lookup_expr='lte')

    class Meta:
        model = EggProduction
        fields = ['batch_number', 'start_date', 'end_date']
