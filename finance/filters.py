from django_filters import rest_framework as filters

from .models import FinancialRecord


class FinancialRecordFilter(filters.FilterSet):
    category = filters.ChoiceFilter(choices=FinancialRecord.CATEGORY_CHOICES)
    subcategory = filters.ChoiceFilter(choices=FinancialRecord.SUBCATEGORY_CHOICES)
    payment_method = filters.ChoiceFilter(choices=FinancialRecord.PAYMENT_METHOD_CHOICES)
    status = filters.ChoiceFilter(choices=FinancialRecord.STATUS_CHOICES)
    start_date = filters.DateFilter(field_name='date', lookup_expr='gte')
    end_date = filters.DateFilter(field_name='date', lookup_expr='lte')

    class Meta:
        model = FinancialRecord
        fields = ['category', 'subcategory', 'payment_method', 'status', 'start_date', 'end_date']
