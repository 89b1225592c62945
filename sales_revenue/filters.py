from django_filters import rest_framework as filters

from .models import SalesOrder


class SalesOrderFilter(filters.FilterSet):
    status = filters.ChoiceFilter(choices=SalesOrder.STATUS_CHOICES)
    payment_status = filters.ChoiceFilter(choices=SalesOrder.PAYMENT_STATUS_CHOICES)
    product_type = filters.ChoiceFilter(choices=SalesOrder.PRODUCT_TYPE_CHOICES)

    class Meta:
        model = SalesOrder
        fields = ['status', 'payment_status', 'product_type']
