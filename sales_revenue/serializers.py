from rest_framework import serializers

from .models import SalesOrder


class SalesOrderSerializer(serializers.ModelSerializer):

    class Meta:
        model = SalesOrder
        fields = [
            'id', 'order_number',
            'customer_name', 'customer_phone', 'customer_email',
            'product_type', 'quantity', 'unit_price', 'total_amount',
            'order_date', 'delivery_date', 'status', 'payment_status',
            'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'total_amount', 'created_at', 'updated_at']
        extra_kwargs = {
            # Uniqueness is reported as "Order number already exists" by the view
            'order_number': {'validators': []},
        }

    def validate_customer_email(self, value):
        return value.lower()

    def validate(self, attrs):
        order_date = attrs.get('order_date', getattr(self.instance, 'order_date', None))
        delivery_date = attrs.get('delivery_date', getattr(self.instance, 'delivery_date', None))
        if order_date and delivery_date and delivery_date < order_date:
            raise serializers.ValidationError({'delivery_date': "Delivery date cannot be before the order date"})
        return attrs
