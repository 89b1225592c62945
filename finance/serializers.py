from rest_framework import serializers

from .models import FinancialRecord, subcategory_matches


class FinancialRecordSerializer(serializers.ModelSerializer):

    class Meta:
        model = FinancialRecord
        fields = [
            'id', 'date', 'description', 'category', 'subcategory',
            'amount', 'tax_amount', 'net_amount',
            'payment_method', 'reference', 'customer_supplier', 'status', 'receipt_url',
            'location', 'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'net_amount', 'created_at', 'updated_at']
        extra_kwargs = {
            # Uniqueness is reported as "Reference number already exists" by the view
            'reference': {'validators': []},
        }

    def validate(self, attrs):
        category = attrs.get('category', getattr(self.instance, 'category', None))
        subcategory = attrs.get('subcategory', getattr(self.instance, 'subcategory', ''))
        if not subcategory_matches(category, subcategory):
            raise serializers.ValidationError(
                {'subcategory': f"'{subcategory}' is not a {category} subcategory"}
            )

        amount = attrs.get('amount', getattr(self.instance, 'amount', None))
        tax_amount = attrs.get('tax_amount', getattr(self.instance, 'tax_amount', None))
        if amount is not None and tax_amount is not None and tax_amount > amount:
            raise serializers.ValidationError({'tax_amount': "Tax amount cannot exceed the amount"})
        return attrs
