"""
Feed Inventory Serializers

Request validation and JSON shapes for feed stock, feed usage and the
legacy inventory view.
"""
from decimal import Decimal

from rest_framework import serializers

from .models import FeedInventory, FeedStock, FeedUsage


# =============================================================================
# FEED STOCK
# =============================================================================

class FeedStockSerializer(serializers.ModelSerializer):
    """Full stock bucket representation."""

    is_critical = serializers.BooleanField(read_only=True)

    class Meta:
        model = FeedStock
        fields = [
            'id', 'feed_type', 'month', 'year',
            'baseline_quantity', 'current_quantity', 'unit',
            'supplier', 'supplier_contact', 'last_restocked', 'delivery_date',
            'batch_number', 'quality_grade', 'location',
            'cost_per_unit', 'total_cost',
            'minimum_threshold', 'is_low_stock', 'is_critical',
            'expiry_date', 'days_until_expiry',
            'average_daily_consumption', 'days_remaining', 'projected_finish_date',
            'status', 'notes', 'created_at', 'last_updated',
        ]
        read_only_fields = fields


class FeedStockUpsertSerializer(serializers.ModelSerializer):
    """
    Input for the (feed_type, month) upsert.

    Uniqueness is resolved by the ledger service, so the model's
    unique constraint is not re-validated here.
    """

    baseline_quantity = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.00'),
    )

    class Meta:
        model = FeedStock
        fields = [
            'feed_type', 'month', 'year', 'baseline_quantity', 'unit',
            'supplier', 'supplier_contact', 'expiry_date', 'delivery_date',
            'cost_per_unit', 'minimum_threshold',
            'location', 'batch_number', 'quality_grade', 'notes',
        ]
        extra_kwargs = {
            'month': {'required': True, 'allow_null': False, 'allow_blank': False},
            'year': {'required': True, 'allow_null': False},
        }
        validators = []

    def validate(self, attrs):
        month = attrs['month']
        year = attrs['year']
        if not month.startswith(f'{year:04d}-'):
            raise serializers.ValidationError({'year': f"Year {year} does not match month {month}"})

        delivery_date = attrs.get('delivery_date')
        if delivery_date and attrs['expiry_date'] < delivery_date:
            raise serializers.ValidationError({'expiry_date': "Expiry date cannot be before the delivery date"})
        return attrs


class FeedStockUpdateSerializer(serializers.ModelSerializer):
    """Fields a stock bucket may change after creation."""

    status = serializers.ChoiceField(
        choices=[('Active', 'Active'), ('Reserved', 'Reserved')],
        required=False,
        help_text="Manual hold; Depleted and Expired are derived"
    )

    class Meta:
        model = FeedStock
        fields = [
            'supplier', 'supplier_contact', 'cost_per_unit', 'minimum_threshold',
            'expiry_date', 'location', 'batch_number', 'delivery_date',
            'quality_grade', 'notes', 'current_quantity', 'status',
        ]
        validators = []


class StockDeductionSerializer(serializers.Serializer):
    quantity_used = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01'),
    )
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)


# =============================================================================
# FEED USAGE
# =============================================================================

class LenientChoicesMixin:
    """
    Replace unknown choice values with a fallback instead of rejecting them.

    ``lenient_choices`` maps field name to fallback value.
    """
    lenient_choices = {}

    def to_internal_value(self, data):
        if isinstance(data, dict):
            data = data.copy()
            for field_name, fallback in self.lenient_choices.items():
                field = self.fields.get(field_name)
                value = data.get(field_name)
                # Non-string values go on to the ChoiceField and fail there
                if field is not None and isinstance(value, str) and value not in field.choices:
                    data[field_name] = fallback
        return super().to_internal_value(data)


class QualityObservationsSerializer(LenientChoicesMixin, serializers.ModelSerializer):
    lenient_choices = {
        'bird_appearance': 'Good',
        'feed_acceptance': 'Good',
        'water_consumption': 'Normal',
    }

    class Meta:
        model = FeedUsage
        fields = ['bird_appearance', 'feed_acceptance', 'water_consumption']
        extra_kwargs = {field: {'required': False} for field in fields}


class HealthIndicatorsSerializer(serializers.ModelSerializer):

    class Meta:
        model = FeedUsage
        fields = ['mortality', 'egg_production', 'average_weight']
        extra_kwargs = {field: {'required': False} for field in fields}


class CostAnalysisSerializer(serializers.ModelSerializer):

    class Meta:
        model = FeedUsage
        fields = ['cost_per_kg', 'daily_cost', 'cost_per_bird']
        read_only_fields = fields


class BatchUsageSerializer(serializers.Serializer):
    batch_number = serializers.CharField(max_length=100)
    birds = serializers.IntegerField(min_value=0)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))

    def to_internal_value(self, data):
        # Stored as JSON; keep numbers JSON-native
        value = super().to_internal_value(data)
        value['quantity'] = float(value['quantity'])
        return value


class FeedUsageSerializer(LenientChoicesMixin, serializers.ModelSerializer):
    """
    Feed usage record.

    Quality observations, health indicators and cost analysis are flat
    columns exposed as nested objects.
    """

    lenient_choices = {
        'feeding_time': 'Full Day',
        'weather': '',
    }

    month = serializers.CharField(read_only=True)
    batches_used = BatchUsageSerializer(many=True, required=False)
    quality_observations = QualityObservationsSerializer(source='*', required=False)
    health_indicators = HealthIndicatorsSerializer(source='*', required=False)
    cost_analysis = CostAnalysisSerializer(source='*', read_only=True)

    class Meta:
        model = FeedUsage
        fields = [
            'id', 'feed_type', 'date', 'month', 'quantity_used', 'unit',
            'batches_used', 'total_birds', 'feed_per_bird',
            'feeding_time', 'weather', 'temperature', 'humidity',
            'waste_percentage', 'actual_consumption', 'feed_efficiency',
            'location', 'recorded_by',
            'quality_observations', 'health_indicators', 'cost_analysis',
            'notes', 'verified', 'verified_by', 'verified_at',
            'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'feed_per_bird', 'actual_consumption',
            'verified', 'verified_by', 'verified_at',
            'created_at', 'updated_at',
        ]
        # (feed_type, date) uniqueness is checked by the ledger service
        validators = []


class FeedUsageUpdateSerializer(FeedUsageSerializer):
    """Usage edits; the feed type, date and recorder are fixed once recorded."""

    class Meta(FeedUsageSerializer.Meta):
        read_only_fields = FeedUsageSerializer.Meta.read_only_fields + [
            'feed_type', 'date', 'unit', 'recorded_by',
        ]


# =============================================================================
# LEGACY FEED INVENTORY
# =============================================================================

class FeedInventorySerializer(serializers.ModelSerializer):
    """Un-bucketed inventory item."""

    class Meta:
        model = FeedInventory
        fields = [
            'id', 'feed_type', 'current_quantity', 'unit',
            'supplier', 'supplier_contact', 'last_restocked', 'expiry_date',
            'cost_per_unit', 'total_cost', 'minimum_threshold', 'is_low_stock',
            'location', 'notes', 'status', 'created_at', 'last_updated',
        ]
        read_only_fields = [
            'id', 'total_cost', 'is_low_stock', 'status', 'created_at', 'last_updated',
        ]
        extra_kwargs = {
            'last_restocked': {'required': True},
            'current_quantity': {'required': True},
        }
        validators = []
