from rest_framework import serializers

from .models import EggProduction


class EggProductionSerializer(serializers.ModelSerializer):
    effective_eggs = serializers.IntegerField(read_only=True)

    class Meta:
        model = EggProduction
        fields = [
            'id', 'date', 'batch_number', 'birds', 'eggs_collected', 'damaged_eggs',
            'effective_eggs', 'egg_production_rate', 'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'egg_production_rate', 'created_at', 'updated_at']
        # Duplicate (date, batch_number) is reported by the view's IntegrityError handling
        validators = []

    def validate(self, attrs):
        eggs_collected = attrs.get('eggs_collected', getattr(self.instance, 'eggs_collected', 0))
        damaged_eggs = attrs.get('damaged_eggs', getattr(self.instance, 'damaged_eggs', 0))
        if damaged_eggs > eggs_collected:
            raise serializers.ValidationError({'damaged_eggs': "Damaged eggs cannot exceed eggs collected"})
        return attrs
