from rest_framework import serializers

from .models import ScheduledTask


class ScheduledTaskSerializer(serializers.ModelSerializer):
    equipment = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
    )

    class Meta:
        model = ScheduledTask
        fields = [
            'id', 'date', 'time', 'task_description', 'category',
            'estimated_duration', 'priority', 'location', 'equipment',
            'assigned_to', 'assigned_to_contact',
            'status', 'completed_at', 'completed_by',
            'is_recurring', 'recurring_pattern',
            'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'completed_at', 'created_at', 'updated_at']

    def validate(self, attrs):
        is_recurring = attrs.get('is_recurring', getattr(self.instance, 'is_recurring', False))
        recurring_pattern = attrs.get('recurring_pattern', getattr(self.instance, 'recurring_pattern', ''))
        if is_recurring and not recurring_pattern:
            raise serializers.ValidationError(
                {'recurring_pattern': "Recurring pattern is required for recurring tasks"}
            )
        return attrs
