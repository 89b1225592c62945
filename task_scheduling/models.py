"""
Task Scheduling Models

Day-to-day farm work assigned to staff.
"""

import uuid

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class ScheduledTask(models.Model):
    """
    A farm task scheduled for a date and time.

    ``completed_at`` is stamped when the task moves to Completed and
    cleared if it leaves Completed again.
    """

    CATEGORY_CHOICES = [
        ('Bird Care', 'Bird Care'),
        ('Egg Collection', 'Egg Collection'),
        ('Cleaning & Maintenance', 'Cleaning & Maintenance'),
        ('Feed Management', 'Feed Management'),
        ('Inventory', 'Inventory'),
    ]

    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('In Progress', 'In Progress'),
        ('Completed', 'Completed'),
        ('Cancelled', 'Cancelled'),
        ('Overdue', 'Overdue'),
    ]

    PRIORITY_CHOICES = [
        ('Low', 'Low'),
        ('Medium', 'Medium'),
        ('High', 'High'),
        ('Critical', 'Critical'),
    ]

    RECURRING_PATTERN_CHOICES = [
        ('Daily', 'Daily'),
        ('Weekly', 'Weekly'),
        ('Monthly', 'Monthly'),
        ('Custom', 'Custom'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Task
    date = models.DateField()
    time = models.TimeField()
    task_description = models.CharField(max_length=500)
    category = models.CharField(max_length=30, choices=CATEGORY_CHOICES)
    estimated_duration = models.PositiveIntegerField(
        default=60,
        validators=[MinValueValidator(1)],
        help_text="Minutes"
    )
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='Medium')
    location = models.CharField(max_length=100, default='Farm')
    equipment = models.JSONField(default=list, blank=True, help_text="Equipment names")

    # Assignment
    assigned_to = models.CharField(max_length=100)
    assigned_to_contact = models.CharField(max_length=100, blank=True)

    # Progress
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending', db_index=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    completed_by = models.CharField(max_length=100, blank=True)

    # Recurrence
    is_recurring = models.BooleanField(default=False)
    recurring_pattern = models.CharField(max_length=10, choices=RECURRING_PATTERN_CHOICES, blank=True)

    notes = models.TextField(blank=True)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['date', 'time']
        verbose_name = 'Scheduled Task'
        verbose_name_plural = 'Scheduled Tasks'
        indexes = [
            models.Index(fields=['date', 'status']),
            models.Index(fields=['assigned_to']),
        ]

    def __str__(self):
        return f"{self.date} {self.time} - {self.task_description[:50]}"

    def save(self, *args, **kwargs):
        """Stamp or clear completion time to match the status."""
        if self.status == 'Completed':
            if not self.completed_at:
                self.completed_at = timezone.now()
        else:
            self.completed_at = None
        super().save(*args, **kwargs)

    def clean(self):
        if self.is_recurring and not self.recurring_pattern:
            raise ValidationError({'recurring_pattern': "Recurring pattern is required for recurring tasks"})
