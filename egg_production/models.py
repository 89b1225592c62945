"""
Egg Production Models

Daily egg collection per flock batch.
"""

import uuid
from decimal import Decimal, ROUND_HALF_UP

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


class EggProduction(models.Model):
    """
    Eggs collected from one batch on one day.

    The production rate is recalculated on every save.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    date = models.DateField(help_text="Collection date")
    batch_number = models.CharField(max_length=100, help_text="Flock batch the eggs came from")
    birds = models.PositiveIntegerField(validators=[MinValueValidator(1)], help_text="Birds in the batch")
    eggs_collected = models.PositiveIntegerField()
    damaged_eggs = models.PositiveIntegerField(default=0)
    egg_production_rate = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="eggs_collected / birds × 100"
    )
    notes = models.TextField(blank=True)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', 'batch_number']
        verbose_name = 'Egg Production Record'
        verbose_name_plural = 'Egg Production Records'
        constraints = [
            models.UniqueConstraint(fields=['date', 'batch_number'], name='unique_egg_production_per_batch_day'),
        ]
        indexes = [
            models.Index(fields=['-date']),
            models.Index(fields=['batch_number']),
        ]

    def __str__(self):
        return f"{self.batch_number} - {self.date} ({self.eggs_collected} eggs)"

    @property
    def effective_eggs(self):
        return self.eggs_collected - self.damaged_eggs

    def recalculate(self):
        if self.birds:
            rate = Decimal(self.eggs_collected) / Decimal(self.birds) * 100
            self.egg_production_rate = rate.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        else:
            self.egg_production_rate = Decimal('0.00')

    def save(self, *args, **kwargs):
        """Recalculate the production rate before saving."""
        self.recalculate()
        super().save(*args, **kwargs)

    def clean(self):
        if self.damaged_eggs and self.eggs_collected is not None and self.damaged_eggs > self.eggs_collected:
            raise ValidationError({'damaged_eggs': "Damaged eggs cannot exceed eggs collected"})
