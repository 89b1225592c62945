"""
Finance Models

Farm income and expense records.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models


# Subcategories allowed under each category
SUBCATEGORIES = {
    'Income': [
        'Egg Sales',
        'Chick Sales',
        'Equipment Rental',
        'Government Subsidies',
        'Other Income',
    ],
    'Expense': [
        'Feed & Nutrition',
        'Veterinary Services',
        'Equipment & Maintenance',
        'Labor Costs',
        'Utilities & Overhead',
        'Other Expenses',
    ],
}


def subcategory_matches(category, subcategory):
    """True when ``subcategory`` is empty or listed under ``category``."""
    return not subcategory or subcategory in SUBCATEGORIES.get(category, [])


class FinancialRecord(models.Model):
    """
    A single income or expense entry.

    Net amount (amount less tax) is recalculated on every save.
    """

    CATEGORY_CHOICES = [
        ('Income', 'Income'),
        ('Expense', 'Expense'),
    ]

    SUBCATEGORY_CHOICES = [
        (subcategory, subcategory)
        for subcategories in SUBCATEGORIES.values()
        for subcategory in subcategories
    ]

    PAYMENT_METHOD_CHOICES = [
        ('Cash', 'Cash'),
        ('Bank Transfer', 'Bank Transfer'),
        ('Cheque', 'Cheque'),
        ('Digital Wallet', 'Digital Wallet'),
        ('Credit Card', 'Credit Card'),
        ('Debit Card', 'Debit Card'),
    ]

    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Completed', 'Completed'),
        ('Cancelled', 'Cancelled'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    date = models.DateField()
    description = models.CharField(max_length=500)
    category = models.CharField(max_length=10, choices=CATEGORY_CHOICES)
    subcategory = models.CharField(max_length=30, choices=SUBCATEGORY_CHOICES, blank=True)

    # Amounts (GHS)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    tax_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    net_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="amount - tax_amount"
    )

    # Payment
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES)
    reference = models.CharField(max_length=100, unique=True, help_text="Receipt or transaction reference")
    customer_supplier = models.CharField(max_length=200, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='Completed')
    receipt_url = models.URLField(blank=True)

    location = models.CharField(max_length=100, default='Farm')
    notes = models.TextField(blank=True)

    # Metadata
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-created_at']
        verbose_name = 'Financial Record'
        verbose_name_plural = 'Financial Records'
        indexes = [
            models.Index(fields=['date', 'category']),
            models.Index(fields=['payment_method']),
        ]

    def __str__(self):
        return f"{self.category}: {self.description} - GHS {self.amount}"

    def save(self, *args, **kwargs):
        """Recalculate the net amount before saving."""
        self.net_amount = Decimal(self.amount or 0) - Decimal(self.tax_amount or 0)
        super().save(*args, **kwargs)

    def clean(self):
        if not subcategory_matches(self.category, self.subcategory):
            raise ValidationError({
                'subcategory': f"'{self.subcategory}' is not a {self.category} subcategory"
            })
