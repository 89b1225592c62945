"""
Django Management Command: Import Legacy Feed Records

Loads feed inventory documents exported from the old document store
(a JSON array or one JSON document per line) into the feedinventories
table. Old alias keys are mapped onto the canonical columns:

    type / feedType               -> feed_type
    quantity / currentQuantity    -> current_quantity

Documents with a month become stock buckets (updated in place when the
bucket already exists); documents without one become legacy inventory
items.

Usage:
    python manage.py import_legacy_feed_records feedinventories.json
    python manage.py import_legacy_feed_records feedinventories.json --dry-run
"""

import json
from decimal import InvalidOperation

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.dateparse import parse_date

from feed_inventory import calculations
from feed_inventory.models import FeedInventory, FeedKind, FeedStock


# Canonical column -> accepted document keys, first match wins
FIELD_ALIASES = {
    'feed_type': ('feed_type', 'feedType', 'type'),
    'current_quantity': ('current_quantity', 'currentQuantity', 'quantity'),
    'baseline_quantity': ('baseline_quantity', 'baselineQuantity'),
    'unit': ('unit',),
    'supplier': ('supplier',),
    'supplier_contact': ('supplier_contact', 'supplierContact'),
    'last_restocked': ('last_restocked', 'lastRestocked'),
    'delivery_date': ('delivery_date', 'deliveryDate'),
    'expiry_date': ('expiry_date', 'expiryDate'),
    'cost_per_unit': ('cost_per_unit', 'costPerUnit'),
    'minimum_threshold': ('minimum_threshold', 'minimumThreshold'),
    'batch_number': ('batch_number', 'batchNumber'),
    'quality_grade': ('quality_grade', 'qualityGrade'),
    'location': ('location',),
    'notes': ('notes',),
    'month': ('month',),
    'year': ('year',),
}

DATE_FIELDS = ('last_restocked', 'delivery_date', 'expiry_date')
DECIMAL_FIELDS = ('current_quantity', 'baseline_quantity', 'cost_per_unit', 'minimum_threshold')


class Command(BaseCommand):
    help = 'Import legacy feed inventory documents, mapping old alias keys to canonical fields'

    def add_arguments(self, parser):
        parser.add_argument('path', help='JSON array or JSON-lines export of the feedinventories collection')
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be imported without making changes',
        )

    def handle(self, *args, **options):
        documents = self.load_documents(options['path'])
        dry_run = options['dry_run']

        if dry_run:
            self.stdout.write(self.style.WARNING('DRY RUN - No changes will be made'))

        created = updated = skipped = 0
        with transaction.atomic():
            for index, document in enumerate(documents, start=1):
                try:
                    fields = self.map_document(document)
                except ValueError as exc:
                    skipped += 1
                    self.stdout.write(self.style.WARNING(f'  Skipping document {index}: {exc}'))
                    continue

                if dry_run:
                    self.stdout.write(f"  Would import {fields['feed_type']} {fields.get('month') or '(inventory)'}")
                    created += 1
                    continue

                if fields.get('month'):
                    _, was_created = FeedStock.objects.update_or_create(
                        feed_type=fields.pop('feed_type'),
                        month=fields.pop('month'),
                        defaults=fields,
                    )
                else:
                    FeedInventory.objects.create(**fields)
                    was_created = True

                if was_created:
                    created += 1
                else:
                    updated += 1

        verb = 'Would import' if dry_run else 'Imported'
        self.stdout.write(self.style.SUCCESS(
            f'{verb} {created} record(s), updated {updated}, skipped {skipped}'
        ))

    def load_documents(self, path):
        try:
            with open(path, encoding='utf-8') as handle:
                content = handle.read()
        except OSError as exc:
            raise CommandError(f'Cannot read {path}: {exc}')

        content = content.strip()
        if not content:
            return []

        try:
            if content.startswith('['):
                return json.loads(content)
            return [json.loads(line) for line in content.splitlines() if line.strip()]
        except json.JSONDecodeError as exc:
            raise CommandError(f'Invalid JSON in {path}: {exc}')

    def map_document(self, document):
        """Map one document onto canonical FeedStock fields; ValueError if unusable."""
        fields = {}
        for field, aliases in FIELD_ALIASES.items():
            for alias in aliases:
                value = document.get(alias)
                if value not in (None, ''):
                    fields[field] = value
                    break

        if fields.get('feed_type') not in FeedKind.values:
            raise ValueError(f"unknown feed type {fields.get('feed_type')!r}")
        for required in ('current_quantity', 'supplier', 'expiry_date'):
            if required not in fields:
                raise ValueError(f'missing {required}')

        for field in DATE_FIELDS:
            if field in fields:
                fields[field] = self.parse_document_date(fields[field])
                if fields[field] is None:
                    raise ValueError(f'invalid {field}')

        for field in DECIMAL_FIELDS:
            if field in fields:
                try:
                    fields[field] = calculations.to_decimal(fields[field])
                except InvalidOperation:
                    raise ValueError(f'invalid {field}')

        fields.setdefault('baseline_quantity', fields['current_quantity'])
        if fields.get('month') and 'year' not in fields:
            fields['year'] = int(fields['month'][:4])
        return fields

    def parse_document_date(self, value):
        # Exports wrap dates as {"$date": "..."}; stored strings may carry a time part
        if isinstance(value, dict):
            value = value.get('$date')
        if not isinstance(value, str):
            return None
        return parse_date(value[:10])
