"""
Management command to seed product storage with the example products.

Writes:
- The five example products (Laptop, T-Shirt, Coffee Maker, Headphones, Apples)
- Or an empty product list with --clear

Usage:
    python manage.py seed_data
    python manage.py seed_data --clear  # Store an empty product list instead
"""
from django.apps import apps
from django.core.management.base import BaseCommand

from inventory.models import seed_products


class Command(BaseCommand):
    help = 'Overwrite stored products with the example products'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Store an empty product list instead of the examples',
        )

    def handle(self, *args, **options):
        store = apps.get_app_config('inventory').store

        if options['clear']:
            store.reset([])
            self.stdout.write(self.style.WARNING('All stored products cleared.'))
            return

        products = seed_products()
        store.reset(products)
        self.stdout.write(
            self.style.SUCCESS(f'Seeded {len(products)} products under "{store.key}".')
        )
