"""
Serializers for the inventory dashboard.
Provides form validation and JSON conversion for API endpoints.
"""
from decimal import Decimal

from rest_framework import serializers

from .models import MAX_QUANTITY, SORTABLE_COLUMNS
from .query import ASCENDING, DESCENDING
from .stats import format_money, money_string


class ProductInputSerializer(serializers.Serializer):
    """Validates the add/edit product form."""
    barcode = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=200)
    category = serializers.CharField(max_length=100)
    quantity = serializers.IntegerField(min_value=0, max_value=MAX_QUANTITY)
    price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0'),
    )


class ProductRowSerializer(serializers.Serializer):
    """One table row, with display-ready price and stock status."""
    id = serializers.CharField(read_only=True)
    barcode = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    price = serializers.SerializerMethodField()
    display_price = serializers.SerializerMethodField()
    stock_status = serializers.SerializerMethodField()
    stock_label = serializers.SerializerMethodField()

    def get_price(self, obj):
        return money_string(obj.price)

    def get_display_price(self, obj):
        return format_money(obj.price)

    def get_stock_status(self, obj):
        return obj.stock_status.value

    def get_stock_label(self, obj):
        return obj.stock_status.label


class InventoryStatsSerializer(serializers.Serializer):
    """Summary figures; ``total_value`` is only rounded for display."""
    total_value = serializers.CharField(source='rounded_total_value', read_only=True)
    formatted_total_value = serializers.CharField(read_only=True)
    low_stock_count = serializers.IntegerField(read_only=True)
    record_count = serializers.IntegerField(read_only=True)


class SearchSerializer(serializers.Serializer):
    term = serializers.CharField(allow_blank=True, trim_whitespace=False, default='')


class CategoryFilterSerializer(serializers.Serializer):
    category = serializers.CharField(allow_blank=True, default='')


class SortSerializer(serializers.Serializer):
    column = serializers.ChoiceField(choices=SORTABLE_COLUMNS)


class ProductQuerySerializer(serializers.Serializer):
    """Query parameters for the stateless product list."""
    q = serializers.CharField(allow_blank=True, trim_whitespace=False, required=False, default='')
    category = serializers.CharField(allow_blank=True, required=False, default='')
    sort = serializers.ChoiceField(choices=SORTABLE_COLUMNS, required=False)
    direction = serializers.ChoiceField(
        choices=[ASCENDING, DESCENDING],
        required=False,
        default=ASCENDING,
    )
