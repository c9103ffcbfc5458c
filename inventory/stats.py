"""
Summary statistics shown above the product table.
"""
from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Iterable

from .models import ProductRecord

CENTS = Decimal('0.01')


@dataclass(frozen=True)
class InventoryStats:
    total_value: Decimal
    low_stock_count: int
    # Number of records, not number of distinct categories.
    record_count: int

    @property
    def rounded_total_value(self) -> str:
        return money_string(self.total_value)

    @property
    def formatted_total_value(self) -> str:
        return format_money(self.total_value)


def round_money(amount: Decimal) -> Decimal:
    """Round to cents however many digits the amount has."""
    # quantize fails when the result needs more digits than the context allows
    context = Context(prec=max(28, amount.adjusted() + 3))
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP, context=context)


def money_string(amount: Decimal) -> str:
    return f"{round_money(amount):f}"


def format_money(amount: Decimal) -> str:
    return f"${money_string(amount)}"


def compute_stats(records: Iterable[ProductRecord]) -> InventoryStats:
    """Recompute every figure from scratch."""
    total_value = Decimal('0')
    low_stock_count = 0
    record_count = 0

    for record in records:
        total_value += record.value
        if record.is_low_stock:
            low_stock_count += 1
        record_count += 1

    return InventoryStats(
        total_value=total_value,
        low_stock_count=low_stock_count,
        record_count=record_count,
    )
